"""End-to-end build: source list -> concurrent fetch -> aggregate -> geosite.dat.

The CLI delegates the whole flow to `build`, which keeps printing and exit
codes out of the core logic. Errors follow one rule: configuration problems
stop the run before any download; per-source problems are collected and
escalated as a single `BatchFetchError` once every download has finished.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from adapters.geosite_encoder import encode, write
from adapters.source_registry import load_sources
from core.config import AppSettings
from core.domain.models import BuildReport
from core.errors import BatchFetchError, ConfigError, GeositeError
from core.interfaces.fetcher import ListFetcher
from core.services.aggregator import aggregate
from core.services.fetch_orchestrator import orchestrate

log = logging.getLogger(__name__)


async def build(
    settings: AppSettings,
    *,
    client: httpx.AsyncClient | None = None,
    fetcher: ListFetcher | None = None,
) -> BuildReport:
    loaded = load_sources(settings.url_file)

    try:
        settings.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"cannot create output directory {settings.output_dir}: {exc}") from exc

    fetched = await orchestrate(loaded.sources, settings=settings, client=client, fetcher=fetcher)

    errors: list[GeositeError] = [*loaded.errors, *fetched.errors]
    if errors:
        raise BatchFetchError(errors)

    db = aggregate(fetched.outcomes)
    data = encode(db, domain_type=settings.domain_type)
    output_path = write(data, settings.output_path)
    log.debug("encoded %d group(s), %d domain(s)", len(db.groups), db.domain_count)

    return BuildReport(
        output_path=output_path,
        groups={label: len(db.groups[label]) for label in db.labels()},
        domain_count=db.domain_count,
        warnings=[w for outcome in fetched.outcomes for w in outcome.warnings],
    )


def run_build(settings: AppSettings, *, fetcher: ListFetcher | None = None) -> BuildReport:
    """Blocking wrapper used by the CLI."""

    return asyncio.run(build(settings, fetcher=fetcher))
