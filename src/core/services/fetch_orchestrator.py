"""Concurrent download of every configured source.

One asyncio task per source, all started at once. Workers hand their
outcome to an unbounded queue (`put_nowait`, so a slow consumer never blocks
a producer); a coordinator task waits for every worker and only then closes
the stream with a sentinel. Failures are collected into the batch error list
and returned; siblings are never cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, cast

import httpx

from adapters.http_client import build_async_client
from adapters.list_fetcher import HttpListFetcher
from core.config import AppSettings
from core.domain.models import FetchOutcome, FetchResult, OrchestrationResult, Source
from core.errors import FetchFailed
from core.interfaces.fetcher import ListFetcher

log = logging.getLogger(__name__)

_END_OF_STREAM = object()


async def orchestrate(
    sources: Iterable[Source],
    *,
    settings: AppSettings | None = None,
    client: httpx.AsyncClient | None = None,
    fetcher: ListFetcher | None = None,
) -> OrchestrationResult:
    """Fetch every source concurrently; one outcome per source.

    `fetcher` wins over `client`; with neither, a client is built from
    `settings` and closed afterwards.
    """

    sources = list(sources)
    if fetcher is not None:
        return await _fan_out(sources, fetcher)
    if client is not None:
        return await _fan_out(sources, HttpListFetcher(client))

    async with build_async_client(settings) as owned_client:
        return await _fan_out(sources, HttpListFetcher(owned_client))


async def _fan_out(sources: list[Source], fetcher: ListFetcher) -> OrchestrationResult:
    queue: asyncio.Queue[object] = asyncio.Queue()

    async def work(source: Source) -> None:
        log.info("processing list %s: %s", source.label, source.url)
        try:
            fetched = await fetcher.fetch(source.url)
        except Exception as exc:  # a broken fetcher must still yield an outcome
            fetched = FetchResult(error=FetchFailed(source.url, exc))
        queue.put_nowait(
            FetchOutcome(
                label=source.label,
                url=source.url,
                domains=fetched.domains,
                warnings=fetched.warnings,
                error=fetched.error,
            )
        )

    workers = [asyncio.create_task(work(source)) for source in sources]

    async def close_when_done() -> None:
        try:
            finished = await asyncio.gather(*workers, return_exceptions=True)
            for source, status in zip(sources, finished):
                if isinstance(status, BaseException):
                    queue.put_nowait(
                        FetchOutcome(
                            label=source.label,
                            url=source.url,
                            error=FetchFailed(source.url, status),
                        )
                    )
        finally:
            queue.put_nowait(_END_OF_STREAM)

    coordinator = asyncio.create_task(close_when_done())

    result = OrchestrationResult()
    while True:
        item = await queue.get()
        if item is _END_OF_STREAM:
            break
        outcome = cast(FetchOutcome, item)
        result.outcomes.append(outcome)
        if outcome.error is not None:
            log.error("failed to download list %s: %s", outcome.label, outcome.error)
            result.errors.append(outcome.error)

    await coordinator
    return result


def run_orchestration(
    sources: Iterable[Source],
    *,
    settings: AppSettings | None = None,
    fetcher: ListFetcher | None = None,
) -> OrchestrationResult:
    """Blocking wrapper around `orchestrate` for synchronous callers."""

    return asyncio.run(orchestrate(sources, settings=settings, fetcher=fetcher))
