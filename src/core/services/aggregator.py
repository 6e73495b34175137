"""Merge fetch outcomes into the label -> domains database."""

from __future__ import annotations

import logging
from typing import Iterable

from core.domain.models import AggregatedDatabase, FetchOutcome

log = logging.getLogger(__name__)


def aggregate(outcomes: Iterable[FetchOutcome]) -> AggregatedDatabase:
    """Keep error-free outcomes only; a repeated label replaces the earlier one.

    No ordering is imposed here; the encoder sorts labels.
    """

    groups: dict[str, list[str]] = {}
    for outcome in outcomes:
        if not outcome.ok:
            continue
        if outcome.label in groups:
            log.debug("label %s listed more than once; keeping %s", outcome.label, outcome.url)
        groups[outcome.label] = list(outcome.domains)
    return AggregatedDatabase(groups=groups)
