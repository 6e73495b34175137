"""Contract for list downloaders."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import FetchResult


@runtime_checkable
class ListFetcher(Protocol):
    """Minimal contract for something that downloads one domain list.

    - `fetch` is async because it performs network I/O.
    - Failures are reported through `FetchResult.error`, not raised.
    """

    async def fetch(self, url: str) -> FetchResult:
        """Download `url` and return its validated, lower-cased domains."""

        ...
