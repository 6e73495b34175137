"""Plain-text domain list downloader.

Reads a remote list line by line, skips blanks and comments (`#`, `//`,
`!`), lower-cases every candidate and keeps the ones that pass
`is_valid_domain`. A bad line only produces a warning; a failed request
produces a `FetchFailed` in the result.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx

from core.domain.models import DomainWarning, FetchResult
from core.domain.validators import is_valid_domain, normalize_line
from core.errors import FetchFailed
from core.interfaces.fetcher import ListFetcher

log = logging.getLogger(__name__)


async def _physical_lines(response: httpx.Response) -> AsyncIterator[str]:
    r"""Split the body on `\n` only, dropping one trailing `\r` per line."""

    pending = ""
    async for chunk in response.aiter_text():
        pending += chunk
        *complete, pending = pending.split("\n")
        for line in complete:
            yield line.removesuffix("\r")
    if pending:
        yield pending.removesuffix("\r")


async def fetch_list(url: str, *, client: httpx.AsyncClient) -> FetchResult:
    """Download one list and validate each line.

    Returns the valid domains in file order. On a read error after a
    successful status, the domains collected so far are returned together
    with the error.
    """

    result = FetchResult()
    try:
        async with client.stream("GET", url) as response:
            if not response.is_success:
                result.error = FetchFailed(url, f"status code {response.status_code}")
                return result

            line_number = 0
            try:
                async for raw_line in _physical_lines(response):
                    line_number += 1
                    line = normalize_line(raw_line)
                    if line is None:
                        continue

                    domain = line.lower()
                    if is_valid_domain(domain):
                        result.domains.append(domain)
                        continue

                    log.warning("skipping invalid domain at line %d of %s: %s", line_number, url, line)
                    result.warnings.append(DomainWarning(line_number=line_number, text=line, url=url))
            except httpx.HTTPError as exc:
                result.error = FetchFailed(url, f"error reading response body: {exc}")
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        if result.error is None:
            result.error = FetchFailed(url, exc)

    return result


class HttpListFetcher(ListFetcher):
    """`ListFetcher` backed by a shared `httpx.AsyncClient`."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> FetchResult:
        return await fetch_list(url, client=self._client)
