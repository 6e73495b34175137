"""Tests for the plain-text list downloader (httpx MockTransport)."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from adapters.list_fetcher import HttpListFetcher, fetch_list
from conftest import make_transport
from core.domain.models import FetchResult
from core.errors import FetchFailed
from core.interfaces.fetcher import ListFetcher

URL = "https://lists.example/cn.txt"


def _fetch(transport: httpx.AsyncBaseTransport, url: str = URL) -> FetchResult:
    async def go() -> FetchResult:
        async with httpx.AsyncClient(transport=transport) as client:
            return await fetch_list(url, client=client)

    return asyncio.run(go())


class _ChunkedStream(httpx.AsyncByteStream):
    """Body delivered in the given chunks."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk


class _BrokenStream(httpx.AsyncByteStream):
    """Body that fails after sending some chunks."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk
        raise httpx.ReadError("connection reset by peer")


def test_fetch_list_filters_comments_and_normalizes_case(caplog):
    body = "baidu.com\n#comment\nBAD_DOMAIN\n"
    caplog.set_level(logging.WARNING)

    result = _fetch(make_transport({URL: (200, body)}))

    assert result.error is None
    assert result.domains == ["baidu.com"]
    assert [(w.line_number, w.text) for w in result.warnings] == [(3, "BAD_DOMAIN")]
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(messages) == 1
    assert "line 3" in messages[0] and "BAD_DOMAIN" in messages[0]


def test_fetch_list_tolerates_invalid_lines():
    lines = [f"site{i}.example.com" for i in range(1, 11)]
    lines[2] = "-bad.example.com"
    lines[6] = "under_score.example.com"

    result = _fetch(make_transport({URL: (200, "\n".join(lines) + "\n")}))

    assert result.error is None
    assert len(result.domains) == 8
    assert [w.line_number for w in result.warnings] == [3, 7]
    assert [w.text for w in result.warnings] == ["-bad.example.com", "under_score.example.com"]


def test_fetch_list_keeps_source_order_and_lowercases():
    body = "  Zeta.Example  \r\nalpha.example\n// note\n! note\n\nMIDDLE.example\n"

    result = _fetch(make_transport({URL: (200, body)}))

    assert result.domains == ["zeta.example", "alpha.example", "middle.example"]
    assert result.warnings == []


def test_fetch_list_normalization_is_idempotent():
    body = "Example.COM\nWWW.Example.org\n"
    once = _fetch(make_transport({URL: (200, body)}))
    twice = _fetch(make_transport({URL: (200, "\n".join(once.domains) + "\n")}))

    assert twice.domains == once.domains
    assert twice.warnings == []


@pytest.mark.parametrize("status", [404, 500, 301])
def test_fetch_list_non_success_status_is_hard_error(status: int):
    # The test client does not follow redirects, so 301 is final here.
    result = _fetch(make_transport({URL: (status, "example.com\n")}))

    assert isinstance(result.error, FetchFailed)
    assert result.error.url == URL
    assert str(status) in str(result.error)
    assert result.domains == []


def test_fetch_list_transport_failure_is_hard_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _fetch(httpx.MockTransport(handler))

    assert isinstance(result.error, FetchFailed)
    assert isinstance(result.error.cause, httpx.ConnectError)
    assert result.domains == []


def test_fetch_list_read_error_returns_partial_domains():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_BrokenStream([b"one.example\ntwo.example\n", b"thr"]))

    result = _fetch(httpx.MockTransport(handler))

    assert result.domains == ["one.example", "two.example"]
    assert isinstance(result.error, FetchFailed)
    assert "reading response body" in str(result.error)


def test_http_list_fetcher_satisfies_contract():
    async def go() -> FetchResult:
        async with httpx.AsyncClient(transport=make_transport({URL: (200, "a.example\n")})) as client:
            fetcher = HttpListFetcher(client)
            assert isinstance(fetcher, ListFetcher)
            return await fetcher.fetch(URL)

    assert asyncio.run(go()).domains == ["a.example"]


@pytest.mark.parametrize(
    "body, domains, warnings",
    [
        pytest.param(
            "a.example\x0cb.example\nBAD\n",
            [],
            [(1, "a.example\x0cb.example"), (2, "BAD")],
            id="form_feed",
        ),
        pytest.param(
            "good.example\u2028tail.example\nsecond.example\nBAD_ONE\n",
            ["second.example"],
            [(1, "good.example\u2028tail.example"), (3, "BAD_ONE")],
            id="line_separator",
        ),
        pytest.param(
            "one.example\r\nBAD\r\nlast.example",
            ["one.example", "last.example"],
            [(2, "BAD")],
            id="crlf_without_final_newline",
        ),
    ],
)
def test_fetch_list_splits_on_newline_only(body: str, domains: list[str], warnings: list[tuple[int, str]]):
    result = _fetch(make_transport({URL: (200, body)}))

    assert result.error is None
    assert result.domains == domains
    assert [(w.line_number, w.text) for w in result.warnings] == warnings


def test_fetch_list_joins_lines_split_across_chunks():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_ChunkedStream([b"first.exa", b"mple\r", b"\nsecond.example\n"]))

    result = _fetch(httpx.MockTransport(handler))

    assert result.domains == ["first.example", "second.example"]
    assert result.warnings == []
