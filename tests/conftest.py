"""Pytest fixtures for geosite-d2 tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable

import httpx
import pytest

from core.config import AppSettings
from core.domain.models import FetchResult


def make_transport(routes: dict[str, tuple[int, str]], calls: list[str] | None = None) -> httpx.MockTransport:
    """MockTransport answering `url -> (status, body)`; unknown URLs get 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(url)
        status, body = routes.get(url, (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


class DelayedFetcher:
    """`ListFetcher` fake: canned results returned after per-URL delays."""

    def __init__(self, results: dict[str, FetchResult], delays: dict[str, float] | None = None) -> None:
        self._results = results
        self._delays = delays or {}
        self.started: list[str] = []
        self.finished: list[str] = []
        self.started_at_first_finish: int | None = None

    async def fetch(self, url: str) -> FetchResult:
        self.started.append(url)
        await asyncio.sleep(self._delays.get(url, 0))
        if self.started_at_first_finish is None:
            self.started_at_first_finish = len(self.started)
        self.finished.append(url)
        return self._results[url]


@pytest.fixture(scope="function")
def settings_factory(tmp_path: Path, monkeypatch) -> Callable[..., AppSettings]:
    """Settings rooted in tmp_path, isolated from the developer's .env files."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    def factory(url_lines: list[str] | None = None, **overrides) -> AppSettings:
        url_file = tmp_path / "urls.txt"
        if url_lines is not None:
            url_file.write_text("\n".join(url_lines) + "\n", encoding="utf-8")
        values = {
            "url_file": url_file,
            "output_dir": tmp_path / "output",
            "output_name": "geosite.dat",
        }
        values.update(overrides)
        return AppSettings(**values)

    return factory
