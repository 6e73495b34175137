"""Error taxonomy for the build.

Fatal conditions (`ConfigError`, `BatchFetchError`, `EncodeError`,
`WriteError`) stop the run and are reported once by the CLI. `MalformedSource`
and `FetchFailed` are collected as values and only escalated by the build
pipeline once every fetch has completed.
"""

from __future__ import annotations

from typing import Sequence


class GeositeError(Exception):
    """Base class for every error raised by geosite-d2."""


class ConfigError(GeositeError):
    """The source list cannot be read or the output directory cannot be created."""


class MalformedSource(GeositeError):
    """A configuration line is not a valid `label,url` pair."""

    def __init__(self, line: str, reason: str, *, line_number: int | None = None) -> None:
        self.line = line
        self.reason = reason
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason}: {line!r}")


class FetchFailed(GeositeError):
    """A list download failed (transport, HTTP status or mid-stream read)."""

    def __init__(self, url: str, cause: str | BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"failed to download list {url}: {cause}")


class BatchFetchError(GeositeError):
    """One or more sources failed; raised after all fetches have finished."""

    def __init__(self, errors: Sequence[GeositeError]) -> None:
        self.errors = list(errors)
        details = "; ".join(str(err) for err in self.errors)
        super().__init__(f"{len(self.errors)} error(s) while processing sources: {details}")


class EncodeError(GeositeError):
    """The aggregated database cannot be serialized."""


class WriteError(GeositeError):
    """The serialized database cannot be written to disk."""
