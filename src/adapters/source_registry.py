"""Source list loading.

Format (UTF-8, one source per line):

    # comment
    CN,https://example.org/cn.txt

Blank and `#` lines are ignored. A malformed line is reported and skipped;
it never stops the rest of the file from loading.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from core.domain.models import Source, SourceLoadResult
from core.errors import ConfigError, MalformedSource

log = logging.getLogger(__name__)


def parse_source_line(line: str, *, line_number: int | None = None) -> Source:
    """Parse one `label,url` line.

    Raises `MalformedSource` when the line does not have exactly two
    comma-separated fields or either field is blank.
    """

    parts = line.split(",")
    if len(parts) != 2:
        raise MalformedSource(line, "expected `label,url`", line_number=line_number)

    label = parts[0].strip()
    url = parts[1].strip()
    if not label:
        raise MalformedSource(line, "label must not be empty", line_number=line_number)
    if not url:
        raise MalformedSource(line, "url must not be empty", line_number=line_number)

    return Source(label=label, url=url, line_number=line_number)


def parse_sources(lines: Iterable[str]) -> SourceLoadResult:
    result = SourceLoadResult()
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            result.sources.append(parse_source_line(line, line_number=line_number))
        except MalformedSource as exc:
            log.warning("invalid source config: %s", exc)
            result.errors.append(exc)
    return result


def load_sources(path: Path) -> SourceLoadResult:
    """Read and parse the source list at `path`.

    Raises `ConfigError` if the file cannot be read.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot open source list {path}: {exc}") from exc

    result = parse_sources(text.split("\n"))
    log.debug("loaded %d source(s) from %s (%d rejected)", len(result.sources), path, len(result.errors))
    return result
