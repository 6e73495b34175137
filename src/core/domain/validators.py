"""Domain-name syntax checks.

Pure functions shared by the list fetcher and the tests. They never raise:
anything that is not a well-formed host name simply returns False.
"""

from __future__ import annotations

import re

MAX_DOMAIN_LENGTH = 253

COMMENT_PREFIXES: tuple[str, ...] = ("#", "//", "!")

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
_DOMAIN_RE = re.compile(rf"(?:{_LABEL}\.)+{_LABEL}")


def is_valid_domain(value: object) -> bool:
    """Return True when `value` is a syntactically valid domain name.

    Rules:
    - at most 253 characters
    - two or more dot-separated labels of 1-63 ASCII letters, digits or
      interior hyphens
    """

    if not isinstance(value, str):
        return False
    if len(value) > MAX_DOMAIN_LENGTH:
        return False
    return _DOMAIN_RE.fullmatch(value) is not None


def normalize_line(raw: str) -> str | None:
    """Trim a list line; None for blank lines and comments."""

    line = raw.strip()
    if not line or line.startswith(COMMENT_PREFIXES):
        return None
    return line
