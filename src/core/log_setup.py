"""Logging configuration for the CLI.

Library modules only create `log = logging.getLogger(__name__)`; the entry
point decides level and handler once.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def resolve_log_level(verbose: int = 0, quiet: int = 0) -> int:
    """INFO by default; each -v lowers and each -q raises one step."""

    level = logging.INFO - (10 * int(verbose)) + (10 * int(quiet))
    return max(logging.DEBUG, min(logging.ERROR, level))


def configure_logging(verbose: int = 0, quiet: int = 0, *, console: Console | None = None) -> int:
    """Install a Rich handler on the root logger (only once) and set the level."""

    effective_level = resolve_log_level(verbose, quiet)
    root_logger = logging.getLogger()
    root_logger.setLevel(effective_level)
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    # httpx logs every request at INFO; only show them with -v.
    logging.getLogger("httpx").setLevel(logging.DEBUG if effective_level <= logging.DEBUG else logging.WARNING)
    return effective_level
