"""Logger helpers for cutofftrends.

Modules get their logger with ``get_logger(__name__)`` and never touch
handlers. ``configure_logging()`` is for demo scripts that want derivation
counts and registry rejections on stderr; a host application that already
configured logging should not call it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "cutofftrends"

# Environment variable consulted when configure_logging() gets no level.
LOG_LEVEL_ENV = "CUTOFFTRENDS_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    """Level name or number; unknown names fall back to INFO."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        return getattr(logging, level.strip().upper(), logging.INFO)
    return int(level)


def _stderr_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
            return h
    return None


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Send cutofftrends records to stderr. The root logger is left alone.

    Args:
        level: Level name or number. None reads CUTOFFTRENDS_LOG_LEVEL (default INFO).
        fmt: Record format, DEFAULT_FMT if None.
        datefmt: Timestamp format, DEFAULT_DATEFMT if None.
        force: Drop every existing handler on the package logger first. Without
            it, a second call only updates the level of the stderr handler
            already attached.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved)

    if force:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
    else:
        existing = _stderr_handler(logger)
        if existing is not None:
            existing.setLevel(resolved)
            return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger ``name``, or the package logger when name is None."""
    return logging.getLogger(name or PACKAGE_LOGGER)
