"""Logging setup for the daylist service."""

from __future__ import annotations

import logging
import os
from typing import Final

_DEFAULT_LEVEL: Final[int] = logging.INFO
_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

# httpx logs every outbound request at INFO, which buries our own messages.
_CHATTY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def resolve_log_level(raw: str | None) -> int:
    """Translate a LOG_LEVEL value (name or number) into a logging level."""
    value = (raw or "").strip().upper()
    if not value:
        return _DEFAULT_LEVEL
    if value == "WARN":
        value = "WARNING"
    named = logging.getLevelNamesMapping().get(value)
    if named is not None:
        return named
    try:
        return int(value)
    except ValueError:
        return _DEFAULT_LEVEL


def setup_logging(level: int | None = None) -> None:
    """Configure root logging once and tame third-party HTTP loggers.

    Args:
        level: Log level to use. If None, reads LOG_LEVEL from the
               environment, falling back to INFO.
    """
    if level is None:
        level = resolve_log_level(os.getenv("LOG_LEVEL"))

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
    else:
        logging.basicConfig(level=level, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


__all__ = ["resolve_log_level", "setup_logging"]
