from __future__ import annotations

import logging
import sys
from typing import IO, Optional

PACKAGE_LOGGER = "adoc_reducer"
DEFAULT_FORMAT = "adoc-reducer: %(levelname)s: %(message)s"

_LEVEL_ALIASES = {
    "warn": "WARNING",
    "fatal": "CRITICAL",
}

_INSTALLED_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    key = _LEVEL_ALIASES.get(name.strip().lower(), name.strip().upper())
    level = logging.getLevelName(key)
    if isinstance(level, int):
        return level
    raise ValueError(f"unknown log level: {name}")


def configure_stdlib_logging(
    *,
    level: Optional[str] = "warn",
    stream: Optional[IO[str]] = None,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """Send package log records to ``stream`` (stderr by default).

    Only the ``adoc_reducer`` logger is touched, so applications embedding the
    library keep control of the root logger. Calling again replaces the
    handler installed by the previous call.

    Args:
        level: Level name (``debug``, ``info``, ``warn``, ``error``, ``fatal``).
            ``None`` silences the package logger.
        stream: Stream for the handler.
        fmt: Record format.
    """
    global _INSTALLED_HANDLER

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    if level is None:
        handler: logging.Handler = logging.NullHandler()
        logger.setLevel(logging.CRITICAL + 1)
    else:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        logger.setLevel(_level_from_name(level))

    logger.addHandler(handler)
    logger.propagate = False
    _INSTALLED_HANDLER = handler


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed handler and restore defaults."""
    global _INSTALLED_HANDLER
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
