"""Logging setup for journalsync entry points."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "JOURNALSYNC_LOG_LEVEL"
# these log one line per request at INFO
_HTTP_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Configure the root logger for a sync run.

    ``level`` falls back to ``JOURNALSYNC_LOG_LEVEL`` and then to INFO. HTTP client
    loggers stay at WARNING unless DEBUG is requested.
    """

    resolved = _resolve_level(level)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if resolved > logging.DEBUG:
        for name in _HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _resolve_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").strip().upper()
    levels = logging.getLevelNamesMapping()
    if name not in levels:
        raise ConfigurationError(f"Unknown log level: {name}")
    return levels[name]
