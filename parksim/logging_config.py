"""Opt-in logging for parksim.

Every module logs to a child of the ``parksim`` logger: the engine under
``parksim.core.engine``, zone decisions under ``parksim.facility.allocation``
and generator seeding under ``parksim.prng.provider``. Only a NullHandler is
attached on import, so a simulated day prints nothing until one of the
helpers below installs a handler.

What each level shows:
    INFO     configure/start/pause/reset/finish and chi-square results
    DEBUG    every arrival, rejection and departure, with its space
    WARNING  a seedable generator started without a seed

Environment variables, read by ``configure_from_env`` (and so by
``python -m parksim``):
    PARKSIM_LOGGING   level name
    PARKSIM_LOG_FILE  log to this rotating file instead of stderr
    PARKSIM_LOG_JSON  "1" for one JSON object per line
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]

LOGGER_NAME = "parksim"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# A DEBUG-level day is a few thousand lines.
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Example output:
        {"timestamp": "2024-01-15T10:30:00.123456+00:00", "level": "DEBUG",
         "logger": "parksim.facility.allocation",
         "message": "V-7 parked in internal space I-3 for 284 min"}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _level(level: LogLevel | str | int) -> int:
    """Resolve a level name or number.

    Raises:
        ValueError: For an unknown level name.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelNamesMapping().get(level.upper())
    if value is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _package_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _handler_for(path: str | Path | None, max_bytes: int, backup_count: int) -> logging.Handler:
    """stderr when ``path`` is None, otherwise a rotating file under ``path``."""
    if path is None:
        return logging.StreamHandler()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)


def _install(handler: logging.Handler, formatter: logging.Formatter, level: LogLevel | int) -> logging.Handler:
    logger = _package_logger()
    handler.setFormatter(formatter)
    handler.setLevel(_level(level))
    logger.setLevel(_level(level))
    logger.addHandler(handler)
    return handler


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
) -> logging.StreamHandler:
    """Print parksim records to stderr.

    Args:
        level: Level name or number; "DEBUG" shows every vehicle.
        format: ``logging.Formatter`` format string.

    Returns:
        The installed handler.
    """
    return _install(logging.StreamHandler(), logging.Formatter(format), level)


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    format: str = DEFAULT_FORMAT,
) -> RotatingFileHandler:
    """Write parksim records to a rotating log file.

    Args:
        path: Log file; missing parent directories are created.
        level: Level name or number.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files kept alongside ``path``.
        format: ``logging.Formatter`` format string.

    Returns:
        The installed handler.
    """
    handler = _handler_for(path, max_bytes, backup_count)
    return _install(handler, logging.Formatter(format), level)


def enable_json_logging(
    level: LogLevel | int = "INFO",
    path: str | Path | None = None,
) -> logging.Handler:
    """Emit parksim records as JSON lines, to stderr or to a rotating file."""
    handler = _handler_for(path, DEFAULT_MAX_BYTES, DEFAULT_BACKUP_COUNT)
    return _install(handler, JsonFormatter(), level)


def configure_from_env() -> logging.Handler | None:
    """Install a handler described by the PARKSIM_* variables.

    Returns:
        The installed handler, or None when neither PARKSIM_LOGGING nor
        PARKSIM_LOG_FILE is set.
    """
    level = os.environ.get("PARKSIM_LOGGING", "").strip()
    path = os.environ.get("PARKSIM_LOG_FILE", "").strip() or None
    if not level and path is None:
        return None

    level = level or "INFO"
    if os.environ.get("PARKSIM_LOG_JSON") == "1":
        return enable_json_logging(level, path=path)
    if path is not None:
        return enable_file_logging(path, level=level)
    return enable_console_logging(level=level)


def set_level(level: LogLevel | int) -> None:
    """Change the threshold of the ``parksim`` logger, keeping its handlers."""
    _package_logger().setLevel(_level(level))


def disable_logging() -> None:
    """Close every installed handler and silence parksim."""
    logger = _package_logger()
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
