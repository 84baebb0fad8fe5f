"""Logging utilities for componentry."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConfigError

_LOGGER_NAME = "componentry"
_CONSOLE_FORMAT = "[componentry] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the componentry hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(level: str | int | None = None, *, verbose: bool = False) -> int:
    """Map a ``logging.level`` config value to a numeric level.

    ``verbose`` wins over ``level``; no level means WARNING.
    """
    if verbose:
        return logging.DEBUG
    if level is None:
        return logging.WARNING
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level '{level}'")
    return value


def configure_logging(
    *,
    verbose: bool = False,
    level: str | int | None = None,
    log_file: Path | str | None = None,
) -> logging.Logger:
    """Point the componentry logger at stderr and, optionally, a log file."""
    resolved = resolve_level(level, verbose=verbose)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(resolved)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "resolve_level"]
