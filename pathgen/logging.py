"""Logger hierarchy and handler setup shared by the pathgen CLI and service."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER = "pathgen"
LEVEL_ENV = "PATHGEN_LOG_LEVEL"
LOG_FILE_ENV = "PATHGEN_LOG_FILE"

CONSOLE_FORMAT = "[pathgen] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return `pathgen.<name>`, or the package logger itself when `name` is empty."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Pick the effective level: flags first, then `PATHGEN_LOG_LEVEL`, then INFO."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    configured = os.getenv(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(configured) if configured else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def _build_handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install console and optional file handlers on the package logger.

    Any handlers from an earlier call are replaced. When `log_file` is omitted
    the `PATHGEN_LOG_FILE` environment variable may name one.
    """
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    logger.addHandler(
        _build_handler(logging.StreamHandler(stream or sys.stderr), level, CONSOLE_FORMAT)
    )

    target = log_file or (Path(os.environ[LOG_FILE_ENV]) if os.getenv(LOG_FILE_ENV) else None)
    if target is not None:
        logger.addHandler(
            _build_handler(logging.FileHandler(target, encoding="utf-8"), level, FILE_FORMAT)
        )
    return logger


__all__ = ["configure_logging", "get_logger", "resolve_level"]
