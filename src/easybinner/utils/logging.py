"""
Logging for easybinner.

Engine modules log through ``get_logger(__name__)``: bin plan summaries at
DEBUG, rejected bin sizes and tolerated settings at WARNING. The package
installs a NullHandler, so nothing is printed unless the host application
configures logging or a script calls ``configure_logging()``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "easybinner"

# Read when configure_logging() is called without a level.
LOG_LEVEL_ENV_VAR = "EASYBINNER_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Optional[Union[str, int]]) -> int:
    """Level number for a name or number; None reads EASYBINNER_LOG_LEVEL, unknown names give INFO."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def _has_stderr_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, logging.StreamHandler) and h.stream is sys.stderr for h in logger.handlers)


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Send easybinner logs to stderr. For scripts; never called by the engine.

    Only the ``easybinner`` logger is touched, the root logger is left alone.
    A second call is a no-op unless ``force`` is set, in which case existing
    handlers are closed and replaced.

    Args:
        level: Level name or number. Defaults to EASYBINNER_LOG_LEVEL, else INFO.
        fmt: Record format. Defaults to DEFAULT_FMT.
        datefmt: Timestamp format. Defaults to DEFAULT_DATEFMT.
        force: Replace existing handlers instead of keeping them.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level_no = resolve_level(level)
    logger.setLevel(level_no)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    elif _has_stderr_handler(logger):
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level_no)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger ``name``, or the package logger when name is None."""
    return logging.getLogger(name or ROOT_LOGGER_NAME)
