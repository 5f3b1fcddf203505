"""Logging setup shared by the console entry point and library modules.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached once, to the ``term_ai`` logger, by ``configure_logging``.  Records
go to stderr so stdout carries nothing but the generated commands.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "term_ai"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.ERROR)


def configure_logging(level: Union[str, int] = "ERROR", stream=None) -> logging.Logger:
    """Attach a single stderr handler to the package logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_coerce_level(level))
    logger.propagate = False

    for handler in list(logger.handlers):
        if getattr(handler, "_term_ai_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._term_ai_handler = True
    logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package namespace."""
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
