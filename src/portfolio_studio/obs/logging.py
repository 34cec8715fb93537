"""Logging utilities."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "PORTFOLIO_STUDIO_LOG_LEVEL"

_ROOT_LOGGER = "portfolio_studio"


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger once and set its level."""

    logger = logging.getLogger(_ROOT_LOGGER)
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Args:
        name: Logger name, usually `__name__`.
    """

    if name == _ROOT_LOGGER or name.startswith(_ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(_ROOT_LOGGER).getChild(name)
