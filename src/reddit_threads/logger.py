"""Application logger setup."""

from __future__ import annotations

import logging

LOGGER_NAME = "reddit_threads"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logger(log_level: str = "INFO") -> logging.Logger:
    """Set up the application logger. Call once at startup.

    Adds a console handler. If already set up (has handlers), only the
    level is updated and the existing logger is returned.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level.upper())

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the application logger, or one of its children."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
