"""Shared pytest fixtures."""

from __future__ import annotations

import logging

import pytest

from reddit_threads.logger import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers the CLI attaches so later tests don't log to a closed stream."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
