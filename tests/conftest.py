"""Shared fixtures."""

import logging

import pytest

from flou.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logger():
    """Undo ``configure_logger`` so log capture keeps working across tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
