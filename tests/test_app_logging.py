"""Tests for logging configuration."""

import logging

from food_keeper.app_logging import LOGGER_NAME, configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.propagate is False
    assert logger.level == logging.DEBUG


def test_configure_logging_quiets_httpx() -> None:
    configure_logging("warning")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING
