"""Tests for the logging helper."""

import logging

from artmarket.infrastructure.logging import LOG_FORMAT, get_logger


def test_get_logger_configures_handler_once():
    logger = get_logger("artmarket.tests.helper")
    again = get_logger("artmarket.tests.helper", level=logging.DEBUG)

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT
