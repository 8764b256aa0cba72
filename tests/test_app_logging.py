"""Tests for logging configuration."""

import logging

from backoffice.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("backoffice")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_module_loggers_inherit_backoffice_handler() -> None:
    configure_logging(logging.DEBUG)

    child = logging.getLogger("backoffice.services.auth")

    assert child.getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("backoffice").propagate is False
