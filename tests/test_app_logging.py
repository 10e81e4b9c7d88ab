"""Tests for logging configuration."""

import logging

from nutriai.app_logging import configure_logging
from nutriai.services.notifications import LoggingNotifier, Notice, NoticeLevel


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("nutriai")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert not logger.propagate


def test_logging_notifier_maps_levels(caplog) -> None:  # type: ignore[no-untyped-def]
    logger = logging.getLogger("nutriai")
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="nutriai"):
            LoggingNotifier().notify(Notice(NoticeLevel.ERROR, "Failed to load"))
            LoggingNotifier().notify(Notice(NoticeLevel.SUCCESS, "Saved"))
    finally:
        logger.propagate = False

    levels = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert (logging.ERROR, "Failed to load") in levels
    assert (logging.INFO, "Saved") in levels
