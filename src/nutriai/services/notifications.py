"""User-visible notices."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

_logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A short message shown to the user."""

    level: NoticeLevel
    message: str


class Notifier(Protocol):
    """Surface that shows notices to the user."""

    def notify(self, notice: Notice) -> None:
        """Show a notice."""


def success(notifier: Notifier, message: str) -> None:
    notifier.notify(Notice(NoticeLevel.SUCCESS, message))


def info(notifier: Notifier, message: str) -> None:
    notifier.notify(Notice(NoticeLevel.INFO, message))


def warning(notifier: Notifier, message: str) -> None:
    notifier.notify(Notice(NoticeLevel.WARNING, message))


def error(notifier: Notifier, message: str) -> None:
    notifier.notify(Notice(NoticeLevel.ERROR, message))


_LOG_LEVELS = {
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that writes notices to the application log."""

    def notify(self, notice: Notice) -> None:
        _logger.log(_LOG_LEVELS[notice.level], "%s", notice.message)
