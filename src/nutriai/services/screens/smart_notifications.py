"""Notification inbox with its reminder settings and delivery channels."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.inbox import (
    DEFAULT_INBOX_CHANNELS,
    DEFAULT_INBOX_SETTINGS,
    InboxNotification,
)
from nutriai.domain.screens import InboxTab
from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notifier, error, success

_logger = logging.getLogger(__name__)

NOTIFICATIONS_PATH = "/api/notifications"
SETTINGS_PATH = "/api/notifications/settings"
CHANNELS_PATH = "/api/notifications/channels"
HOURS_PER_DAY = 24


def _now() -> datetime:
    return datetime.now(tz=UTC)


def relative_time(time: str, now: datetime) -> str:
    """Render an ISO timestamp as "N minutes/hours/days ago".

    Unparseable timestamps render as an empty string.
    """
    try:
        moment = datetime.fromisoformat(time)
    except ValueError:
        return ""
    if (moment.tzinfo is None) != (now.tzinfo is None):
        moment = moment.replace(tzinfo=now.tzinfo)
    minutes = max(int((now - moment).total_seconds() // 60), 0)
    hours = minutes // 60
    if hours < 1:
        return f"{minutes} minutes ago"
    if hours < HOURS_PER_DAY:
        return f"{hours} hours ago"
    return f"{hours // HOURS_PER_DAY} days ago"


@dataclass
class SmartNotificationsController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    now: Callable[[], datetime] = _now
    tab: InboxTab = InboxTab.NOTIFICATIONS
    notifications: list[InboxNotification] = field(default_factory=list)
    settings: dict[str, bool] = field(
        default_factory=lambda: dict(DEFAULT_INBOX_SETTINGS)
    )
    channels: dict[str, bool] = field(
        default_factory=lambda: dict(DEFAULT_INBOX_CHANNELS)
    )

    async def load(self) -> None:
        """Fetch the inbox; an unreachable backend shows sample notifications."""
        try:
            body = await self.api.get(NOTIFICATIONS_PATH)
        except ApiError:
            _logger.warning("Loading notifications failed", exc_info=True)
            self.notifications = self.fallback.inbox_notifications(self.now())
            return
        raw = body.get("notifications")
        self.notifications = [
            InboxNotification.from_payload(item)
            for item in raw or []
            if isinstance(item, dict)
        ]

    async def load_settings(self) -> None:
        try:
            body = await self.api.get(SETTINGS_PATH)
        except ApiError:
            _logger.warning("Loading notification settings failed", exc_info=True)
            return
        if isinstance(body.get("settings"), dict):
            self.settings = dict(body["settings"])
        if isinstance(body.get("channels"), dict):
            self.channels = dict(body["channels"])

    async def mark_as_read(self, notification_id: int | str) -> None:
        """Mark a notification read; the inbox updates even if the call fails."""
        try:
            await self.api.put(f"{NOTIFICATIONS_PATH}/{notification_id}/read", {})
        except ApiError:
            _logger.warning("Marking notification read failed", exc_info=True)
        self.notifications = [
            replace(item, read=True) if item.id == notification_id else item
            for item in self.notifications
        ]

    async def delete(self, notification_id: int | str) -> None:
        try:
            await self.api.delete(f"{NOTIFICATIONS_PATH}/{notification_id}")
        except ApiError:
            _logger.warning("Deleting notification failed", exc_info=True)
        self.notifications = [
            item for item in self.notifications if item.id != notification_id
        ]
        success(self.notifier, "Notification deleted")

    async def update_settings(self, **changes: bool) -> bool:
        settings = {**self.settings, **changes}
        try:
            await self.api.put(SETTINGS_PATH, settings)
        except ApiError:
            _logger.warning("Updating notification settings failed", exc_info=True)
            error(self.notifier, "Failed to update settings")
            return False
        self.settings = settings
        success(self.notifier, "Settings updated successfully")
        return True

    async def update_channels(self, **changes: bool) -> bool:
        channels = {**self.channels, **changes}
        try:
            await self.api.put(CHANNELS_PATH, channels)
        except ApiError:
            _logger.warning("Updating notification channels failed", exc_info=True)
            error(self.notifier, "Failed to update notification channels")
            return False
        self.channels = channels
        success(self.notifier, "Notification channels updated")
        return True

    def unread_count(self) -> int:
        return sum(1 for item in self.notifications if not item.read)

    def display_time(self, notification: InboxNotification) -> str:
        return relative_time(notification.time, self.now())
