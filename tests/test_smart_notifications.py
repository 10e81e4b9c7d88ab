"""Tests for the notification inbox screen."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from nutriai.domain.inbox import InboxNotification
from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import NoticeLevel
from nutriai.services.screens.smart_notifications import (
    CHANNELS_PATH,
    NOTIFICATIONS_PATH,
    SETTINGS_PATH,
    SmartNotificationsController,
    relative_time,
)

from tests.conftest import NOW, FakeApiClient, RecordingNotifier


@pytest.fixture
def controller(
    api: FakeApiClient, notifier: RecordingNotifier
) -> SmartNotificationsController:
    return SmartNotificationsController(
        api=api, notifier=notifier, fallback=FallbackGenerator(), now=lambda: NOW
    )


def _inbox() -> list[InboxNotification]:
    return [
        InboxNotification(id=1, type="meal", title="Lunch", message="", time=""),
        InboxNotification(id=2, type="health", title="Check", message="", time=""),
    ]


def test_load_reads_backend_inbox(
    controller: SmartNotificationsController, api: FakeApiClient
) -> None:
    api.respond(
        "GET",
        NOTIFICATIONS_PATH,
        {
            "notifications": [
                {"_id": "a1", "type": "meal", "title": "Log lunch", "read": True},
                "junk",
            ]
        },
    )

    asyncio.run(controller.load())

    assert [item.id for item in controller.notifications] == ["a1"]
    assert controller.unread_count() == 0


def test_load_failure_shows_sample_inbox(
    controller: SmartNotificationsController, api: FakeApiClient
) -> None:
    api.respond("GET", NOTIFICATIONS_PATH, ApiError("down"))

    asyncio.run(controller.load())

    assert len(controller.notifications) == 5
    assert controller.unread_count() == 2
    assert controller.display_time(controller.notifications[0]) == "30 minutes ago"


def test_load_settings_keeps_defaults_on_failure(
    controller: SmartNotificationsController, api: FakeApiClient
) -> None:
    api.respond("GET", SETTINGS_PATH, ApiError("down"))

    asyncio.run(controller.load_settings())

    assert controller.settings["mealReminders"]
    assert not controller.settings["sleepReminders"]
    assert controller.channels["inApp"]


def test_load_settings_applies_backend_values(
    controller: SmartNotificationsController, api: FakeApiClient
) -> None:
    api.respond(
        "GET",
        SETTINGS_PATH,
        {"settings": {"mealReminders": False}, "channels": {"email": True}},
    )

    asyncio.run(controller.load_settings())

    assert controller.settings == {"mealReminders": False}
    assert controller.channels == {"email": True}


def test_mark_as_read_updates_locally_when_backend_fails(
    controller: SmartNotificationsController, api: FakeApiClient
) -> None:
    controller.notifications = _inbox()
    api.respond("PUT", f"{NOTIFICATIONS_PATH}/2/read", ApiError("down"))

    asyncio.run(controller.mark_as_read(2))

    assert [item.read for item in controller.notifications] == [False, True]
    assert controller.unread_count() == 1


def test_delete_removes_locally_either_way(
    controller: SmartNotificationsController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    controller.notifications = _inbox()
    api.respond("DELETE", f"{NOTIFICATIONS_PATH}/1", ApiError("down"))

    asyncio.run(controller.delete(1))
    asyncio.run(controller.delete(2))

    assert controller.notifications == []
    assert notifier.messages(NoticeLevel.SUCCESS) == ["Notification deleted"] * 2


def test_update_settings(
    controller: SmartNotificationsController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    assert asyncio.run(controller.update_settings(sleepReminders=True))

    assert controller.settings["sleepReminders"]
    assert api.last("PUT", SETTINGS_PATH).payload["mealReminders"]
    assert notifier.messages(NoticeLevel.SUCCESS) == ["Settings updated successfully"]


def test_failed_channel_update_keeps_previous_channels(
    controller: SmartNotificationsController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    api.respond("PUT", CHANNELS_PATH, ApiError("down"))

    assert not asyncio.run(controller.update_channels(sms=True))

    assert not controller.channels["sms"]
    assert notifier.messages(NoticeLevel.ERROR) == [
        "Failed to update notification channels"
    ]


@pytest.mark.parametrize(
    ("elapsed", "label"),
    [
        (timedelta(minutes=59), "59 minutes ago"),
        (timedelta(hours=5, minutes=50), "5 hours ago"),
        (timedelta(days=3, hours=2), "3 days ago"),
    ],
)
def test_relative_time(elapsed: timedelta, label: str) -> None:
    assert relative_time((NOW - elapsed).isoformat(), NOW) == label


def test_relative_time_handles_zone_suffix_and_garbage() -> None:
    now = datetime(2024, 3, 14, 8, 0, tzinfo=UTC)

    assert relative_time("2024-03-14T06:00:00Z", now) == "2 hours ago"
    assert relative_time("2024-03-14T07:30:00", now) == "30 minutes ago"
    assert relative_time("yesterday", now) == ""
