"""Tests for the onboarding wizard."""

import asyncio
import json

import pytest

from nutriai.domain.onboarding import OnboardingStep
from nutriai.errors import ApiError
from nutriai.services.notifications import NoticeLevel
from nutriai.services.screens.onboarding import (
    OnboardingCompletedError,
    OnboardingWizard,
)
from nutriai.services.storage import (
    ONBOARDING_COMPLETE_KEY,
    USER_GOALS_KEY,
    InMemoryKeyValueStore,
)

from tests.conftest import FakeApiClient, RecordingNotifier


@pytest.fixture
def wizard(
    api: FakeApiClient, notifier: RecordingNotifier, store: InMemoryKeyValueStore
) -> OnboardingWizard:
    return OnboardingWizard(api=api, notifier=notifier, store=store)


def _to_last_step(wizard: OnboardingWizard) -> None:
    while wizard.step is not OnboardingStep.DAILY_GOALS:
        wizard.next()


def test_steps_are_bounded(wizard: OnboardingWizard) -> None:
    assert wizard.back() is OnboardingStep.GOALS
    for _ in range(10):
        wizard.next()
    assert wizard.step is OnboardingStep.DAILY_GOALS
    assert wizard.back() is OnboardingStep.SLEEP


def test_toggles_and_updates(wizard: OnboardingWizard) -> None:
    wizard.toggle_goal("calories")
    wizard.toggle_goal("muscle")
    wizard.toggle_goal("calories")
    wizard.toggle_condition("diabetes")
    wizard.update(age="34", current_weight="80", water_goal=10)

    payload = wizard.form.to_payload()
    assert payload["goals"] == ["muscle"]
    assert payload["medicalConditions"] == ["diabetes"]
    assert payload["age"] == "34"
    assert payload["currentWeight"] == "80"
    assert payload["waterGoal"] == 10
    with pytest.raises(AttributeError):
        wizard.update(favourite_colour="blue")


def test_complete_saves_flags(
    wizard: OnboardingWizard, api: FakeApiClient, store: InMemoryKeyValueStore
) -> None:
    wizard.toggle_goal("healthy")
    _to_last_step(wizard)

    assert asyncio.run(wizard.complete())

    assert api.last("POST", "/api/users/onboarding").payload["goals"] == ["healthy"]
    assert store.get(ONBOARDING_COMPLETE_KEY) == "true"
    assert json.loads(store.get(USER_GOALS_KEY) or "[]") == ["healthy"]
    with pytest.raises(OnboardingCompletedError):
        wizard.next()


def test_failed_completion_keeps_wizard_open(
    wizard: OnboardingWizard,
    api: FakeApiClient,
    notifier: RecordingNotifier,
    store: InMemoryKeyValueStore,
) -> None:
    api.respond("POST", "/api/users/onboarding", ApiError("HTTP 500", 500))
    _to_last_step(wizard)

    assert not asyncio.run(wizard.complete())

    assert not wizard.completed
    assert store.get(ONBOARDING_COMPLETE_KEY) is None
    assert notifier.messages() == ["Failed to save onboarding data"]
    wizard.next()


def test_complete_requires_last_step(
    wizard: OnboardingWizard,
    api: FakeApiClient,
    notifier: RecordingNotifier,
    store: InMemoryKeyValueStore,
) -> None:
    wizard.next()

    assert not asyncio.run(wizard.complete())

    assert api.calls == []
    assert not wizard.completed
    assert store.get(ONBOARDING_COMPLETE_KEY) is None
    assert notifier.messages(NoticeLevel.WARNING) == [
        "Please finish every onboarding step first"
    ]
