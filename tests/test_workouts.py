"""Tests for the workout screen."""

import asyncio

import pytest

from nutriai.domain.screens import FormMode
from nutriai.domain.workouts import WorkoutRecommendation
from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import NoticeLevel
from nutriai.services.screens.workouts import WorkoutController, WorkoutSession

from tests.conftest import TODAY, FakeApiClient, RecordingNotifier


class FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def controller(
    api: FakeApiClient, notifier: RecordingNotifier, clock: FakeClock
) -> WorkoutController:
    return WorkoutController(
        api=api,
        notifier=notifier,
        fallback=FallbackGenerator(),
        today=lambda: TODAY,
        clock=clock,
    )


RECOMMENDATION = WorkoutRecommendation(
    id=1,
    type="cardio",
    title="Morning Run",
    description="Easy pace",
    duration=30,
    intensity="moderate",
    calories_burn=300,
    muscle_groups="legs, core",
)


def test_load_reads_history_and_recommendations(
    controller: WorkoutController, api: FakeApiClient
) -> None:
    api.respond(
        "GET", "/api/workouts/history", {"workouts": [{"id": 1, "title": "Legs"}]}
    )
    api.respond(
        "GET",
        "/api/workouts/recommendations",
        {
            "recommendations": [
                {
                    "id": 9,
                    "title": "Swim",
                    "duration": "40",
                    "muscle_groups": ["back", "arms"],
                }
            ]
        },
    )

    asyncio.run(controller.load())

    assert controller.workouts == [{"id": 1, "title": "Legs"}]
    assert controller.recommendations[0].muscle_groups == "back, arms"
    assert controller.recommendations[0].duration == 40
    assert api.last("GET", "/api/workouts/history").payload == {"date": "2024-03-14"}


def test_recommendations_fall_back(
    controller: WorkoutController, api: FakeApiClient, notifier: RecordingNotifier
) -> None:
    api.respond("GET", "/api/workouts/recommendations", ApiError("down"))

    asyncio.run(controller.load_recommendations())

    assert len(controller.recommendations) == 4
    assert notifier.notices == []


def test_submit_validates_form(
    controller: WorkoutController, api: FakeApiClient, notifier: RecordingNotifier
) -> None:
    controller.open_add()
    controller.form.title = "Push day"

    assert not asyncio.run(controller.submit())
    assert api.calls == []
    assert notifier.messages() == ["Please add a title and at least one exercise"]


def test_submit_logs_workout_with_calories(
    controller: WorkoutController, api: FakeApiClient
) -> None:
    controller.open_add()
    controller.form.title = "Push day"
    controller.update_exercise(0, "name", "Bench press")
    controller.update_exercise(0, "duration", 20)

    assert asyncio.run(controller.submit())

    payload = api.last("POST", "/api/workouts/log").payload
    assert payload["calories_burn"] == pytest.approx(20 * 0.1 + 3 * 10 * 0.05)
    assert payload["exercises"][0]["name"] == "Bench press"
    assert controller.mode is FormMode.LIST


def test_edit_failure_keeps_form(
    controller: WorkoutController, api: FakeApiClient, notifier: RecordingNotifier
) -> None:
    api.respond("PUT", "/api/workouts/5", ApiError("HTTP 500", 500))
    controller.start_edit(
        {"id": 5, "title": "Legs", "exercises": [{"name": "Squat", "sets": "4"}]}
    )

    assert not asyncio.run(controller.submit())
    assert controller.mode is FormMode.EDIT
    assert controller.form.exercises[0].sets == 4
    assert notifier.messages(NoticeLevel.ERROR) == ["Failed to save workout"]


def test_session_timing_excludes_pauses(clock: FakeClock) -> None:
    session = WorkoutSession(RECOMMENDATION, clock=clock)
    session.resume()
    clock.value = 300
    session.pause()
    clock.value = 900
    session.resume()
    clock.value = 1200

    assert session.elapsed_seconds() == 600
    assert session.elapsed_minutes() == 10
    assert WorkoutSession(RECOMMENDATION, clock=clock).elapsed_minutes() == 1


def test_stop_logs_prorated_session(
    controller: WorkoutController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
    clock: FakeClock,
) -> None:
    controller.start(RECOMMENDATION)
    clock.value = 600
    controller.pause()
    clock.value = 5000

    assert asyncio.run(controller.stop())

    payload = api.last("POST", "/api/workouts/log").payload
    assert payload["duration"] == 10
    assert payload["calories_burn"] == 100
    assert payload["muscle_groups"] == ["legs", "core"]
    assert controller.session is None
    assert notifier.messages() == [
        "Started Morning Run!",
        "Workout paused",
        "Workout completed and logged!",
    ]


def test_stop_failure_is_reported(
    controller: WorkoutController, api: FakeApiClient, notifier: RecordingNotifier
) -> None:
    api.respond("POST", "/api/workouts/log", ApiError("down"))
    controller.start(RECOMMENDATION)

    assert not asyncio.run(controller.stop())
    assert notifier.messages(NoticeLevel.ERROR) == [
        "Workout finished, but failed to log"
    ]


def test_filters_and_totals(controller: WorkoutController) -> None:
    controller.workouts = [
        {"workout_type": "cardio", "title": "Run", "duration": 30, "calories_burn": 90},
        {
            "workout_type": "strength",
            "title": "Lift",
            "duration": "45",
            "calories_burn": 200,
        },
    ]

    assert controller.total_calories() == 290
    controller.filter = "strength"
    assert controller.total_minutes() == 45
    controller.filter = "all"
    controller.search = "run"
    assert [w["title"] for w in controller.filtered_workouts()] == ["Run"]
