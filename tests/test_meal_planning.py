"""Tests for the meal planning and shopping list screen."""

import asyncio
from datetime import datetime

import pytest

from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import NoticeLevel
from nutriai.services.screens.meal_planning import MealPlanningController

from tests.conftest import NOW, FakeApiClient, RecordingNotifier

GENERATE = "/api/meal-planning/generate"


@pytest.fixture
def controller(
    api: FakeApiClient, notifier: RecordingNotifier
) -> MealPlanningController:
    return MealPlanningController(
        api=api, notifier=notifier, fallback=FallbackGenerator(), now=lambda: NOW
    )


def test_generate_normalizes_map_shaped_list(
    controller: MealPlanningController, api: FakeApiClient
) -> None:
    api.respond(
        "POST",
        GENERATE,
        {
            "mealPlan": {"days": []},
            "shoppingList": {"Dairy": ["Milk", "Yogurt"], "Fruits": ["Apples"]},
        },
    )

    assert asyncio.run(controller.generate())

    assert controller.meal_plan == {"days": []}
    assert [c.category for c in controller.shopping_list] == ["Dairy", "Fruits"]
    assert controller.remaining_items() == 3
    payload = api.last("POST", GENERATE).payload
    assert payload["weekStart"] == NOW.isoformat()
    assert payload["preferences"]["servings"] == 2


def test_generate_failure_shows_sample_plan(
    controller: MealPlanningController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    api.respond("POST", GENERATE, ApiError("down"))

    assert not asyncio.run(controller.generate())

    assert controller.meal_plan is not None
    assert controller.shopping_list[0].category == "Proteins"
    assert notifier.messages(NoticeLevel.ERROR) == ["Failed to generate meal plan"]


def test_toggle_items(controller: MealPlanningController, api: FakeApiClient) -> None:
    api.respond("POST", GENERATE, {"shoppingList": [{"category": "A", "items": ["x"]}]})
    asyncio.run(controller.generate())

    controller.toggle_item(0, 0)
    controller.toggle_item(3, 0)
    controller.toggle_item(0, 9)

    assert controller.shopping_list[0].items[0].checked
    assert controller.remaining_items() == 0


def test_preference_and_week_changes_regenerate(
    controller: MealPlanningController, api: FakeApiClient
) -> None:
    week = datetime(2024, 3, 18)

    asyncio.run(controller.update_preferences(servings=4))
    asyncio.run(controller.select_week(week))

    payload = api.last("POST", GENERATE).payload
    assert payload["weekStart"] == week.isoformat()
    assert payload["preferences"]["servings"] == 4
    assert len(api.paths("POST")) == 2
