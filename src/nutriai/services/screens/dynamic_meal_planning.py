"""Dynamic meal planning tuned to today's mood, activity and conditions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from nutriai.adapters.api_client import ApiClient
from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notifier, info

_logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/dynamic-meal-planning/generate"
GENERATE_TIMEOUT = 10

CONDITION_OPTIONS = (
    "diabetes",
    "hypertension",
    "high_cholesterol",
    "gluten_intolerance",
    "lactose_intolerance",
    "kidney_disease",
)


@dataclass
class DynamicMealPlanningController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    today: Callable[[], date] = date.today
    mood: str = "neutral"
    activity_level: str = "moderate"
    calorie_intake_today: float = 0
    health_conditions: list[str] = field(default_factory=list)
    food_source_restriction: str = "non_vegetarian"
    dietary_pattern: str = ""
    cuisine_preference: str = ""
    result: dict[str, object] | None = None
    simulated: bool = False

    def toggle_condition(self, condition: str) -> None:
        if condition in self.health_conditions:
            self.health_conditions.remove(condition)
        elif condition in CONDITION_OPTIONS:
            self.health_conditions.append(condition)

    def request_body(self) -> dict[str, object]:
        return {
            "planType": "weekly",
            "location": "south_asia",
            "goal": "maintenance",
            "calorieTarget": 2000,
            "mealsPerDay": 3,
            "snacksPerDay": 2,
            "mood": self.mood,
            "activityLevel": self.activity_level,
            "calorieIntakeToday": self.calorie_intake_today,
            "healthConditions": list(self.health_conditions),
            "foodSourceRestriction": self.food_source_restriction,
            "dietaryPattern": self.dietary_pattern,
            "cuisinePreference": self.cuisine_preference,
        }

    async def generate(self) -> bool:
        """Ask the backend for a plan; anything but success shows a local one.

        Returns True only when the backend's plan is shown.
        """
        try:
            body = await self.api.post(
                GENERATE_PATH, self.request_body(), timeout=GENERATE_TIMEOUT
            )
        except ApiError:
            _logger.warning("Generating dynamic meal plan failed", exc_info=True)
            self._show_local("Server is busy. Showing a quick locally generated plan.")
            return False
        if not body.get("success"):
            self._show_local("Showing a quick locally generated plan.")
            return False
        self.result = body
        self.simulated = False
        return True

    def _show_local(self, message: str) -> None:
        self.result = self.fallback.dynamic_meal_plan(self.today())
        self.simulated = True
        info(self.notifier, message)

    def days(self) -> list[dict[str, object]]:
        if not self.result:
            return []
        plan = self.result.get("mealPlan")
        meals = plan.get("meals") if isinstance(plan, dict) else None
        return [day for day in meals or [] if isinstance(day, dict)]
