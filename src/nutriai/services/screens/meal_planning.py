"""AI meal planning screen with its shopping list."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.screens import MealPlanningTab
from nutriai.domain.shopping import ShoppingCategory
from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.normalizer import normalize_shopping_list
from nutriai.services.notifications import Notifier, error, success

_logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


def default_preferences() -> dict[str, object]:
    return {
        "dietaryRestrictions": [],
        "allergies": [],
        "cuisinePreferences": [],
        "cookingTime": "medium",
        "servings": 2,
        "budget": "medium",
    }


@dataclass
class MealPlanningController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    now: Callable[[], datetime] = _now
    tab: MealPlanningTab = MealPlanningTab.PLAN
    week_start: datetime | None = None
    preferences: dict[str, object] = field(default_factory=default_preferences)
    meal_plan: object | None = None
    shopping_list: list[ShoppingCategory] = field(default_factory=list)

    async def generate(self) -> bool:
        """Request a plan for the selected week; failures show the sample plan."""
        week_start = self.week_start or self.now()
        try:
            body = await self.api.post(
                "/api/meal-planning/generate",
                {"weekStart": week_start.isoformat(), "preferences": self.preferences},
            )
        except ApiError:
            _logger.warning("Generating meal plan failed", exc_info=True)
            error(self.notifier, "Failed to generate meal plan")
            self.meal_plan = self.fallback.meal_plan(week_start)
            self.shopping_list = normalize_shopping_list(self.fallback.shopping_list())
            return False
        self.meal_plan = body.get("mealPlan")
        self.shopping_list = normalize_shopping_list(body.get("shoppingList"))
        success(self.notifier, "Meal plan generated successfully!")
        return True

    async def select_week(self, week_start: datetime) -> None:
        self.week_start = week_start
        await self.generate()

    async def update_preferences(self, **changes: object) -> None:
        self.preferences = {**self.preferences, **changes}
        await self.generate()

    def toggle_item(self, category_index: int, item_index: int) -> None:
        """Flip an item's checked state; out-of-range indexes are ignored."""
        if not 0 <= category_index < len(self.shopping_list):
            return
        items = self.shopping_list[category_index].items
        if 0 <= item_index < len(items):
            items[item_index].checked = not items[item_index].checked

    def remaining_items(self) -> int:
        return sum(
            1
            for category in self.shopping_list
            for item in category.items
            if not item.checked
        )
