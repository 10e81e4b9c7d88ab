"""Meal tracking screen: daily meal list with an add/edit form."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.nutrition import NUTRIENT_KEYS, MealType, NutrientTotals
from nutriai.domain.screens import FormMode, UploadedFile
from nutriai.errors import ApiError
from nutriai.services.aggregation import sum_meal_totals, sum_nutrition
from nutriai.services.notifications import Notifier, error, success
from nutriai.services.screens.food_recognition import (
    NO_FOOD_DETECTED,
    recognized_food_item,
)

_logger = logging.getLogger(__name__)

ALL_MEALS = "all"

FoodRow = dict[str, object]


def blank_food_row() -> FoodRow:
    """An empty food row as shown in a fresh form."""
    row: FoodRow = {"name": "", "quantity": 1, "unit": "piece"}
    row.update(dict.fromkeys(NUTRIENT_KEYS, 0))
    return row


@dataclass
class MealTrackingController:
    """Holds the meals of one day and the add/edit form state."""

    api: ApiClient
    notifier: Notifier
    today: Callable[[], date] = date.today
    selected_date: str = ""
    mode: FormMode = FormMode.LIST
    editing_id: object | None = None
    meal_type: MealType = MealType.LUNCH
    rows: list[FoodRow] = field(default_factory=lambda: [blank_food_row()])
    notes: str = ""
    meals: list[dict[str, object]] = field(default_factory=list)
    filter: str = ALL_MEALS
    search: str = ""

    def __post_init__(self) -> None:
        if not self.selected_date:
            self.selected_date = self.today().isoformat()

    def _reset_form(self) -> None:
        self.meal_type = MealType.LUNCH
        self.rows = [blank_food_row()]
        self.notes = ""
        self.editing_id = None

    def open_add(self) -> None:
        self._reset_form()
        self.mode = FormMode.ADD

    def start_edit(self, meal: dict[str, object]) -> None:
        """Load a saved meal into the form."""
        self.editing_id = meal.get("id")
        try:
            self.meal_type = MealType(str(meal.get("meal_type")))
        except ValueError:
            self.meal_type = MealType.LUNCH
        items = meal.get("food_items")
        if isinstance(items, list) and items:
            self.rows = [dict(item) for item in items if isinstance(item, dict)]
        else:
            self.rows = [blank_food_row()]
        self.notes = str(meal.get("notes") or "")
        self.mode = FormMode.EDIT

    def cancel(self) -> None:
        self._reset_form()
        self.mode = FormMode.LIST

    def add_row(self) -> None:
        self.rows.append(blank_food_row())

    def remove_row(self, index: int) -> None:
        if 0 <= index < len(self.rows):
            del self.rows[index]

    def update_row(self, index: int, field_name: str, value: object) -> None:
        self.rows[index][field_name] = value

    def form_totals(self) -> NutrientTotals:
        """Running totals of the form rows at full precision."""
        return sum_nutrition(self.rows)

    async def load(self) -> list[dict[str, object]]:
        """Fetch the meals of the selected day."""
        try:
            body = await self.api.get(f"/api/meals/daily/{self.selected_date}")
        except ApiError:
            _logger.warning("Loading meals failed", exc_info=True)
            error(self.notifier, "Failed to load meals")
            return self.meals
        meals = body.get("meals")
        self.meals = list(meals) if isinstance(meals, list) else []
        return self.meals

    async def select_date(self, day: str) -> None:
        self.selected_date = day
        await self.load()

    def _first_row_named(self) -> bool:
        if not self.rows:
            return False
        return bool(str(self.rows[0].get("name") or "").strip())

    async def submit(self) -> bool:
        """Create or update the meal in the form; returns True on success."""
        if not self._first_row_named():
            error(self.notifier, "Please add at least one food item")
            return False
        payload = {
            "meal_type": self.meal_type.value,
            "food_items": [dict(row) for row in self.rows],
            "notes": self.notes,
            "total_nutrition": self.form_totals().as_dict(),
            "date": self.selected_date,
        }
        try:
            if self.editing_id is not None:
                await self.api.put(f"/api/meals/{self.editing_id}", payload)
                message = "Meal updated successfully!"
            else:
                await self.api.post("/api/meals/log", payload)
                message = "Meal logged successfully!"
        except ApiError:
            _logger.warning("Saving meal failed", exc_info=True)
            error(self.notifier, "Failed to save meal")
            return False
        success(self.notifier, message)
        self.cancel()
        await self.load()
        return True

    async def delete(self, meal_id: object) -> bool:
        try:
            await self.api.delete(f"/api/meals/{meal_id}")
        except ApiError:
            _logger.warning("Deleting meal %s failed", meal_id, exc_info=True)
            error(self.notifier, "Failed to delete meal")
            return False
        success(self.notifier, "Meal deleted successfully!")
        await self.load()
        return True

    async def analyze_photo(self, image: UploadedFile) -> bool:
        """Fill the form rows from a recognized food photo."""
        try:
            body = await self.api.upload(
                "/api/ai/recognize-food", [image.as_form_file("image")]
            )
        except ApiError:
            _logger.warning("Photo analysis failed", exc_info=True)
            error(self.notifier, "Failed to analyze photo")
            return False
        if not body or body.get("error") == NO_FOOD_DETECTED:
            message = body.get("message") or "No food detected in the image"
            error(self.notifier, str(message))
            return False
        raw_items = body.get("nutritionData")
        raw_items = raw_items if isinstance(raw_items, list) else []
        items = [
            recognized_food_item(item) for item in raw_items if isinstance(item, dict)
        ]
        if not items:
            error(self.notifier, "Could not extract items from the photo")
            return False
        self.rows = [item.to_payload() for item in items]
        success(self.notifier, "Analyzed photo and filled items")
        return True

    def _matches_search(self, meal: dict[str, object], term: str) -> bool:
        if term in str(meal.get("meal_type") or "").lower():
            return True
        if term in str(meal.get("notes") or "").lower():
            return True
        items = meal.get("food_items")
        for item in items if isinstance(items, list) else []:
            if not isinstance(item, dict):
                continue
            name = str(item.get("name") or item.get("food_name") or "").lower()
            if term in name:
                return True
        return False

    def filtered_meals(self) -> list[dict[str, object]]:
        """Meals matching the meal-type filter and the search term."""
        term = self.search.strip().lower()
        result = []
        for meal in self.meals:
            if self.filter != ALL_MEALS and meal.get("meal_type") != self.filter:
                continue
            if term and not self._matches_search(meal, term):
                continue
            result.append(meal)
        return result

    def daily_totals(self) -> NutrientTotals:
        return sum_meal_totals(self.filtered_meals())

    def stats(self) -> dict[str, float]:
        meals = self.filtered_meals()
        count = max(len(meals), 1)
        healthy = sum(1 for meal in meals if meal.get("is_healthy"))
        return {
            "mealsTracked": len(meals),
            "successRate": healthy / count * 100,
            "avgCalories": self.daily_totals().calories / count,
        }
