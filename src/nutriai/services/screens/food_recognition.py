"""Food recognition screen: upload a photo, review matches, log the meal."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.nutrition import (
    NUTRIENT_KEYS,
    FoodItem,
    FoodUnit,
    Meal,
    MealType,
    NutrientTotals,
)
from nutriai.domain.screens import RecognitionStep, UploadedFile
from nutriai.errors import ApiError
from nutriai.services.aggregation import coerce_number
from nutriai.services.notifications import Notifier, error, success
from nutriai.services.storage import TOKEN_KEY, KeyValueStore

_logger = logging.getLogger(__name__)

NO_FOOD_DETECTED = "no_food_detected"


def recognized_food_item(raw: dict[str, object]) -> FoodItem:
    """Map one ``nutritionData`` entry of a recognition response."""
    nutrition = raw.get("nutrition")
    nutrition = nutrition if isinstance(nutrition, dict) else {}
    quantity = coerce_number(raw.get("quantity")) or 1.0
    return FoodItem(
        name=str(raw.get("name") or ""),
        quantity=quantity,
        unit=FoodUnit.parse(raw.get("unit") or FoodUnit.SERVING.value),
        nutrition=NutrientTotals(
            **{key: coerce_number(nutrition.get(key)) for key in NUTRIENT_KEYS}
        ),
    )


@dataclass
class FoodRecognitionController:
    """State machine: upload, analyzing, then results or no_food."""

    api: ApiClient
    notifier: Notifier
    store: KeyValueStore
    today: Callable[[], date] = date.today
    step: RecognitionStep = RecognitionStep.UPLOAD
    meal_type: MealType = MealType.LUNCH
    image: UploadedFile | None = None
    analysis: dict[str, object] | None = None
    no_food_message: str | None = None
    health_indicators: object | None = None
    recommendations: object | None = None
    logged_dates: list[str] = field(default_factory=list)

    def select_image(self, image: UploadedFile) -> None:
        self.image = image
        self.step = RecognitionStep.UPLOAD
        self.analysis = None

    def reset(self) -> None:
        self.step = RecognitionStep.UPLOAD
        self.analysis = None
        self.image = None
        self.no_food_message = None

    async def analyze(self) -> RecognitionStep:
        """Send the selected image for recognition."""
        if self.image is None:
            return self.step
        self.step = RecognitionStep.ANALYZING
        try:
            body = await self.api.upload(
                "/api/ai/recognize-food", [self.image.as_form_file("image")]
            )
        except ApiError:
            _logger.warning("Food recognition failed", exc_info=True)
            error(self.notifier, "Failed to analyze image. Please try again.")
            self.step = RecognitionStep.UPLOAD
            return self.step
        if not body.get("success") and body.get("error") == NO_FOOD_DETECTED:
            self.no_food_message = str(body.get("message") or "")
            self.analysis = None
            self.step = RecognitionStep.NO_FOOD
            return self.step
        self.analysis = body
        self.step = RecognitionStep.RESULTS
        success(self.notifier, "Food analysis completed!")
        return self.step

    def recognized_items(self) -> list[FoodItem]:
        if not self.analysis:
            return []
        raw_items = self.analysis.get("nutritionData")
        if not isinstance(raw_items, list):
            return []
        return [
            recognized_food_item(item) for item in raw_items if isinstance(item, dict)
        ]

    async def log_meal(self) -> RecognitionStep:
        """Log the recognized foods as a meal for today."""
        if not self.analysis:
            return self.step
        if not self.store.get(TOKEN_KEY):
            error(self.notifier, "Please log in to save meals")
            return self.step
        meal = Meal(
            meal_type=self.meal_type,
            food_items=tuple(self.recognized_items()),
            date=self.today().isoformat(),
        )
        try:
            body = await self.api.post("/api/meals/log", meal.to_payload())
        except ApiError:
            _logger.warning("Logging recognized meal failed", exc_info=True)
            error(self.notifier, "Failed to log meal. Please try again.")
            return self.step
        success(self.notifier, "Meal logged successfully!")
        if body.get("healthIndicators"):
            self.health_indicators = body["healthIndicators"]
            self.step = RecognitionStep.HEALTH_INDICATORS
        elif body.get("recommendations"):
            self.recommendations = body["recommendations"]
            self.step = RecognitionStep.RECOMMENDATIONS
        else:
            self.logged_dates.append(meal.date)
            self.reset()
        return self.step
