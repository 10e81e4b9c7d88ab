"""FastAPI application factory."""

import dataclasses
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request

from nutriai.api.models import (
    AllergenScoreRequest,
    MicronutrientProgressRequest,
    NutritionTotalsRequest,
    ReminderCreateRequest,
    ShoppingListRequest,
)
from nutriai.app_logging import configure_logging
from nutriai.containers import AppContainer
from nutriai.domain.micronutrients import (
    MICRONUTRIENT_RDA,
    MicronutrientSample,
    nutrient_display_name,
)
from nutriai.domain.portions import DEFAULT_FOOD
from nutriai.services.aggregation import sum_meal_totals, sum_nutrition
from nutriai.services.metrics import calculate_bmi, sleep_duration
from nutriai.services.normalizer import normalize_shopping_list
from nutriai.services.portions import (
    accepted_portion,
    confidence_band,
    estimate_portion,
)
from nutriai.services.scoring import (
    find_deficiencies,
    progress_band,
    safety_color,
    safety_score,
    weekly_progress,
)
from nutriai.services.screens.gamification import GamificationController
from nutriai.services.screens.micronutrients import MicronutrientController


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            state_container.reminder_poller.start()
        except Exception:
            logger.exception("Failed to start medicine reminder poller")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/totals")
    async def nutrition_totals(request: NutritionTotalsRequest) -> dict[str, float]:
        """Sum food items, or meal rows when no items are given."""
        if request.items:
            totals = sum_nutrition(request.items)
        else:
            totals = sum_meal_totals(request.meals)
        return totals.rounded().as_dict()

    @app.post("/allergens/score")
    async def allergen_score(request: AllergenScoreRequest) -> dict[str, object]:
        score = safety_score(finding.model_dump() for finding in request.allergens)
        return {"safetyScore": score, "color": safety_color(score)}

    @app.get("/metrics/bmi")
    async def bmi(height: str, weight: str) -> dict[str, object]:
        result = calculate_bmi(height, weight)
        if result is None:
            raise HTTPException(status_code=422, detail="Invalid height or weight")
        return {"bmi": result.value, "category": result.category.value}

    @app.get("/metrics/sleep-duration")
    async def sleep_hours(bed_time: str, wake_time: str) -> dict[str, float]:
        try:
            hours = sleep_duration(bed_time, wake_time)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail="Invalid time") from exc
        return {"hours": hours}

    @app.get("/portions/estimate")
    async def portion_estimate(
        reference: str = "hand", food: str = DEFAULT_FOOD
    ) -> dict[str, object]:
        estimate = estimate_portion(reference, food)
        return {
            **accepted_portion(estimate),
            "band": confidence_band(estimate.confidence),
        }

    @app.post("/micronutrients/progress")
    async def micronutrient_progress(
        request: MicronutrientProgressRequest,
    ) -> dict[str, object]:
        samples = [
            MicronutrientSample(day=s.day, date=s.date, nutrients=s.nutrients)
            for s in request.samples
        ]
        nutrients = request.nutrients or list(MICRONUTRIENT_RDA)
        progress = []
        for nutrient in nutrients:
            percentage = weekly_progress(
                samples, nutrient, MICRONUTRIENT_RDA.get(nutrient, 0.0)
            )
            progress.append(
                {
                    "nutrient": nutrient,
                    "name": nutrient_display_name(nutrient),
                    "percentage": round(percentage, 1),
                    "band": progress_band(percentage).value,
                }
            )
        return {
            "progress": progress,
            "deficiencies": [d.to_payload() for d in find_deficiencies(samples)],
        }

    @app.post("/shopping-list/normalize")
    async def normalize(request: ShoppingListRequest) -> list[dict[str, object]]:
        return [
            category.to_payload()
            for category in normalize_shopping_list(request.shopping_list)
        ]

    @app.get("/reminders")
    async def list_reminders(request: Request) -> list[dict[str, object]]:
        state_container: AppContainer = request.app.state.container
        return [
            reminder.to_payload()
            for reminder in state_container.reminder_service.list_reminders()
        ]

    @app.post("/reminders", status_code=201)
    async def add_reminder(
        payload: ReminderCreateRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        reminder = state_container.reminder_service.add(payload.name, payload.time)
        if reminder is None:
            raise HTTPException(status_code=422, detail="Name and time are required")
        return reminder.to_payload()

    @app.delete("/reminders/{reminder_id}")
    async def delete_reminder(reminder_id: int, request: Request) -> dict[str, str]:
        state_container: AppContainer = request.app.state.container
        if not state_container.reminder_service.remove(reminder_id):
            raise HTTPException(status_code=404, detail="Reminder not found")
        return {"status": "deleted"}

    @app.get("/gamification")
    async def gamification(
        request: Request, user_name: str | None = None
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        controller = GamificationController(
            api=state_container.api_client,
            notifier=state_container.notifier,
            fallback=state_container.fallback,
            user_name=user_name,
        )
        return dataclasses.asdict(await controller.load())

    @app.get("/micronutrients/weekly")
    async def micronutrients_weekly(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        controller = MicronutrientController(
            api=state_container.api_client,
            notifier=state_container.notifier,
            store=state_container.store,
            reports=state_container.report_sink,
            fallback=state_container.fallback,
        )
        await controller.load()
        return {
            "weeklyData": [sample.to_payload() for sample in controller.weekly_data],
            "deficiencies": controller.deficiencies,
            "recommendations": controller.recommendations,
            "simulated": controller.simulated,
        }

    return app
