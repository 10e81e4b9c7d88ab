"""Health warnings screen: intake warnings, dietary advice and daily goals."""

import dataclasses
import logging
from dataclasses import dataclass, field

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.health import DietaryRecommendation, HealthWarning, NutritionGoals
from nutriai.domain.screens import InsightsTab
from nutriai.errors import ApiError
from nutriai.services.aggregation import coerce_number
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notifier, error, success

_logger = logging.getLogger(__name__)

DEFAULT_PERIOD_DAYS = 30


def parse_goals(raw: dict[str, object]) -> NutritionGoals:
    """Goals from a backend record; missing or zero targets keep the defaults."""
    defaults = NutritionGoals()
    return NutritionGoals(
        **{
            goal.name: coerce_number(raw.get(goal.name))
            or getattr(defaults, goal.name)
            for goal in dataclasses.fields(NutritionGoals)
        }
    )


def _warning(raw: dict[str, object]) -> HealthWarning:
    return HealthWarning(
        type=str(raw.get("type") or ""),
        title=str(raw.get("title") or ""),
        message=str(raw.get("message") or ""),
        severity=str(raw.get("severity") or "low"),
    )


def _recommendation(raw: dict[str, object]) -> DietaryRecommendation:
    suggestions = raw.get("suggestions")
    return DietaryRecommendation(
        type=str(raw.get("type") or ""),
        title=str(raw.get("title") or ""),
        suggestions=[str(s) for s in suggestions]
        if isinstance(suggestions, list)
        else [],
        priority=str(raw.get("priority") or "medium"),
    )


def _records(body: dict[str, object], key: str) -> list[dict[str, object]]:
    raw = body.get(key)
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


@dataclass
class NutritionInsightsController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    tab: InsightsTab = InsightsTab.WARNINGS
    period_days: int = DEFAULT_PERIOD_DAYS
    warnings: list[HealthWarning] = field(default_factory=list)
    recommendations: list[DietaryRecommendation] = field(default_factory=list)
    nutrition_data: object | None = None
    goals: NutritionGoals | None = None
    goals_form: NutritionGoals = field(default_factory=NutritionGoals)

    async def load(self) -> None:
        """Read warnings, advice and goals in turn; a failure shows sample advice."""
        try:
            body = await self.api.get(
                "/api/nutrition/health-warnings", {"days": self.period_days}
            )
            self.warnings = [_warning(item) for item in _records(body, "warnings")]
            self.nutrition_data = body.get("nutrition_data")
            body = await self.api.get("/api/nutrition/dietary-recommendations")
            self.recommendations = [
                _recommendation(item) for item in _records(body, "recommendations")
            ]
            body = await self.api.get("/api/nutrition/goals")
        except ApiError:
            _logger.warning("Loading health data failed", exc_info=True)
            error(self.notifier, "Failed to load health data")
            self.warnings = self.fallback.health_warnings()
            self.recommendations = self.fallback.dietary_recommendations()
            return
        goals = body.get("goals")
        if isinstance(goals, dict) and goals:
            self.goals = parse_goals(goals)
            self.goals_form = self.goals

    async def select_period(self, days: int) -> None:
        self.period_days = days
        await self.load()

    def edit_goals(self, **changes: float) -> NutritionGoals:
        self.goals_form = dataclasses.replace(self.goals_form, **changes)
        return self.goals_form

    async def save_goals(self) -> bool:
        try:
            await self.api.post(
                "/api/nutrition/goals", dataclasses.asdict(self.goals_form)
            )
        except ApiError:
            _logger.warning("Updating nutrition goals failed", exc_info=True)
            error(self.notifier, "Failed to update goals")
            return False
        success(self.notifier, "Nutrition goals updated successfully!")
        await self.load()
        return True
