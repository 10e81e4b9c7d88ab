"""Health report analysis screen.

Conditions edited here are autosaved: every change restarts a short quiet
period, after which the full list is saved in bulk and fresh per-condition
recommendations are requested. The two requests are independent, so a
failed second call leaves the saved conditions with stale recommendations.
"""

import itertools
import json
import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.health import ConditionRecommendation, HealthCondition
from nutriai.domain.screens import HealthAnalysisTab, UploadedFile
from nutriai.errors import ApiError, RequestTimeoutError, UnauthorizedError
from nutriai.services.normalizer import normalize_condition_recommendations
from nutriai.services.notifications import Notifier, error, info, success
from nutriai.services.timers import CancellableTimer, Debouncer

_logger = logging.getLogger(__name__)

AUTOSAVE_DELAY_SECONDS = 0.5
FOOD_RECOMMENDATIONS_DELAY_SECONDS = 2.0
FOOD_RECOMMENDATIONS_TIMEOUT_SECONDS = 35.0


def _millisecond_ids() -> Iterator[int]:
    return itertools.count(int(time.time() * 1000))


@dataclass
class HealthAnalysisController:
    api: ApiClient
    notifier: Notifier
    autosave_delay: float = AUTOSAVE_DELAY_SECONDS
    food_timeout: float = FOOD_RECOMMENDATIONS_TIMEOUT_SECONDS
    food_delay: float = FOOD_RECOMMENDATIONS_DELAY_SECONDS
    tab: HealthAnalysisTab = HealthAnalysisTab.UPLOAD
    files: list[UploadedFile] = field(default_factory=list)
    conditions: list[HealthCondition] = field(default_factory=list)
    recommendations: list[ConditionRecommendation] = field(default_factory=list)
    analysis: dict[str, object] | None = None
    food_recommendations: object | None = None
    _ids: Iterator[int] = field(default_factory=_millisecond_ids, repr=False)
    _autosave: Debouncer = field(init=False, repr=False)
    _food_timer: CancellableTimer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._autosave = Debouncer(self.autosave_delay, self._autosave_now)
        self._food_timer = CancellableTimer(
            self.food_delay, self.fetch_food_recommendations
        )

    def _conditions_payload(self) -> dict[str, object]:
        return {"conditions": [c.to_payload() for c in self.conditions]}

    async def select_tab(self, tab: HealthAnalysisTab) -> None:
        self.tab = tab
        if tab is HealthAnalysisTab.ANALYSIS:
            try:
                await self.load_recommendations()
            except ApiError:
                _logger.debug("Loading recommendations failed", exc_info=True)

    async def load_conditions(self) -> list[HealthCondition]:
        """Fetch saved conditions; failures keep the current list."""
        try:
            body = await self.api.get("/api/health-analysis/conditions")
        except ApiError:
            _logger.debug("Loading conditions failed", exc_info=True)
            return self.conditions
        raw = body.get("conditions")
        if isinstance(raw, list):
            self.conditions = [
                HealthCondition.from_payload(item, next(self._ids))
                for item in raw
                if isinstance(item, dict)
            ]
        return self.conditions

    def _changed(self) -> None:
        self._autosave.trigger()

    def add_condition(self) -> HealthCondition:
        condition = HealthCondition(id=next(self._ids))
        self.conditions.append(condition)
        self._changed()
        return condition

    def update_condition(self, condition_id: object, **changes: object) -> None:
        self.conditions = [
            replace(c, **changes) if c.id == condition_id else c
            for c in self.conditions
        ]
        self._changed()

    def remove_condition(self, condition_id: object) -> None:
        self.conditions = [c for c in self.conditions if c.id != condition_id]
        success(self.notifier, "Condition removed")
        self._changed()

    @property
    def autosave_pending(self) -> bool:
        return self._autosave.pending

    async def wait_for_autosave(self) -> None:
        await self._autosave.wait()

    async def _save_and_recommend(self) -> None:
        payload = self._conditions_payload()
        await self.api.post("/api/health-analysis/conditions/bulk", payload)
        body = await self.api.post(
            "/api/health-analysis/conditions/recommendations", payload
        )
        self.recommendations = normalize_condition_recommendations(
            body.get("recommendations")
        )

    async def _autosave_now(self) -> None:
        try:
            await self._save_and_recommend()
        except ApiError:
            _logger.debug("Autosave failed", exc_info=True)

    async def save_conditions(self) -> bool:
        self._autosave.cancel()
        try:
            await self._save_and_recommend()
        except ApiError as exc:
            _logger.warning("Saving conditions failed", exc_info=True)
            error(self.notifier, exc.user_message("Failed to save conditions"))
            return False
        success(self.notifier, "Health conditions saved")
        return True

    async def load_recommendations(self) -> list[ConditionRecommendation]:
        body = await self.api.post(
            "/api/health-analysis/conditions/recommendations",
            self._conditions_payload(),
        )
        self.recommendations = normalize_condition_recommendations(
            body.get("recommendations")
        )
        return self.recommendations

    def add_files(self, files: list[UploadedFile]) -> None:
        self.files.extend(files)
        success(self.notifier, f"{len(files)} file(s) uploaded successfully!")

    def remove_file(self, filename: str) -> None:
        self.files = [f for f in self.files if f.filename != filename]
        success(self.notifier, "File removed successfully!")

    async def analyze_reports(self) -> bool:
        """Upload the reports, analyze them and queue food recommendations."""
        if not self.files:
            error(self.notifier, "Please upload at least one health report to analyze")
            return False
        conditions = [{"id": c.id, **c.to_payload()} for c in self.conditions]
        try:
            await self.api.upload(
                "/api/health-analysis/upload-reports",
                [f.as_form_file("reports") for f in self.files],
                data={"healthConditions": json.dumps(conditions)},
            )
            self.analysis = await self.api.post("/api/health-analysis/analyze-reports")
        except ApiError:
            _logger.warning("Analyzing health reports failed", exc_info=True)
            error(self.notifier, "Failed to analyze health reports. Please try again.")
            return False
        success(self.notifier, "Health reports analyzed successfully!")
        self.tab = HealthAnalysisTab.ANALYSIS
        self._food_timer.schedule()
        return True

    async def fetch_food_recommendations(self) -> object | None:
        try:
            body = await self.api.post(
                "/api/health-analysis/food-recommendations",
                timeout=self.food_timeout,
            )
        except RequestTimeoutError:
            error(self.notifier, "Request timed out. Please try again.")
            return None
        except UnauthorizedError:
            error(self.notifier, "Please log in again to access this feature.")
            return None
        except ApiError:
            _logger.warning("Fetching food recommendations failed", exc_info=True)
            error(
                self.notifier,
                "Failed to generate food recommendations. Please try again.",
            )
            return None
        self.food_recommendations = body.get("recommendations")
        note = body.get("note")
        if note:
            info(self.notifier, str(note))
        else:
            success(self.notifier, "Food recommendations generated successfully!")
        return self.food_recommendations

    def close(self) -> None:
        """Drop pending timers when the screen goes away."""
        self._autosave.cancel()
        self._food_timer.cancel()
