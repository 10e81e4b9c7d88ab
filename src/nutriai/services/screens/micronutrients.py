"""Micronutrient tracking screen."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.micronutrients import (
    MICRONUTRIENT_RDA,
    WEEK_DAYS,
    MicronutrientSample,
    nutrient_display_name,
)
from nutriai.domain.screens import MicronutrientTab
from nutriai.errors import ApiError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notifier, success
from nutriai.services.reports import (
    ReportSink,
    micronutrient_report_filename,
    render_json,
)
from nutriai.services.scoring import find_deficiencies, weekly_progress
from nutriai.services.storage import (
    MICRONUTRIENT_REPORTS_KEY,
    KeyValueStore,
    load_json,
    save_json,
)

_logger = logging.getLogger(__name__)

SHARED_NUTRIENTS = 5


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MicronutrientController:
    api: ApiClient
    notifier: Notifier
    store: KeyValueStore
    reports: ReportSink
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    today: Callable[[], date] = date.today
    now: Callable[[], datetime] = _now
    tab: MicronutrientTab = MicronutrientTab.WEEKLY_OVERVIEW
    period: str = "weekly"
    weekly_data: list[MicronutrientSample] = field(default_factory=list)
    deficiencies: list[dict[str, object]] = field(default_factory=list)
    recommendations: list[object] = field(default_factory=list)
    analysis: dict[str, object] | None = None
    simulated: bool = False

    async def load(self) -> None:
        await self.load_weekly_data()
        await self.load_analysis()

    async def select_period(self, period: str) -> None:
        self.period = period
        await self.load()

    async def load_analysis(self) -> None:
        """Fetch deficiencies; without them they are derived from weekly data."""
        try:
            body = await self.api.get(
                "/api/advanced-nutrition/micronutrients/analysis",
                {"period": self.period},
            )
        except ApiError:
            _logger.warning("Loading micronutrient analysis failed", exc_info=True)
            self.deficiencies = [
                deficiency.to_payload()
                for deficiency in find_deficiencies(self.weekly_data)
            ]
            return
        self.analysis = body
        deficiencies = body.get("deficiencies")
        recommendations = body.get("recommendations")
        self.deficiencies = list(deficiencies) if isinstance(deficiencies, list) else []
        self.recommendations = (
            list(recommendations) if isinstance(recommendations, list) else []
        )

    async def load_weekly_data(self) -> list[MicronutrientSample]:
        try:
            body = await self.api.get(
                "/api/advanced-nutrition/micronutrients/weekly-data"
            )
        except ApiError:
            _logger.warning("Loading weekly micronutrients failed", exc_info=True)
            self.weekly_data = self.fallback.weekly_micronutrients(self.today())
            self.simulated = True
            return self.weekly_data
        raw = body.get("weeklyData")
        raw = raw if isinstance(raw, list) else []
        self.weekly_data = [
            MicronutrientSample.from_payload(item)
            for item in raw
            if isinstance(item, dict)
        ]
        self.simulated = False
        return self.weekly_data

    def weekly_progress(self, nutrient: str) -> float:
        return weekly_progress(
            self.weekly_data, nutrient, MICRONUTRIENT_RDA.get(nutrient, 0.0)
        )

    def date_range(self) -> tuple[date, date]:
        end = self.today()
        return end - timedelta(days=WEEK_DAYS - 1), end

    def _report_data(self) -> dict[str, object]:
        return {
            "weeklyData": [sample.to_payload() for sample in self.weekly_data],
            "deficiencies": self.deficiencies,
            "recommendations": self.recommendations,
        }

    def export_report(self) -> str:
        start, end = self.date_range()
        report = {
            "title": "Micronutrient Weekly Report",
            "dateRange": f"{start.isoformat()} - {end.isoformat()}",
            "summary": {
                "totalNutrients": len(MICRONUTRIENT_RDA),
                "deficiencies": len(self.deficiencies),
                "recommendations": len(self.recommendations),
            },
            **self._report_data(),
        }
        location = self.reports.write(
            micronutrient_report_filename(start, end), render_json(report)
        )
        success(self.notifier, "Report exported successfully!")
        return location

    def saved_reports(self) -> list[dict[str, object]]:
        saved = load_json(self.store, MICRONUTRIENT_REPORTS_KEY, [])
        return saved if isinstance(saved, list) else []

    def save_report(self) -> dict[str, object]:
        """Append a snapshot of the current data to the saved reports."""
        moment = self.now()
        snapshot = {
            "id": int(moment.timestamp() * 1000),
            "timestamp": moment.isoformat(),
            "title": "Micronutrient Report",
            "data": self._report_data(),
        }
        save_json(
            self.store, MICRONUTRIENT_REPORTS_KEY, [*self.saved_reports(), snapshot]
        )
        success(self.notifier, "Report saved successfully!")
        return snapshot

    def share_text(self) -> str:
        progress = ", ".join(
            f"{nutrient_display_name(nutrient)}: "
            f"{round(self.weekly_progress(nutrient))}%"
            for nutrient in list(MICRONUTRIENT_RDA)[:SHARED_NUTRIENTS]
        )
        return (
            f"My Micronutrient Progress: {len(self.deficiencies)} deficiencies, "
            f"{len(self.recommendations)} recommendations. Progress: {progress}"
        )
