"""Allergen detection screen: analyze a food photo and export reports."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from nutriai.adapters.api_client import ApiClient, require_success
from nutriai.domain.allergens import AllergenAnalysis, AllergenFinding, Recommendation
from nutriai.domain.screens import UploadedFile
from nutriai.errors import ApiError, UnauthorizedError
from nutriai.services.aggregation import coerce_number
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notifier, success, warning
from nutriai.services.reports import (
    ReportSink,
    allergen_report_filename,
    basic_allergen_report,
    render_allergen_html,
    render_json,
)
from nutriai.services.scoring import safety_recommendations, safety_score
from nutriai.services.storage import (
    ALLERGEN_HISTORY_KEY,
    KeyValueStore,
    load_json,
    save_json,
)

_logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


def _now() -> datetime:
    return datetime.now(tz=UTC)


def analysis_from_payload(
    payload: dict[str, object], image_name: str, now: datetime
) -> AllergenAnalysis:
    """Build an analysis from the ``data`` of an analyze response.

    A missing safety score or recommendation list is computed locally.
    """
    raw_findings = payload.get("allergens")
    findings = [
        AllergenFinding.from_payload(item)
        for item in (raw_findings if isinstance(raw_findings, list) else [])
        if isinstance(item, dict)
    ]
    if payload.get("safetyScore") is None:
        score = safety_score(findings)
    else:
        score = int(coerce_number(payload.get("safetyScore")))
    raw_recs = payload.get("recommendations")
    if isinstance(raw_recs, list):
        recommendations = [
            Recommendation(
                type=str(item.get("type") or "info"),
                text=str(item.get("text") or item.get("message") or ""),
            )
            for item in raw_recs
            if isinstance(item, dict)
        ]
    else:
        recommendations = safety_recommendations(findings, score)
    analysis_id = payload.get("id")
    return AllergenAnalysis(
        timestamp=str(payload.get("timestamp") or now.isoformat()),
        image_name=str(payload.get("imageName") or image_name),
        findings=findings,
        safety_score=score,
        recommendations=recommendations,
        id=str(analysis_id) if analysis_id is not None else None,
    )


@dataclass
class AllergenDetectionController:
    api: ApiClient
    notifier: Notifier
    store: KeyValueStore
    reports: ReportSink
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    now: Callable[[], datetime] = _now
    today: Callable[[], date] = date.today
    image: UploadedFile | None = None
    analysis: AllergenAnalysis | None = None

    def select_image(self, image: UploadedFile) -> None:
        self.image = image
        self.analysis = None

    def history(self) -> list[dict[str, object]]:
        """Most recent analyses first."""
        saved = load_json(self.store, ALLERGEN_HISTORY_KEY, [])
        if not isinstance(saved, list):
            return []
        return [item for item in saved if isinstance(item, dict)]

    def _remember(self, analysis: AllergenAnalysis) -> None:
        recent = [analysis.to_payload(), *self.history()][:HISTORY_LIMIT]
        save_json(self.store, ALLERGEN_HISTORY_KEY, recent)

    async def load_history(self) -> list[dict[str, object]]:
        """Replace the local history with the backend's when it answers."""
        try:
            body = await self.api.get("/api/allergen/history", demo_token=True)
            data = require_success(body, "Failed to load scan history")
        except ApiError:
            _logger.warning("Loading allergen history failed", exc_info=True)
            return self.history()
        items = data.get("items")
        if isinstance(items, list):
            save_json(self.store, ALLERGEN_HISTORY_KEY, items[:HISTORY_LIMIT])
        return self.history()

    async def analyze(self) -> AllergenAnalysis | None:
        """Analyze the selected image, simulating a result if the backend fails."""
        if self.image is None:
            return None
        image = self.image
        try:
            body = await self.api.upload(
                "/api/allergen/analyze",
                [image.as_form_file("image")],
                demo_token=True,
            )
            data = require_success(body, "Analysis failed")
        except UnauthorizedError:
            warning(self.notifier, "Please log in to use this feature")
            return None
        except ApiError:
            _logger.warning("Allergen analysis failed", exc_info=True)
            warning(self.notifier, "API analysis failed. Using simulation mode...")
            self.analysis = self.fallback.allergen_analysis(image.filename, self.now())
        else:
            self.analysis = analysis_from_payload(data, image.filename, self.now())
            success(self.notifier, "Allergen analysis completed successfully!")
        self._remember(self.analysis)
        return self.analysis

    async def _detailed_report(self, analysis: AllergenAnalysis) -> dict[str, object]:
        body = await self.api.post(
            "/api/allergen/report",
            {
                "analysisId": analysis.id,
                "includeAlternatives": True,
                "includeSymptoms": True,
            },
            demo_token=True,
        )
        return require_success(body, "Failed to generate detailed report")

    async def export_report(self) -> str | None:
        """Write the detailed JSON report, or a locally built basic one."""
        analysis = self.analysis
        if analysis is None:
            return None
        day = self.today()
        try:
            report = await self._detailed_report(analysis)
        except ApiError:
            _logger.warning("Detailed allergen report failed", exc_info=True)
            location = self.reports.write(
                allergen_report_filename("basic", day),
                render_json(basic_allergen_report(analysis)),
            )
            success(self.notifier, "Basic report exported successfully!")
            return location
        location = self.reports.write(
            allergen_report_filename("detailed", day), render_json(report)
        )
        success(self.notifier, "Detailed report exported successfully!")
        return location

    async def export_html_report(self) -> str | None:
        analysis = self.analysis
        if analysis is None:
            return None
        try:
            report = await self._detailed_report(analysis)
        except ApiError:
            _logger.warning("Detailed allergen report failed", exc_info=True)
            warning(
                self.notifier,
                "Failed to generate detailed report. Using basic export instead.",
            )
            return await self.export_report()
        location = self.reports.write(
            allergen_report_filename("html", self.today()),
            render_allergen_html(report),
        )
        success(self.notifier, "HTML report generated successfully!")
        return location

    def share_text(self) -> str | None:
        if self.analysis is None:
            return None
        names = ", ".join(finding.name for finding in self.analysis.findings)
        return (
            "AI Allergen Detection Results: Safety Score "
            f"{self.analysis.safety_score}%. Detected allergens: {names}"
        )
