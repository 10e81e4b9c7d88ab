"""Tests for the allergen detection screen and its reports."""

import asyncio
import json
from datetime import datetime

import pytest

from nutriai.domain.screens import UploadedFile
from nutriai.errors import ApiError, UnauthorizedError
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import NoticeLevel
from nutriai.services.reports import InMemoryReportSink
from nutriai.services.screens.allergen_detection import (
    HISTORY_LIMIT,
    AllergenDetectionController,
    analysis_from_payload,
)
from nutriai.services.storage import InMemoryKeyValueStore

from tests.conftest import NOW, TODAY, FakeApiClient, RecordingNotifier

ANALYZE = "/api/allergen/analyze"
REPORT = "/api/allergen/report"
PHOTO = UploadedFile("cake.jpg", b"jpeg", "image/jpeg")


@pytest.fixture
def controller(
    api: FakeApiClient,
    notifier: RecordingNotifier,
    store: InMemoryKeyValueStore,
    reports: InMemoryReportSink,
) -> AllergenDetectionController:
    controller = AllergenDetectionController(
        api=api,
        notifier=notifier,
        store=store,
        reports=reports,
        fallback=FallbackGenerator.seeded(5),
        now=lambda: NOW,
        today=lambda: TODAY,
    )
    controller.select_image(PHOTO)
    return controller


def test_analysis_from_payload_computes_missing_score() -> None:
    analysis = analysis_from_payload(
        {"allergens": [{"type": "peanuts", "confidence": 1.0}], "id": 12},
        "cake.jpg",
        datetime(2024, 1, 1),
    )

    assert analysis.findings[0].name == "Peanuts"
    assert analysis.safety_score == 50
    assert analysis.recommendations[0].type == "caution"
    assert analysis.recommendations[1].type == "danger"
    assert analysis.id == "12"
    assert analysis.timestamp == "2024-01-01T00:00:00"


def test_analyze_success_is_remembered(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    api.respond(
        "UPLOAD",
        ANALYZE,
        {
            "success": True,
            "data": {
                "id": "a1",
                "allergens": [{"type": "milk", "confidence": 0.5}],
                "safetyScore": 85,
                "recommendations": [{"type": "safe", "message": "Fine"}],
            },
        },
    )

    analysis = asyncio.run(controller.analyze())

    assert analysis is not None
    assert analysis.safety_score == 85
    assert analysis.recommendations[0].text == "Fine"
    assert api.last("UPLOAD", ANALYZE).demo_token
    assert controller.history()[0]["id"] == "a1"
    assert notifier.messages() == ["Allergen analysis completed successfully!"]


def test_analyze_failure_simulates_result(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    api.respond("UPLOAD", ANALYZE, {"success": False, "error": "Model offline"})

    analysis = asyncio.run(controller.analyze())

    assert analysis is not None
    assert analysis.simulated
    assert analysis.image_name == "cake.jpg"
    assert controller.history()[0]["simulated"] is True
    assert notifier.messages(NoticeLevel.WARNING) == [
        "API analysis failed. Using simulation mode..."
    ]


def test_analyze_unauthorized_asks_for_login(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    notifier: RecordingNotifier,
) -> None:
    api.respond("UPLOAD", ANALYZE, UnauthorizedError())

    assert asyncio.run(controller.analyze()) is None
    assert controller.history() == []
    assert notifier.messages() == ["Please log in to use this feature"]


def test_history_is_capped(
    controller: AllergenDetectionController, api: FakeApiClient
) -> None:
    api.respond("UPLOAD", ANALYZE, ApiError("down"))

    for _ in range(HISTORY_LIMIT + 3):
        asyncio.run(controller.analyze())

    assert len(controller.history()) == HISTORY_LIMIT


def test_load_history_replaces_local_copy(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    store: InMemoryKeyValueStore,
) -> None:
    history = {"success": True, "data": [{"id": "remote"}]}
    api.respond("GET", "/api/allergen/history", history)

    assert asyncio.run(controller.load_history()) == [{"id": "remote"}]
    assert json.loads(store.get("allergenScanHistory") or "[]") == [{"id": "remote"}]


def test_export_report_falls_back_to_basic(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    reports: InMemoryReportSink,
) -> None:
    api.respond("UPLOAD", ANALYZE, ApiError("down"))
    api.respond("POST", REPORT, ApiError("down"))
    asyncio.run(controller.analyze())

    location = asyncio.run(controller.export_report())

    assert location == "allergen-basic-report-2024-03-14.json"
    report = json.loads(reports.files[location])
    assert report["title"] == "AI Allergen Detection Report"
    assert report["imageName"] == "cake.jpg"


def test_export_detailed_report(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    reports: InMemoryReportSink,
) -> None:
    api.respond("UPLOAD", ANALYZE, ApiError("down"))
    api.respond("POST", REPORT, {"success": True, "data": {"title": "Detailed"}})
    asyncio.run(controller.analyze())

    location = asyncio.run(controller.export_report())

    assert location == "allergen-detailed-report-2024-03-14.json"
    assert json.loads(reports.files[location]) == {"title": "Detailed"}
    assert api.last("POST", REPORT).payload["includeAlternatives"] is True


def test_export_html_report(
    controller: AllergenDetectionController,
    api: FakeApiClient,
    reports: InMemoryReportSink,
    notifier: RecordingNotifier,
) -> None:
    api.respond("UPLOAD", ANALYZE, ApiError("down"))
    api.respond(
        "POST",
        REPORT,
        {
            "success": True,
            "data": {
                "title": "Cake <report>",
                "summary": {"safetyScore": 35, "riskLevel": "high"},
                "detailedAnalysis": {
                    "allergens": [
                        {"name": "Peanuts", "severity": "high", "confidence": 0.9}
                    ]
                },
            },
        },
    )
    asyncio.run(controller.analyze())

    location = asyncio.run(controller.export_html_report())

    assert location == "allergen-html-report-2024-03-14.html"
    page = reports.files[location]
    assert "Cake &lt;report&gt;" in page
    assert 'class="safety-score red"' in page
    assert "Confidence:</strong> 90%" in page
    assert notifier.messages()[-1] == "HTML report generated successfully!"


def test_share_text(controller: AllergenDetectionController) -> None:
    assert controller.share_text() is None

    analysis = analysis_from_payload(
        {"allergens": [{"type": "milk", "confidence": 0.5}], "safetyScore": 85},
        "cake.jpg",
        NOW,
    )
    controller.analysis = analysis

    assert controller.share_text() == (
        "AI Allergen Detection Results: Safety Score 85%. Detected allergens: Dairy"
    )


def test_analyze_tolerates_non_numeric_confidence(
    controller: AllergenDetectionController, api: FakeApiClient
) -> None:
    finding = {"type": "milk", "confidence": "nan"}
    api.respond("UPLOAD", ANALYZE, {"success": True, "data": {"allergens": [finding]}})

    analysis = asyncio.run(controller.analyze())

    assert analysis is not None
    assert analysis.findings[0].confidence == 0.0
    assert analysis.safety_score == 100
