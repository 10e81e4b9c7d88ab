"""Downloadable JSON and HTML reports."""

import html
import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Protocol

from nutriai.domain.allergens import AllergenAnalysis
from nutriai.services.scoring import safety_color

_logger = logging.getLogger(__name__)


class ReportSink(Protocol):
    """Destination for generated report files."""

    def write(self, filename: str, content: str) -> str:
        """Store a report and return where it was written."""


@dataclass
class DirectoryReportSink(ReportSink):
    """Writes reports into a local directory."""

    directory: Path

    def write(self, filename: str, content: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / Path(filename).name
        path.write_text(content, encoding="utf-8")
        _logger.info("Report written: %s", path)
        return str(path)


@dataclass
class InMemoryReportSink(ReportSink):
    """Keeps reports in memory, keyed by file name."""

    files: dict[str, str] = field(default_factory=dict)

    def write(self, filename: str, content: str) -> str:
        self.files[filename] = content
        return filename


def render_json(payload: object) -> str:
    return json.dumps(payload, indent=2)


def allergen_report_filename(kind: str, day: date) -> str:
    """File name for an allergen report of kind ``detailed``, ``basic`` or ``html``."""
    extension = "html" if kind == "html" else "json"
    return f"allergen-{kind}-report-{day.isoformat()}.{extension}"


def micronutrient_report_filename(start: date, end: date) -> str:
    return f"micronutrient-report-{start.isoformat()}-to-{end.isoformat()}.json"


def basic_allergen_report(analysis: AllergenAnalysis) -> dict[str, object]:
    """Report assembled locally when the backend cannot produce one."""
    payload = analysis.to_payload()
    return {
        "title": "AI Allergen Detection Report",
        "timestamp": payload["timestamp"],
        "imageName": payload["imageName"],
        "allergens": payload["allergens"],
        "safetyScore": payload["safetyScore"],
        "recommendations": payload["recommendations"],
    }


_HTML_STYLE = """
body { font-family: Arial, sans-serif; margin: 40px; }
.header { text-align: center; border-bottom: 2px solid #333; padding-bottom: 20px; }
.section { margin: 20px 0; }
.allergen { background: #f5f5f5; padding: 15px; margin: 10px 0; border-radius: 5px; }
.high-risk { border-left: 4px solid #dc2626; }
.medium-risk { border-left: 4px solid #ea580c; }
.low-risk { border-left: 4px solid #ca8a04; }
.safety-score { font-size: 24px; font-weight: bold; text-align: center; padding: 20px; }
.green { color: #16a34a; }
.orange { color: #ea580c; }
.red { color: #dc2626; }
"""


def _text(value: object) -> str:
    if isinstance(value, list):
        return ", ".join(html.escape(str(item)) for item in value)
    return html.escape(str(value if value is not None else ""))


def _allergen_block(allergen: dict[str, object]) -> str:
    severity = str(allergen.get("severity") or "low")
    css = f"{severity}-risk" if severity in {"high", "medium"} else "low-risk"
    try:
        confidence = round(float(allergen.get("confidence") or 0) * 100)
    except (TypeError, ValueError):
        confidence = 0
    return (
        f'<div class="allergen {css}">'
        f"<h3>{_text(allergen.get('name'))}</h3>"
        f"<p><strong>Severity:</strong> {_text(severity)}</p>"
        f"<p><strong>Confidence:</strong> {confidence}%</p>"
        f"<p><strong>Symptoms:</strong> {_text(allergen.get('symptoms') or [])}</p>"
        "<p><strong>Common Foods:</strong> "
        f"{_text(allergen.get('common_foods') or [])}</p>"
        "<p><strong>Alternatives:</strong> "
        f"{_text(allergen.get('alternatives') or [])}</p>"
        "</div>"
    )


def render_allergen_html(report: dict[str, object]) -> str:
    """Render a detailed allergen report returned by the backend as HTML."""
    summary = report.get("summary") or {}
    detailed = report.get("detailedAnalysis") or {}
    emergency = detailed.get("emergencyInfo") or {}
    try:
        score = int(summary.get("safetyScore") or 0)
    except (TypeError, ValueError):
        score = 0
    allergens = "".join(
        _allergen_block(item)
        for item in detailed.get("allergens") or []
        if isinstance(item, dict)
    )
    title = _text(report.get("title"))
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{title}</title><style>{_HTML_STYLE}</style></head><body>"
        f'<div class="header"><h1>{title}</h1>'
        f"<p>Generated on: {_text(report.get('generatedAt'))}</p></div>"
        '<div class="section"><h2>Safety Summary</h2>'
        f'<div class="safety-score {safety_color(score)}">Safety Score: {score}%</div>'
        f"<p><strong>Risk Level:</strong> {_text(summary.get('riskLevel'))}</p>"
        "<p><strong>Total Allergens Detected:</strong> "
        f"{_text(summary.get('totalAllergens'))}</p></div>"
        f'<div class="section"><h2>Detailed Analysis</h2>{allergens}</div>'
        '<div class="section"><h2>Safety Assessment</h2>'
        f"<p>{_text(detailed.get('safetyAssessment'))}</p>"
        "<p><strong>Medical Advice:</strong> "
        f"{_text(detailed.get('medicalAdvice'))}</p></div>"
        '<div class="section"><h2>Emergency Information</h2>'
        "<p><strong>Watch for symptoms:</strong> "
        f"{_text(emergency.get('symptoms'))}</p>"
        "<p><strong>Action required:</strong> "
        f"{_text(emergency.get('action'))}</p></div>"
        "</body></html>"
    )
