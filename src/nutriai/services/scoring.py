"""Safety and progress scoring."""

import math
import re
from collections.abc import Iterable, Mapping, Sequence

from nutriai.domain.allergens import (
    AllergenFinding,
    AllergenSeverity,
    Recommendation,
    RiskLevel,
)
from nutriai.domain.micronutrients import (
    MICRONUTRIENT_RDA,
    WEEK_DAYS,
    Deficiency,
    DeficiencyBand,
    MicronutrientSample,
    ProgressBand,
)
from nutriai.domain.sleep import SleepStatus
from nutriai.services.aggregation import coerce_number

SEVERITY_WEIGHTS: dict[AllergenSeverity, float] = {
    AllergenSeverity.HIGH: 0.5,
    AllergenSeverity.MEDIUM: 0.3,
    AllergenSeverity.LOW: 0.2,
}

DEFICIENT_PERCENTAGE = 70
MAX_PASSWORD_SCORE = 5
MIN_PASSWORD_LENGTH = 8


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def _finding_parts(
    finding: AllergenFinding | Mapping[str, object],
) -> tuple[float, AllergenSeverity]:
    if isinstance(finding, AllergenFinding):
        return coerce_number(finding.confidence), finding.severity
    return coerce_number(finding.get("confidence")), AllergenSeverity.parse(
        finding.get("severity")
    )


def safety_score(findings: Iterable[AllergenFinding | Mapping[str, object]]) -> int:
    """Score food safety from 0 to 100 given detected allergens.

    Each finding subtracts ``100 * confidence * weight(severity)``; no
    findings means a perfect 100.
    """
    total_risk = 0.0
    for finding in findings:
        confidence, severity = _finding_parts(finding)
        total_risk += confidence * SEVERITY_WEIGHTS[severity]
    return min(max(round_half_up(100 - total_risk * 100), 0), 100)


def risk_level(confidence: float) -> RiskLevel:
    return RiskLevel.from_confidence(confidence)


def safety_color(score: int) -> str:
    """Display band of a safety score."""
    if score >= 70:
        return "green"
    if score >= 40:
        return "orange"
    return "red"


def safety_recommendations(
    findings: Iterable[AllergenFinding], score: int
) -> list[Recommendation]:
    """Overall advice for a score plus one line per high-severity allergen."""
    if score < 30:
        recommendations = [
            Recommendation(
                "warning", "High risk detected. Avoid this food item completely."
            )
        ]
    elif score < 70:
        recommendations = [
            Recommendation(
                "caution",
                "Moderate risk. Consult with healthcare provider before consumption.",
            )
        ]
    else:
        recommendations = [
            Recommendation("safe", "Low risk. Generally safe for most people.")
        ]
    for finding in findings:
        if finding.severity is AllergenSeverity.HIGH:
            recommendations.append(
                Recommendation(
                    "danger", f"Contains {finding.name}. Strict avoidance recommended."
                )
            )
    return recommendations


def rda_percentage(average: float, rda: float) -> float:
    """Average daily intake as a percentage of the RDA."""
    if rda <= 0:
        return 0.0
    return average / rda * 100


def progress_band(percentage: float) -> ProgressBand:
    if percentage >= 100:
        return ProgressBand.MET
    if percentage >= 70:
        return ProgressBand.APPROACHING
    if percentage >= 50:
        return ProgressBand.LOW
    return ProgressBand.CRITICAL


def deficiency_band(percentage: float) -> DeficiencyBand | None:
    """Band of a shortfall, or None when intake reaches 70% of the RDA."""
    if percentage >= DEFICIENT_PERCENTAGE:
        return None
    if percentage < 30:
        return DeficiencyBand.SEVERE
    if percentage < 50:
        return DeficiencyBand.MODERATE
    return DeficiencyBand.MILD


def weekly_progress(
    samples: Sequence[MicronutrientSample], nutrient: str, rda: float
) -> float:
    """Share of the weekly RDA covered by the samples, capped at 100."""
    if not samples or rda <= 0:
        return 0.0
    total = sum(sample.nutrients.get(nutrient, 0.0) for sample in samples)
    return min(total / (rda * WEEK_DAYS) * 100, 100.0)


def find_deficiencies(
    samples: Sequence[MicronutrientSample],
    rda_table: Mapping[str, float] = MICRONUTRIENT_RDA,
) -> list[Deficiency]:
    """List nutrients whose average daily intake is below 70% of the RDA."""
    if not samples:
        return []
    deficiencies = []
    for nutrient, rda in rda_table.items():
        total = sum(sample.nutrients.get(nutrient, 0.0) for sample in samples)
        average = total / len(samples)
        percentage = rda_percentage(average, rda)
        band = deficiency_band(percentage)
        if band is None:
            continue
        deficiencies.append(
            Deficiency(
                nutrient=nutrient,
                amount=round(average, 2),
                rda=rda,
                percentage=round_half_up(percentage),
                band=band,
                deficit=round(rda - average, 2),
            )
        )
    return deficiencies


def sleep_status(hours: float, goal: float) -> SleepStatus:
    if hours >= goal:
        return SleepStatus.EXCELLENT
    if hours >= goal * 0.8:
        return SleepStatus.GOOD
    if hours >= goal * 0.6:
        return SleepStatus.FAIR
    return SleepStatus.POOR


def password_strength(password: str) -> int:
    """Score a password from 0 to 5 by length and character classes."""
    score = 0
    if len(password) >= MIN_PASSWORD_LENGTH:
        score += 1
    for pattern in (r"[A-Z]", r"[a-z]", r"[0-9]", r"[^A-Za-z0-9]"):
        if re.search(pattern, password):
            score += 1
    return min(score, MAX_PASSWORD_SCORE)
