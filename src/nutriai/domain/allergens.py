"""Allergen detection domain models."""

import math
from dataclasses import dataclass, field
from enum import Enum

HIGH_RISK_CONFIDENCE = 0.8
MEDIUM_RISK_CONFIDENCE = 0.6


class AllergenSeverity(str, Enum):
    """Clinical severity of an allergen class."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: object) -> "AllergenSeverity":
        """Return the matching severity; unknown values count as low."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.LOW


class RiskLevel(str, Enum):
    """Risk bucket derived from detection confidence."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_confidence(cls, confidence: float) -> "RiskLevel":
        if confidence > HIGH_RISK_CONFIDENCE:
            return cls.HIGH
        if confidence > MEDIUM_RISK_CONFIDENCE:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class AllergenInfo:
    """Static catalog entry for an allergen class."""

    name: str
    severity: AllergenSeverity
    description: str


ALLERGEN_CATALOG: dict[str, AllergenInfo] = {
    "nuts": AllergenInfo(
        "Tree Nuts", AllergenSeverity.HIGH, "Includes almonds, walnuts, cashews, etc."
    ),
    "peanuts": AllergenInfo(
        "Peanuts", AllergenSeverity.HIGH, "Legume, not a true nut"
    ),
    "milk": AllergenInfo(
        "Dairy", AllergenSeverity.MEDIUM, "Milk, cheese, yogurt, butter"
    ),
    "eggs": AllergenInfo(
        "Eggs", AllergenSeverity.MEDIUM, "Chicken eggs and egg products"
    ),
    "soy": AllergenInfo("Soy", AllergenSeverity.MEDIUM, "Soybeans and soy products"),
    "wheat": AllergenInfo(
        "Wheat", AllergenSeverity.MEDIUM, "Wheat flour and wheat products"
    ),
    "fish": AllergenInfo("Fish", AllergenSeverity.HIGH, "All types of fish"),
    "shellfish": AllergenInfo(
        "Shellfish", AllergenSeverity.HIGH, "Crustaceans and mollusks"
    ),
    "sesame": AllergenInfo("Sesame", AllergenSeverity.MEDIUM, "Sesame seeds and oil"),
    "sulfites": AllergenInfo(
        "Sulfites", AllergenSeverity.LOW, "Preservatives in dried fruits and wine"
    ),
}


@dataclass(frozen=True)
class AllergenFinding:
    """An allergen detected in a food image."""

    type: str
    severity: AllergenSeverity
    confidence: float
    name: str = ""
    description: str = ""

    @property
    def risk_level(self) -> RiskLevel:
        return RiskLevel.from_confidence(self.confidence)

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "AllergenFinding":
        """Build a finding from a backend record, filling gaps from the catalog."""
        allergen_type = str(payload.get("type") or "")
        info = ALLERGEN_CATALOG.get(allergen_type)
        severity = payload.get("severity") or (info.severity if info else None)
        try:
            confidence = float(payload.get("confidence") or 0.0)
        except (TypeError, ValueError):
            confidence = 0.0
        if not math.isfinite(confidence):
            confidence = 0.0
        return cls(
            type=allergen_type,
            severity=AllergenSeverity.parse(severity),
            confidence=min(max(confidence, 0.0), 1.0),
            name=str(payload.get("name") or (info.name if info else allergen_type)),
            description=str(
                payload.get("description") or (info.description if info else "")
            ),
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "riskLevel": self.risk_level.value,
        }


@dataclass(frozen=True)
class Recommendation:
    """Advice line attached to an allergen analysis."""

    type: str
    text: str


@dataclass(frozen=True)
class AllergenAnalysis:
    """Result of analyzing one food image for allergens."""

    timestamp: str
    image_name: str
    findings: list[AllergenFinding]
    safety_score: int
    recommendations: list[Recommendation] = field(default_factory=list)
    id: str | None = None
    simulated: bool = False

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "imageName": self.image_name,
            "allergens": [finding.to_payload() for finding in self.findings],
            "safetyScore": self.safety_score,
            "recommendations": [
                {"type": rec.type, "text": rec.text} for rec in self.recommendations
            ],
            "simulated": self.simulated,
        }
