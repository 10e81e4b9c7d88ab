"""Health metric and condition models."""

from dataclasses import dataclass, field
from enum import Enum


class BmiCategory(str, Enum):
    """WHO adult BMI categories."""

    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


@dataclass(frozen=True)
class BmiResult:
    """Body mass index rounded to one decimal."""

    value: float
    category: BmiCategory


@dataclass(frozen=True)
class HealthCondition:
    """A diagnosed condition entered on the health analysis screen."""

    id: int | str
    condition: str = ""
    diagnosed_date: str = ""
    severity: str = "mild"
    medications: tuple[str, ...] = ()
    symptoms: tuple[str, ...] = ()

    @classmethod
    def from_payload(
        cls, payload: dict[str, object], fallback_id: int
    ) -> "HealthCondition":
        return cls(
            id=payload.get("id") or fallback_id,
            condition=str(payload.get("condition") or ""),
            diagnosed_date=str(payload.get("diagnosedDate") or ""),
            severity=str(payload.get("severity") or "mild"),
            medications=tuple(_as_strings(payload.get("medications"))),
            symptoms=tuple(_as_strings(payload.get("symptoms"))),
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "condition": self.condition,
            "diagnosedDate": self.diagnosed_date,
            "severity": self.severity,
            "medications": list(self.medications),
            "symptoms": list(self.symptoms),
        }


@dataclass(frozen=True)
class ConditionRecommendation:
    """Diet, exercise and care advice for one condition."""

    condition: str
    severity: str
    foods: list[str] = field(default_factory=list)
    avoid: list[str] = field(default_factory=list)
    exercises: list[str] = field(default_factory=list)
    notes: str = ""
    treatment: list[str] = field(default_factory=list)
    care: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HealthWarning:
    """Nutrition warning raised from recent intake."""

    type: str
    title: str
    message: str
    severity: str


@dataclass(frozen=True)
class DietaryRecommendation:
    """Grouped suggestions addressing one dietary issue."""

    type: str
    title: str
    suggestions: list[str]
    priority: str


@dataclass(frozen=True)
class NutritionGoals:
    """Daily nutrient targets."""

    daily_calories: float = 2000
    daily_protein: float = 50
    daily_carbs: float = 250
    daily_fat: float = 65
    daily_sugar: float = 25
    daily_sodium: float = 2300
    daily_fiber: float = 25


def _as_strings(value: object) -> list[str]:
    if isinstance(value, list | tuple):
        return [str(item) for item in value]
    return []
