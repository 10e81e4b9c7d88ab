"""Micronutrient domain models and reference intakes."""

from dataclasses import dataclass, field
from enum import Enum

WEEK_DAYS = 7

# Daily RDA values; units are listed in NUTRIENT_INFO where known.
MICRONUTRIENT_RDA: dict[str, float] = {
    "vitamin_a": 900,
    "vitamin_c": 90,
    "vitamin_d": 20,
    "vitamin_e": 15,
    "vitamin_k": 120,
    "thiamine_b1": 1.2,
    "riboflavin_b2": 1.3,
    "niacin_b3": 16,
    "pantothenic_acid_b5": 5,
    "pyridoxine_b6": 1.7,
    "biotin_b7": 30,
    "folate_b9": 400,
    "cobalamin_b12": 2.4,
    "calcium": 1000,
    "iron": 8,
    "magnesium": 400,
    "phosphorus": 700,
    "potassium": 3500,
    "sodium": 2300,
    "zinc": 11,
    "copper": 900,
    "manganese": 2.3,
    "selenium": 55,
    "iodine": 150,
    "chromium": 35,
    "molybdenum": 45,
}


@dataclass(frozen=True)
class NutrientInfo:
    """Display metadata for a micronutrient."""

    name: str
    unit: str
    description: str


NUTRIENT_INFO: dict[str, NutrientInfo] = {
    "vitamin_a": NutrientInfo(
        "Vitamin A", "mcg", "Essential for vision, immune function, and cell growth"
    ),
    "vitamin_c": NutrientInfo(
        "Vitamin C",
        "mg",
        "Powerful antioxidant that supports immune function and collagen production",
    ),
    "vitamin_d": NutrientInfo(
        "Vitamin D",
        "mcg",
        "Critical for bone health, immune function, and mood regulation",
    ),
    "vitamin_e": NutrientInfo(
        "Vitamin E",
        "mg",
        "Antioxidant that protects cells from damage and supports immune function",
    ),
    "vitamin_k": NutrientInfo(
        "Vitamin K", "mcg", "Essential for blood clotting and bone health"
    ),
    "thiamine_b1": NutrientInfo(
        "Vitamin B1 (Thiamine)",
        "mg",
        "Essential for energy metabolism and nerve function",
    ),
    "riboflavin_b2": NutrientInfo(
        "Vitamin B2 (Riboflavin)",
        "mg",
        "Important for energy production and cellular function",
    ),
    "niacin_b3": NutrientInfo(
        "Vitamin B3 (Niacin)",
        "mg",
        "Supports energy production and cardiovascular health",
    ),
    "pyridoxine_b6": NutrientInfo(
        "Vitamin B6", "mg", "Essential for brain development and immune function"
    ),
    "cobalamin_b12": NutrientInfo(
        "Vitamin B12", "mcg", "Critical for nerve function and red blood cell formation"
    ),
    "folate_b9": NutrientInfo(
        "Folate (B9)", "mcg", "Essential for DNA synthesis and cell division"
    ),
    "calcium": NutrientInfo(
        "Calcium", "mg", "Essential for strong bones, teeth, and muscle function"
    ),
    "iron": NutrientInfo(
        "Iron", "mg", "Critical for oxygen transport and energy production"
    ),
    "magnesium": NutrientInfo(
        "Magnesium",
        "mg",
        "Important for muscle function, nerve transmission, and bone health",
    ),
    "zinc": NutrientInfo(
        "Zinc",
        "mg",
        "Essential for immune function, wound healing, and protein synthesis",
    ),
}


def nutrient_display_name(nutrient: str) -> str:
    """Return a readable nutrient name for keys without catalog metadata."""
    info = NUTRIENT_INFO.get(nutrient)
    if info is not None:
        return info.name
    return nutrient.replace("_", " ", 1).upper()


def nutrient_unit(nutrient: str) -> str:
    info = NUTRIENT_INFO.get(nutrient)
    return info.unit if info else "units"


class DeficiencyBand(str, Enum):
    """Severity of a shortfall against the RDA."""

    SEVERE = "severe"
    MODERATE = "moderate"
    MILD = "mild"


class ProgressBand(str, Enum):
    """Display band for a percentage of the RDA."""

    CRITICAL = "critical"
    LOW = "low"
    APPROACHING = "approaching"
    MET = "met"


@dataclass(frozen=True)
class MicronutrientSample:
    """Micronutrient intake recorded for a single day."""

    day: str
    date: str
    nutrients: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "MicronutrientSample":
        raw = payload.get("nutrients")
        nutrients: dict[str, float] = {}
        if isinstance(raw, dict):
            for key, value in raw.items():
                if isinstance(value, int | float):
                    nutrients[str(key)] = float(value)
        return cls(
            day=str(payload.get("day") or ""),
            date=str(payload.get("date") or ""),
            nutrients=nutrients,
        )

    def to_payload(self) -> dict[str, object]:
        return {"day": self.day, "date": self.date, "nutrients": dict(self.nutrients)}


@dataclass(frozen=True)
class Deficiency:
    """A nutrient whose intake falls short of 70% of the RDA."""

    nutrient: str
    amount: float
    rda: float
    percentage: int
    band: DeficiencyBand
    deficit: float

    def to_payload(self) -> dict[str, object]:
        return {
            "nutrient": self.nutrient,
            "amount": self.amount,
            "rda": self.rda,
            "percentage": self.percentage,
            "severity": self.band.value,
            "deficit": self.deficit,
        }
