"""Portion size estimation models."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_FOOD = "default"


class ReferenceObject(str, Enum):
    """Object photographed next to the food for scale."""

    HAND = "hand"
    FORK = "fork"
    SPOON = "spoon"

    @classmethod
    def parse(cls, raw: object) -> "ReferenceObject":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.HAND


@dataclass(frozen=True)
class PortionEstimate:
    """Estimated portion in grams and millilitres with a 0-100 confidence."""

    weight: float
    volume: float
    confidence: int

    def to_payload(self) -> dict[str, object]:
        return {
            "weight": self.weight,
            "volume": self.volume,
            "confidence": self.confidence,
        }


PORTION_ESTIMATES: dict[ReferenceObject, dict[str, PortionEstimate]] = {
    ReferenceObject.HAND: {
        "pizza": PortionEstimate(180, 250, 85),
        "rice": PortionEstimate(150, 200, 78),
        "salad": PortionEstimate(120, 180, 82),
        DEFAULT_FOOD: PortionEstimate(150, 200, 75),
    },
    ReferenceObject.FORK: {
        "pizza": PortionEstimate(160, 220, 88),
        "rice": PortionEstimate(140, 190, 81),
        "salad": PortionEstimate(110, 170, 85),
        DEFAULT_FOOD: PortionEstimate(140, 190, 78),
    },
    ReferenceObject.SPOON: {
        "pizza": PortionEstimate(170, 240, 82),
        "rice": PortionEstimate(145, 195, 79),
        "salad": PortionEstimate(115, 175, 83),
        DEFAULT_FOOD: PortionEstimate(145, 195, 76),
    },
}

# Nutrient amount per gram of an average mixed dish.
PER_GRAM_NUTRITION: dict[str, float] = {
    "calories": 0.8,
    "protein": 0.05,
    "carbs": 0.12,
    "fat": 0.03,
    "fiber": 0.02,
    "sugar": 0.01,
    "sodium": 0.5,
}
