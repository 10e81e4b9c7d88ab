"""Nutrition domain models."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum

NUTRIENT_KEYS = ("calories", "protein", "carbs", "fat", "sugar", "sodium", "fiber")


class FoodUnit(str, Enum):
    """Units a food row can be measured in."""

    PIECE = "piece"
    CUP = "cup"
    GRAM = "gram"
    OUNCE = "ounce"
    TABLESPOON = "tablespoon"
    TEASPOON = "teaspoon"
    SERVING = "serving"

    @classmethod
    def parse(cls, raw: object) -> "FoodUnit":
        """Return the matching unit, falling back to a serving."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.SERVING


class MealType(str, Enum):
    """Meal slots of a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class NutrientTotals:
    """Per-nutrient amounts for a food item, a meal or a day."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    fiber: float = 0.0

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        return NutrientTotals(
            **{
                item.name: getattr(self, item.name) + getattr(other, item.name)
                for item in fields(self)
            }
        )

    def rounded(self) -> "NutrientTotals":
        """Return a copy rounded to one decimal, for display only."""
        return replace(
            self,
            **{item.name: round(getattr(self, item.name), 1) for item in fields(self)},
        )

    def as_dict(self) -> dict[str, float]:
        """Return the totals keyed by nutrient name."""
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True)
class FoodItem:
    """A single food row of a meal."""

    name: str
    quantity: float = 1.0
    unit: FoodUnit = FoodUnit.PIECE
    nutrition: NutrientTotals = field(default_factory=NutrientTotals)

    def to_payload(self) -> dict[str, object]:
        """Return the flat row shape the meals endpoints accept."""
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit.value,
            **self.nutrition.as_dict(),
        }


@dataclass(frozen=True)
class Meal:
    """An ordered collection of food items logged for one meal slot."""

    meal_type: MealType
    food_items: tuple[FoodItem, ...]
    date: str
    notes: str = ""
    id: int | str | None = None

    @property
    def total_nutrition(self) -> NutrientTotals:
        """Element-wise sum of the items' nutrition at full precision."""
        total = NutrientTotals()
        for item in self.food_items:
            total = total + item.nutrition
        return total

    def to_payload(self) -> dict[str, object]:
        """Return the request body for the log and update endpoints."""
        return {
            "meal_type": self.meal_type.value,
            "food_items": [item.to_payload() for item in self.food_items],
            "notes": self.notes,
            "total_nutrition": self.total_nutrition.as_dict(),
            "date": self.date,
        }
