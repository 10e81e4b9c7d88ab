"""Portion size estimates and the nutrition they imply."""

from nutriai.domain.nutrition import NutrientTotals
from nutriai.domain.portions import (
    DEFAULT_FOOD,
    PER_GRAM_NUTRITION,
    PORTION_ESTIMATES,
    PortionEstimate,
    ReferenceObject,
)
from nutriai.services.aggregation import coerce_number
from nutriai.services.scoring import round_half_up

HIGH_CONFIDENCE = 80
MEDIUM_CONFIDENCE = 60


def estimate_portion(
    reference: ReferenceObject | str, food_type: str = DEFAULT_FOOD
) -> PortionEstimate:
    """Look up the portion for a food next to a reference object.

    Unknown foods use the reference object's default portion.
    """
    table = PORTION_ESTIMATES[ReferenceObject.parse(reference)]
    return table.get(food_type.strip().lower(), table[DEFAULT_FOOD])


def portion_nutrition(weight_grams: object) -> NutrientTotals:
    """Whole-number nutrients for a portion of an average mixed dish."""
    weight = max(coerce_number(weight_grams), 0.0)
    return NutrientTotals(
        **{
            nutrient: float(round_half_up(weight * per_gram))
            for nutrient, per_gram in PER_GRAM_NUTRITION.items()
        }
    )


def confidence_band(confidence: float) -> str:
    if confidence >= HIGH_CONFIDENCE:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


def accepted_portion(estimate: PortionEstimate) -> dict[str, object]:
    """Payload handed to the meal form when the user accepts an estimate."""
    return {
        **estimate.to_payload(),
        "macros": portion_nutrition(estimate.weight).as_dict(),
    }
