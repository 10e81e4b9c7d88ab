"""Nutrient aggregation over loosely shaped food records."""

import math
import re
from collections.abc import Iterable, Mapping

from nutriai.domain.nutrition import NUTRIENT_KEYS, NutrientTotals

_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_number(value: object) -> float:
    """Coerce a loosely typed value to a finite float, defaulting to 0.

    Numbers pass through, strings contribute their leading numeric part
    (``"12.5g"`` is 12.5), and anything else counts as 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if match is None:
            return 0.0
        number = float(match.group())
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _field(record: object, key: str) -> object:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _nutrition_source(record: object) -> object:
    nested = _field(record, "nutrition")
    if isinstance(nested, Mapping | NutrientTotals):
        return nested
    return record


def sum_nutrition(items: Iterable[object]) -> NutrientTotals:
    """Sum nutrients over food records, treating malformed values as 0."""
    totals = dict.fromkeys(NUTRIENT_KEYS, 0.0)
    for item in items:
        source = _nutrition_source(item)
        for key in NUTRIENT_KEYS:
            totals[key] += coerce_number(_field(source, key))
    return NutrientTotals(**totals)


def sum_meal_totals(meals: Iterable[object]) -> NutrientTotals:
    """Sum the ``total_*`` columns of meals returned by the daily endpoint."""
    totals = dict.fromkeys(NUTRIENT_KEYS, 0.0)
    for meal in meals:
        for key in NUTRIENT_KEYS:
            totals[key] += coerce_number(_field(meal, f"total_{key}"))
    return NutrientTotals(**totals)


def workout_calories(exercises: Iterable[object]) -> float:
    """Estimate calories burned by a list of exercises."""
    total = 0.0
    for exercise in exercises:
        duration = coerce_number(_field(exercise, "duration"))
        sets = coerce_number(_field(exercise, "sets"))
        reps = coerce_number(_field(exercise, "reps"))
        total += duration * 0.1 + sets * reps * 0.05
    return total
