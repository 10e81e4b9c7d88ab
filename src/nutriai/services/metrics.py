"""Closed-form health metrics."""

import math
from collections.abc import Iterable

from nutriai.domain.health import BmiCategory, BmiResult
from nutriai.domain.sleep import DEFAULT_SLEEP_GOAL_HOURS

MINUTES_PER_DAY = 24 * 60


def _parse_positive(raw: float | str | None) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        try:
            value = float(raw.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        value = float(raw)
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def bmi_category(bmi: float) -> BmiCategory:
    if bmi < 18.5:
        return BmiCategory.UNDERWEIGHT
    if bmi < 25:
        return BmiCategory.NORMAL
    if bmi < 30:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def calculate_bmi(
    height_cm: float | str | None, weight_kg: float | str | None
) -> BmiResult | None:
    """Compute BMI from centimetres and kilograms.

    Strings may use a decimal comma. Missing, unparsable or non-positive
    input yields None.
    """
    height = _parse_positive(height_cm)
    weight = _parse_positive(weight_kg)
    if height is None or weight is None:
        return None
    value = round(weight / (height / 100) ** 2, 1)
    return BmiResult(value=value, category=bmi_category(value))


def _minutes(clock: str) -> int:
    hours, _, minutes = clock.partition(":")
    return int(hours) * 60 + int(minutes or 0)


def sleep_duration(bed_time: str, wake_time: str) -> float:
    """Hours between bed and wake times, wrapping past midnight."""
    delta = (_minutes(wake_time) - _minutes(bed_time)) % MINUTES_PER_DAY
    return round(delta / 60, 1)


def sleep_weekly_deficit(
    weekly_hours: Iterable[float], goal: float = DEFAULT_SLEEP_GOAL_HOURS
) -> float:
    """Hours short of the goal summed over the nights of a week."""
    return round(sum(max(goal - hours, 0.0) for hours in weekly_hours), 1)
