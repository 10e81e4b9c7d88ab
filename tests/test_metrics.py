"""Tests for closed-form health metrics."""

import pytest

from nutriai.domain.health import BmiCategory
from nutriai.services.metrics import (
    calculate_bmi,
    sleep_duration,
    sleep_weekly_deficit,
)


def test_bmi_example() -> None:
    result = calculate_bmi(170, 70)

    assert result is not None
    assert result.value == 24.2
    assert result.category is BmiCategory.NORMAL


@pytest.mark.parametrize(
    ("weight", "category"),
    [
        (53.0, BmiCategory.UNDERWEIGHT),
        (53.5, BmiCategory.NORMAL),
        (72.2, BmiCategory.OVERWEIGHT),
        (86.7, BmiCategory.OBESE),
    ],
)
def test_bmi_category_boundaries(weight: float, category: BmiCategory) -> None:
    result = calculate_bmi(170, weight)

    assert result is not None
    assert result.category is category


def test_bmi_accepts_decimal_comma_strings() -> None:
    result = calculate_bmi("180,0", " 81 ")

    assert result is not None
    assert result.value == 25.0


@pytest.mark.parametrize(
    ("height", "weight"),
    [
        (None, 70),
        (170, None),
        ("tall", 70),
        (0, 70),
        (170, -1),
        ("inf", 70),
        (170, float("nan")),
    ],
)
def test_bmi_rejects_invalid_input(height: object, weight: object) -> None:
    assert calculate_bmi(height, weight) is None  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("bed", "wake", "hours"),
    [
        ("23:30", "07:30", 8.0),
        ("22:00", "06:00", 8.0),
        ("01:15", "07:00", 5.8),
        ("07:00", "07:00", 0.0),
    ],
)
def test_sleep_duration_wraps_midnight(bed: str, wake: str, hours: float) -> None:
    assert sleep_duration(bed, wake) == hours


def test_sleep_weekly_deficit_ignores_surplus_nights() -> None:
    assert sleep_weekly_deficit([7, 9, 8, 6.5, 8, 8, 8]) == 2.5
    assert sleep_weekly_deficit([0.0] * 7) == 56.0
