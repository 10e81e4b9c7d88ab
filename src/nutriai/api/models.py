"""Pydantic models for view-model API requests."""

from typing import Any

from pydantic import BaseModel, Field


class NutritionTotalsRequest(BaseModel):
    """Food items or daily meal rows to sum."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    meals: list[dict[str, Any]] = Field(default_factory=list)


class AllergenFindingModel(BaseModel):
    confidence: float | str | None = None
    severity: str | None = None


class AllergenScoreRequest(BaseModel):
    allergens: list[AllergenFindingModel] = Field(default_factory=list)


class MicronutrientSampleModel(BaseModel):
    day: str = ""
    date: str = ""
    nutrients: dict[str, float] = Field(default_factory=dict)


class MicronutrientProgressRequest(BaseModel):
    """Weekly samples plus the nutrients to report on (all when empty)."""

    samples: list[MicronutrientSampleModel] = Field(default_factory=list)
    nutrients: list[str] = Field(default_factory=list)


class ShoppingListRequest(BaseModel):
    """Raw shopping list in any of the shapes the backend returns."""

    shopping_list: Any = Field(default=None, alias="shoppingList")


class ReminderCreateRequest(BaseModel):
    name: str
    time: str = Field(pattern=r"^\d{2}:\d{2}$")
