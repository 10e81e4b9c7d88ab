"""Coercion of drifting backend response shapes into canonical ones."""

import logging
from collections.abc import Mapping

from nutriai.domain.health import ConditionRecommendation
from nutriai.domain.shopping import (
    CategoryList,
    CategoryMap,
    RawShoppingList,
    ShoppingCategory,
    ShoppingItem,
)

_logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"


class _UnexpectedShapeError(ValueError):
    pass


def parse_shopping_list(raw: object) -> RawShoppingList | None:
    """Tag a raw shopping list as a category list or a category map."""
    if isinstance(raw, list | tuple):
        return CategoryList(categories=list(raw))
    if isinstance(raw, Mapping):
        return CategoryMap(categories=dict(raw))
    return None


def _coerce_item(raw: object) -> ShoppingItem:
    if isinstance(raw, str):
        return ShoppingItem(name=raw)
    if raw is None:
        raise _UnexpectedShapeError("null shopping item")
    if isinstance(raw, Mapping):
        return ShoppingItem(
            name=str(raw.get("name") or raw), checked=bool(raw.get("checked"))
        )
    return ShoppingItem(name=str(raw))


def _coerce_items(raw: object) -> list[ShoppingItem]:
    if raw is None:
        return []
    if not isinstance(raw, list | tuple):
        raise _UnexpectedShapeError(f"items of type {type(raw).__name__}")
    return [_coerce_item(item) for item in raw]


def _from_list(parsed: CategoryList) -> list[ShoppingCategory]:
    categories = []
    for entry in parsed.categories:
        if entry is None:
            raise _UnexpectedShapeError("null category")
        if not isinstance(entry, Mapping):
            categories.append(ShoppingCategory(category=DEFAULT_CATEGORY, items=[]))
            continue
        categories.append(
            ShoppingCategory(
                category=str(entry.get("category") or DEFAULT_CATEGORY),
                items=_coerce_items(entry.get("items")),
            )
        )
    return categories


def _from_map(parsed: CategoryMap) -> list[ShoppingCategory]:
    return [
        ShoppingCategory(category=str(name), items=_coerce_items(items))
        for name, items in parsed.categories.items()
    ]


def normalize_shopping_list(raw: object) -> list[ShoppingCategory]:
    """Return the canonical category list for any raw shopping list.

    Accepts an ordered list of ``{category, items}`` objects or a mapping of
    category name to items. Items may be bare strings or objects with a
    ``name``. Any other shape yields an empty list.
    """
    parsed = parse_shopping_list(raw)
    try:
        match parsed:
            case CategoryList():
                return _from_list(parsed)
            case CategoryMap():
                return _from_map(parsed)
            case None:
                _logger.debug("Ignoring shopping list of type %s", type(raw).__name__)
                return []
    except _UnexpectedShapeError as exc:
        _logger.debug("Discarding malformed shopping list: %s", exc)
    return []


def _as_list(value: object) -> list[str]:
    if isinstance(value, list | tuple):
        return [str(item) for item in value]
    return []


def _first_present(*values: object) -> object:
    for value in values:
        if value:
            return value
    return None


def _normalize_condition(raw: Mapping[str, object]) -> ConditionRecommendation:
    diet = raw.get("diet")
    diet = diet if isinstance(diet, Mapping) else {}
    lifestyle = raw.get("lifestyleRecommendations")
    lifestyle = lifestyle if isinstance(lifestyle, list) else []
    foods = _first_present(
        raw.get("foods"), raw.get("foodRecommendations"), diet.get("include")
    )
    avoid = _first_present(raw.get("avoid"), raw.get("limit"), diet.get("avoid"))
    exercises = _first_present(
        raw.get("exercises"), raw.get("exerciseRecommendations")
    )
    return ConditionRecommendation(
        condition=str(raw.get("condition") or raw.get("title") or "General"),
        severity=str(raw.get("severity") or "mild"),
        foods=_as_list(foods),
        avoid=_as_list(avoid),
        exercises=_as_list(exercises),
        notes=str(raw.get("notes") or ", ".join(map(str, lifestyle))),
        treatment=_as_list(raw.get("treatment")),
        care=_as_list(raw.get("care") or lifestyle),
    )


def normalize_condition_recommendations(raw: object) -> list[ConditionRecommendation]:
    """Map condition recommendations from any known response variant."""
    if not isinstance(raw, list):
        return []
    return [_normalize_condition(item) for item in raw if isinstance(item, Mapping)]


def format_muscle_groups(raw: object) -> str:
    """Render muscle groups as a comma separated label."""
    if not raw:
        return "Full body"
    if isinstance(raw, list | tuple):
        return ", ".join(str(group) for group in raw)
    if isinstance(raw, str):
        return raw
    return "Full body"
