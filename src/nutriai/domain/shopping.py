"""Shopping list models, including the raw response variants."""

from dataclasses import dataclass, field


@dataclass
class ShoppingItem:
    """An entry of the shopping list; checked items are in the cart."""

    name: str
    checked: bool = False


@dataclass
class ShoppingCategory:
    """A group of shopping items under one aisle name."""

    category: str
    items: list[ShoppingItem] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "category": self.category,
            "items": [
                {"name": item.name, "checked": item.checked} for item in self.items
            ],
        }


@dataclass(frozen=True)
class CategoryList:
    """Raw shopping list sent as an ordered list of category objects."""

    categories: list[dict[str, object]]


@dataclass(frozen=True)
class CategoryMap:
    """Raw shopping list sent as a category name to items mapping."""

    categories: dict[str, object]


RawShoppingList = CategoryList | CategoryMap
