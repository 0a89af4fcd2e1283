"""Menu catalog: sellable items and the recipes they consume."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Iterable
from uuid import uuid4

from wingpos.data import is_known_submenu
from wingpos.errors import NotFoundError, ValidationError
from wingpos.inventory import InventoryLedger
from wingpos.models import MenuItem, RecipeLine
from wingpos.notifications import NotificationHub

logger = logging.getLogger(__name__)

RecipeInput = Iterable[RecipeLine | tuple[str, float]]

_EDITABLE_FIELDS = frozenset(
    {
        "name",
        "price",
        "category",
        "description",
        "has_wings",
        "has_fries",
        "submenu_key",
        "max_choices",
        "image_url",
        "recipe",
    }
)


def _to_price(value: object) -> Decimal:
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Price '{value}' is not a number.") from None
    if price < 0:
        raise ValidationError("Price cannot be negative.")
    return price


class MenuCatalog:
    """CRUD over menu items; recipes are validated against the inventory ledger."""

    def __init__(self, inventory: InventoryLedger, notifier: NotificationHub | None = None) -> None:
        self._inventory = inventory
        self._items: dict[str, MenuItem] = {}
        self._notifier = notifier or NotificationHub()

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def add_item(
        self,
        name: str,
        price: Decimal | int | float | str,
        category: str,
        description: str = "",
        has_wings: bool = False,
        has_fries: bool = False,
        submenu_key: str | None = None,
        max_choices: int | None = None,
        image_url: str = "",
        recipe: RecipeInput = (),
        item_id: str | None = None,
    ) -> MenuItem:
        item_id = item_id or uuid4().hex
        if item_id in self._items:
            raise ValidationError(f"Menu item '{item_id}' already exists.")
        item = self._validated(
            MenuItem(
                id=item_id,
                name=name,
                price=_to_price(price),
                category=category,
                description=description,
                has_wings=has_wings,
                has_fries=has_fries,
                submenu_key=submenu_key or None,
                max_choices=max_choices or None,
                image_url=image_url,
                recipe=self._build_recipe(recipe),
            )
        )
        self._items[item.id] = item
        logger.info("menu add id=%s name=%s", item.id, item.name)
        self._notifier.notify(f"{item.name} added to the menu", "success", kind="menu_item_added")
        return item

    def update_item(self, item_id: str, **changes: object) -> MenuItem:
        current = self.get(item_id)
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update menu fields: {', '.join(sorted(unknown))}")
        if "price" in changes:
            changes["price"] = _to_price(changes["price"])
        if "recipe" in changes:
            changes["recipe"] = self._build_recipe(changes["recipe"])  # type: ignore[arg-type]
        if "submenu_key" in changes:
            changes["submenu_key"] = changes["submenu_key"] or None
        if "max_choices" in changes:
            changes["max_choices"] = changes["max_choices"] or None

        updated = self._validated(replace(current, **changes))
        self._items[item_id] = updated
        self._notifier.notify(f"{updated.name} updated", "success", kind="menu_item_updated")
        return updated

    def delete_item(self, item_id: str) -> MenuItem:
        """Remove an item. Orders and sales that already copied it are unaffected."""
        removed = self.get(item_id)
        del self._items[item_id]
        logger.info("menu delete id=%s", item_id)
        self._notifier.notify(f"{removed.name} deleted", "success", kind="menu_item_deleted")
        return removed

    def get(self, item_id: str) -> MenuItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError("Menu item", item_id) from None

    def items(self) -> list[MenuItem]:
        return list(self._items.values())

    def categories(self) -> list[str]:
        seen: dict[str, None] = {}
        for item in self._items.values():
            seen.setdefault(item.category, None)
        return list(seen)

    def items_in_category(self, category: str) -> list[MenuItem]:
        return [item for item in self._items.values() if item.category == category]

    def search(self, query: str) -> list[MenuItem]:
        q = query.strip().lower()
        if not q:
            return self.items()
        return [item for item in self._items.values() if q in item.name.lower()]

    def set_recipe(self, item_id: str, recipe: RecipeInput) -> MenuItem:
        return self.update_item(item_id, recipe=recipe)

    def add_ingredient(self, item_id: str, inventory_item_id: str, quantity: float) -> MenuItem:
        current = self.get(item_id)
        if any(line.inventory_item_id == inventory_item_id for line in current.recipe):
            raise ValidationError("That ingredient is already in the recipe.")
        return self.set_recipe(item_id, [*current.recipe, RecipeLine(inventory_item_id, quantity)])

    def remove_ingredient(self, item_id: str, inventory_item_id: str) -> MenuItem:
        current = self.get(item_id)
        remaining = [line for line in current.recipe if line.inventory_item_id != inventory_item_id]
        if len(remaining) == len(current.recipe):
            raise NotFoundError("Recipe ingredient", inventory_item_id)
        return self.set_recipe(item_id, remaining)

    def _build_recipe(self, recipe: RecipeInput) -> tuple[RecipeLine, ...]:
        lines: list[RecipeLine] = []
        seen: set[str] = set()
        for entry in recipe:
            line = entry if isinstance(entry, RecipeLine) else RecipeLine(entry[0], float(entry[1]))
            if line.inventory_item_id not in self._inventory:
                raise NotFoundError("Inventory item", line.inventory_item_id)
            if line.inventory_item_id in seen:
                raise ValidationError(f"Ingredient '{line.inventory_item_id}' is listed twice in the recipe.")
            if line.quantity <= 0:
                raise ValidationError("Recipe quantities must be greater than zero.")
            seen.add(line.inventory_item_id)
            lines.append(line)
        return tuple(lines)

    def _validated(self, item: MenuItem) -> MenuItem:
        if not item.name.strip():
            raise ValidationError("Menu item name is required.")
        if not item.category.strip():
            raise ValidationError("Menu item category is required.")
        if item.submenu_key is not None and not is_known_submenu(item.submenu_key):
            raise ValidationError(f"Unknown submenu '{item.submenu_key}'.")
        if item.max_choices is not None and item.max_choices < 1:
            raise ValidationError("max_choices must be at least 1.")
        return replace(item, name=item.name.strip(), category=item.category.strip())
