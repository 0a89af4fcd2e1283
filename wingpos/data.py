"""Static option catalogs and seed data."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wingpos.constant import (
    FRY_SAUCES as _FRY_SAUCES_RAW,
    GELATO_FLAVORS,
    SEED_INVENTORY,
    SEED_MENU,
    SEED_TABLES,
    SUBMENU_CHOICES,
    WING_SAUCES as _WING_SAUCES_RAW,
)
from wingpos.models import Sauce

if TYPE_CHECKING:
    from wingpos.pos import PointOfSale

WING_SAUCES: dict[str, Sauce] = {key: Sauce(key=key, name=name) for key, name in _WING_SAUCES_RAW.items()}
FRY_SAUCES: dict[str, Sauce] = {key: Sauce(key=key, name=name) for key, name in _FRY_SAUCES_RAW.items()}


def choices_for_submenu(submenu_key: str | None) -> list[str]:
    """Get the fixed choice set for a submenu key (empty when there is none)."""
    if submenu_key is None:
        return []
    return list(SUBMENU_CHOICES.get(submenu_key, []))


def is_known_submenu(submenu_key: str) -> bool:
    return submenu_key in SUBMENU_CHOICES


def is_known_flavor(flavor: str) -> bool:
    return flavor in GELATO_FLAVORS


def resolve_sauce(sauce: Sauce | str, catalog: dict[str, Sauce]) -> Sauce | None:
    """Resolve a sauce key or Sauce against a catalog; unknown sauces give None."""
    key = sauce.key if isinstance(sauce, Sauce) else sauce
    return catalog.get(key)


def seed_into(pos: PointOfSale) -> None:
    """Load the default inventory, menu and floor plan into a PointOfSale."""
    inventory_ids: dict[str, str] = {}
    for seed_key, row in SEED_INVENTORY.items():
        item = pos.inventory.add_item(
            name=str(row["name"]),
            unit=str(row["unit"]),
            cost=row["cost"],
            alert_threshold=float(row["alert_threshold"]),
            stock=float(row["stock"]),
            item_id=f"inv-{seed_key}",
        )
        inventory_ids[seed_key] = item.id

    for seed_key, row in SEED_MENU.items():
        recipe = [(inventory_ids[inv_key], quantity) for inv_key, quantity in row.get("recipe", [])]  # type: ignore[union-attr]
        pos.menu.add_item(
            name=str(row["name"]),
            price=row["price"],
            category=str(row["category"]),
            description=str(row.get("description", "")),
            has_wings=bool(row.get("has_wings", False)),
            has_fries=bool(row.get("has_fries", False)),
            submenu_key=row.get("submenu_key"),  # type: ignore[arg-type]
            max_choices=row.get("max_choices"),  # type: ignore[arg-type]
            recipe=recipe,
            item_id=seed_key,
        )

    for index, row in enumerate(SEED_TABLES, start=1):
        pos.tables.add_table(
            table_id=f"table-{index}",
            name=str(row["name"]),
            capacity=int(row["capacity"]),
            x=int(row["x"]),
            y=int(row["y"]),
        )
