"""Ingredient stock ledger.

Every write path clamps stock at zero: manual adjustments, direct edits and
the saturating deductions applied when a sale completes.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Mapping
from uuid import uuid4

from wingpos.constant import INVENTORY_UNITS
from wingpos.errors import NotFoundError, ValidationError
from wingpos.models import InventoryItem
from wingpos.notifications import NotificationHub

logger = logging.getLogger(__name__)

ADJUST_MODES = frozenset({"add", "set"})


def _clamp(value: float) -> float:
    return max(0.0, float(value))


class InventoryLedger:
    """Holds inventory items by id and applies stock changes."""

    def __init__(self, notifier: NotificationHub | None = None) -> None:
        self._items: dict[str, InventoryItem] = {}
        self._notifier = notifier or NotificationHub()

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def add_item(
        self,
        name: str,
        unit: str,
        cost: Decimal | int | float | str = 0,
        alert_threshold: float = 0,
        stock: float = 0,
        item_id: str | None = None,
    ) -> InventoryItem:
        name = name.strip()
        if not name:
            raise ValidationError("Inventory item name is required.")
        if unit not in INVENTORY_UNITS:
            raise ValidationError(f"Unit '{unit}' is not one of {', '.join(INVENTORY_UNITS)}.")
        cost = Decimal(str(cost))
        if cost < 0:
            raise ValidationError("Cost per unit cannot be negative.")
        if alert_threshold < 0:
            raise ValidationError("Alert threshold cannot be negative.")
        item_id = item_id or uuid4().hex
        if item_id in self._items:
            raise ValidationError(f"Inventory item '{item_id}' already exists.")

        item = InventoryItem(
            id=item_id,
            name=name,
            stock=_clamp(stock),
            unit=unit,
            cost=cost,
            alert_threshold=float(alert_threshold),
        )
        self._items[item_id] = item
        self._notifier.notify(f"{name} added to inventory", "success", kind="inventory_added")
        return item

    def update_item(self, item_id: str, **changes: object) -> InventoryItem:
        """Edit name, unit, cost, alert threshold or stock of an item."""
        current = self.get(item_id)
        allowed = {"name", "unit", "cost", "alert_threshold", "stock"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot update inventory fields: {', '.join(sorted(unknown))}")

        if "name" in changes and not str(changes["name"]).strip():
            raise ValidationError("Inventory item name is required.")
        if "unit" in changes and changes["unit"] not in INVENTORY_UNITS:
            raise ValidationError(f"Unit '{changes['unit']}' is not one of {', '.join(INVENTORY_UNITS)}.")
        if "cost" in changes:
            changes["cost"] = Decimal(str(changes["cost"]))
            if changes["cost"] < 0:
                raise ValidationError("Cost per unit cannot be negative.")
        if "alert_threshold" in changes:
            changes["alert_threshold"] = float(changes["alert_threshold"])  # type: ignore[arg-type]
            if changes["alert_threshold"] < 0:
                raise ValidationError("Alert threshold cannot be negative.")
        if "stock" in changes:
            changes["stock"] = _clamp(changes["stock"])  # type: ignore[arg-type]
        if "name" in changes:
            changes["name"] = str(changes["name"]).strip()

        updated = replace(current, **changes)
        self._items[item_id] = updated
        self._notifier.notify(f"{updated.name} updated", "success", kind="inventory_updated")
        self._check_low_stock(current, updated)
        return updated

    def get(self, item_id: str) -> InventoryItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError("Inventory item", item_id) from None

    def items(self) -> list[InventoryItem]:
        return sorted(self._items.values(), key=lambda item: item.name.lower())

    def adjust_stock(self, item_id: str, mode: str, value: float) -> InventoryItem:
        """Add to (mode "add", value may be negative) or overwrite (mode "set") stock."""
        current = self.get(item_id)
        if mode not in ADJUST_MODES:
            raise ValidationError(f"Adjustment mode must be 'add' or 'set', got '{mode}'.")

        requested = current.stock + value if mode == "add" else value
        updated = replace(current, stock=_clamp(requested))
        self._items[item_id] = updated
        logger.info("adjust_stock item=%s mode=%s value=%s stock=%s", item_id, mode, value, updated.stock)
        self._notifier.notify(f"Stock updated: {updated.name}", "info", kind="inventory_adjusted")
        self._check_low_stock(current, updated)
        return updated

    def deduct(self, item_id: str, amount: float) -> float:
        """Reduce stock by ``amount``, saturating at zero. Returns the shortfall."""
        return self.deduct_many({item_id: amount})[item_id]

    def deduct_many(self, amounts: Mapping[str, float]) -> dict[str, float]:
        """Apply several deductions as one step; unknown ids reject the whole batch."""
        missing = [item_id for item_id in amounts if item_id not in self._items]
        if missing:
            raise NotFoundError("Inventory item", missing[0])
        for item_id, amount in amounts.items():
            if amount < 0:
                raise ValidationError(f"Deduction for '{item_id}' cannot be negative.")

        shortfalls: dict[str, float] = {}
        for item_id, amount in amounts.items():
            current = self._items[item_id]
            remaining = current.stock - amount
            shortfalls[item_id] = max(0.0, -remaining)
            updated = replace(current, stock=_clamp(remaining))
            self._items[item_id] = updated

            if shortfalls[item_id] > 0:
                logger.warning(
                    "deduct item=%s requested=%s available=%s shortfall=%s",
                    item_id,
                    amount,
                    current.stock,
                    shortfalls[item_id],
                )
                self._notifier.notify(
                    f"{current.name}: sold more than stock on hand ({shortfalls[item_id]:g} {current.unit} short)",
                    "warning",
                    kind="stock_shortfall",
                )
            self._check_low_stock(current, updated)
        return shortfalls

    def low_stock_items(self) -> list[InventoryItem]:
        return [item for item in self.items() if item.is_low]

    def stock_value(self) -> Decimal:
        return sum((item.cost * Decimal(str(item.stock)) for item in self._items.values()), Decimal(0))

    def _check_low_stock(self, before: InventoryItem, after: InventoryItem) -> None:
        if after.is_low and not before.is_low:
            self._notifier.notify(
                f"Low stock: {after.name} ({after.stock:g} {after.unit})",
                "warning",
                kind="low_stock",
            )
