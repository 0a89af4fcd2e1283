"""Table registry: floor plan and occupancy.

Occupancy follows the orders. Whether an open dine-in order references a
table is answered by an occupancy probe the order engine installs; manual
status changes that would contradict it are refused.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Callable
from uuid import uuid4

from wingpos.constant import TABLE_STATUSES
from wingpos.errors import NotFoundError, ValidationError
from wingpos.models import Table
from wingpos.notifications import NotificationHub

logger = logging.getLogger(__name__)

OccupancyProbe = Callable[[str], bool]


def _no_open_orders(table_id: str) -> bool:
    return False


class TableRegistry:
    """Holds tables by id, in insertion order."""

    def __init__(self, notifier: NotificationHub | None = None) -> None:
        self._tables: dict[str, Table] = {}
        self._notifier = notifier or NotificationHub()
        self._has_open_order: OccupancyProbe = _no_open_orders

    def __contains__(self, table_id: object) -> bool:
        return table_id in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def install_occupancy_probe(self, probe: OccupancyProbe) -> None:
        self._has_open_order = probe

    def add_table(
        self,
        name: str,
        capacity: int,
        x: int | None = None,
        y: int | None = None,
        table_id: str | None = None,
    ) -> Table:
        name = name.strip()
        if not name:
            raise ValidationError("Table name is required.")
        if capacity < 1:
            raise ValidationError("Table capacity must be at least 1.")
        table_id = table_id or uuid4().hex
        if table_id in self._tables:
            raise ValidationError(f"Table '{table_id}' already exists.")

        table = Table(id=table_id, name=name, capacity=capacity, status="available", x=x, y=y)
        self._tables[table_id] = table
        self._notifier.notify(f"{name} added", "success", kind="table_added")
        return table

    def update_table(
        self,
        table_id: str,
        name: str | None = None,
        capacity: int | None = None,
        x: int | None = None,
        y: int | None = None,
    ) -> Table:
        """Rename, resize or move a table. Status is never changed here."""
        current = self.get(table_id)
        changes: dict[str, object] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Table name is required.")
            changes["name"] = name.strip()
        if capacity is not None:
            if capacity < 1:
                raise ValidationError("Table capacity must be at least 1.")
            changes["capacity"] = capacity
        if x is not None:
            changes["x"] = x
        if y is not None:
            changes["y"] = y

        updated = replace(current, **changes)
        self._tables[table_id] = updated
        self._notifier.notify(f"{updated.name} updated", "success", kind="table_updated")
        return updated

    def delete_table(self, table_id: str) -> Table:
        current = self.get(table_id)
        if current.status == "occupied" or self._has_open_order(table_id):
            self._notifier.notify("An occupied table cannot be deleted.", "error", kind="table_delete_rejected")
            raise ValidationError(f"Table '{current.name}' is occupied and cannot be deleted.")
        del self._tables[table_id]
        logger.info("table delete id=%s", table_id)
        self._notifier.notify(f"{current.name} deleted", "success", kind="table_deleted")
        return current

    def set_status(self, table_id: str, status: str) -> Table:
        """Manual status override (reserve, clean, free up).

        "occupied" follows open dine-in orders, so it can only be set while one exists.
        """
        current = self.get(table_id)
        if status not in TABLE_STATUSES:
            raise ValidationError(f"Unknown table status '{status}'.")
        if status != "occupied" and self._has_open_order(table_id):
            raise ValidationError(f"Table '{current.name}' has an open order; complete or cancel it first.")
        if status == "occupied" and not self._has_open_order(table_id):
            raise ValidationError(f"Table '{current.name}' has no open order; place one to occupy it.")
        return self._set(current, status)

    def occupy(self, table_id: str) -> Table:
        return self._set(self.get(table_id), "occupied")

    def release(self, table_id: str) -> Table:
        return self._set(self.get(table_id), "available")

    def get(self, table_id: str) -> Table:
        try:
            return self._tables[table_id]
        except KeyError:
            raise NotFoundError("Table", table_id) from None

    def tables(self, status: str | None = None, search: str = "") -> list[Table]:
        needle = search.strip().lower()
        return [
            table
            for table in self._tables.values()
            if (status is None or table.status == status) and needle in table.name.lower()
        ]

    def status_counts(self) -> dict[str, int]:
        counts = Counter(table.status for table in self._tables.values())
        return {status: counts.get(status, 0) for status in TABLE_STATUSES}

    def _set(self, current: Table, status: str) -> Table:
        if current.status == status:
            return current
        updated = replace(current, status=status)
        self._tables[current.id] = updated
        logger.info("table status id=%s %s->%s", current.id, current.status, status)
        return updated
