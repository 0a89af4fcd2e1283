"""One object that wires the ledgers, registry and engine together."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from wingpos.advisory import AdvisoryContext
from wingpos.data import seed_into
from wingpos.inventory import InventoryLedger
from wingpos.menu import MenuCatalog
from wingpos.notifications import NotificationHub, ToastQueue
from wingpos.orders import OrderEngine, utc_now
from wingpos.sales import SalesLedger
from wingpos.tables import TableRegistry


class PointOfSale:
    """All core components sharing one notification hub and clock."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self.notifier = NotificationHub()
        self.toasts = ToastQueue()
        self.notifier.subscribe(self.toasts)
        self.clock = clock

        self.inventory = InventoryLedger(self.notifier)
        self.menu = MenuCatalog(self.inventory, self.notifier)
        self.tables = TableRegistry(self.notifier)
        self.sales = SalesLedger()
        self.orders = OrderEngine(
            menu=self.menu,
            tables=self.tables,
            inventory=self.inventory,
            sales=self.sales,
            notifier=self.notifier,
            clock=clock,
        )

    @classmethod
    def seeded(cls, clock: Callable[[], datetime] = utc_now) -> PointOfSale:
        """A PointOfSale loaded with the default inventory, menu and tables."""
        pos = cls(clock=clock)
        seed_into(pos)
        pos.toasts.clear()
        return pos

    def advisory_context(self) -> AdvisoryContext:
        return AdvisoryContext(
            menu=tuple(self.menu.items()),
            tables=tuple(self.tables.tables()),
            inventory=tuple(self.inventory.items()),
            sales=tuple(self.sales.sales()),
        )
