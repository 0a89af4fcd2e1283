"""Shared fixtures for wingpos tests."""

from datetime import datetime, timedelta, timezone

import pytest

from wingpos.pos import PointOfSale

NOW = datetime(2025, 6, 18, 12, 0, 0, tzinfo=timezone.utc)  # a Wednesday


class FakeClock:
    """Deterministic clock; call ``advance`` to move time forward."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pos(clock) -> PointOfSale:
    """Seeded point of sale with a fixed clock and an empty toast queue."""
    return PointOfSale.seeded(clock=clock)


@pytest.fixture
def engine(pos):
    return pos.orders


@pytest.fixture
def bare_pos(clock) -> PointOfSale:
    """Point of sale with one ingredient, one wings item and one table."""
    pos = PointOfSale(clock=clock)
    pos.inventory.add_item("Chicken", "g", cost=30, alert_threshold=100, stock=1000, item_id="chicken")
    pos.menu.add_item(
        "Wings",
        22000,
        "Wings",
        has_wings=True,
        recipe=[("chicken", 200)],
        item_id="wings",
    )
    pos.tables.add_table("T1", 4, table_id="t1")
    pos.toasts.clear()
    return pos
