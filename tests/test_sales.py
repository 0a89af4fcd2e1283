"""
Tests for wingpos.sales: ledger filters and report aggregates.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from wingpos.errors import ValidationError
from wingpos.models import DeliveryInfo, ToGoInfo
from wingpos.sales import (
    average_revenue_per_table,
    average_sale,
    build_report,
    revenue_by_day,
    revenue_by_order_type,
    revenue_by_payment_method,
    top_selling_items,
    total_revenue,
)


def _sell(engine, clock, when, items, destination="table-1", order_type="dine-in", method="Cash"):
    clock.now = when
    draft = engine.start_draft(order_type)
    for item_id, quantity in items:
        line = engine.add_item(draft, item_id)
        if quantity > 1:
            engine.update_item_quantity(draft, line.instance_id, quantity - 1)
    order = engine.place_draft(draft, destination)
    return engine.complete_sale(order.id, method)


@pytest.fixture
def history(pos, engine, clock):
    """Four sales across May and June 2025; ``now`` is Wednesday 2025-06-18."""
    now = clock.now
    sales = [
        _sell(engine, clock, datetime(2025, 5, 30, 20, 0, tzinfo=timezone.utc), [("wings_12", 1)], "table-2"),
        _sell(
            engine,
            clock,
            datetime(2025, 6, 16, 13, 0, tzinfo=timezone.utc),
            [("wings_6", 2), ("soda", 2)],
            "table-1",
            method="Card",
        ),
        _sell(
            engine,
            clock,
            datetime(2025, 6, 18, 9, 0, tzinfo=timezone.utc),
            [("wings_6", 1)],
            DeliveryInfo("Ana", "3001234567", "Cra 7"),
            order_type="delivery",
            method="Transfer",
        ),
        _sell(engine, clock, datetime(2025, 6, 18, 11, 0, tzinfo=timezone.utc), [("soda", 1)], "table-1"),
    ]
    clock.now = now
    return sales


class TestSalesLedger:
    def test_sales_newest_first(self, pos, history):
        assert [sale.id for sale in pos.sales.sales()] == [sale.id for sale in reversed(history)]

    def test_range_is_inclusive(self, pos, history):
        start = datetime(2025, 6, 16, 13, 0, tzinfo=timezone.utc)
        end = datetime(2025, 6, 18, 9, 0, tzinfo=timezone.utc)
        assert [sale.id for sale in pos.sales.sales(start, end)] == [history[2].id, history[1].id]

    def test_periods(self, pos, history, clock):
        assert len(pos.sales.for_period("all", clock.now)) == 4
        assert {sale.id for sale in pos.sales.for_period("today", clock.now)} == {history[2].id, history[3].id}
        assert len(pos.sales.for_period("week", clock.now)) == 3
        assert len(pos.sales.for_period("month", clock.now)) == 3

    def test_unknown_period(self, pos, clock):
        with pytest.raises(ValidationError, match="Period"):
            pos.sales.for_period("year", clock.now)


class TestAggregates:
    def test_totals(self, history):
        assert total_revenue(history) == Decimal("40000") + Decimal("54000") + Decimal("22000") + Decimal("5000")
        assert average_sale(history) == Decimal("121000") / 4
        assert average_sale([]) == Decimal(0)

    def test_top_selling_items_counts_quantities(self, history):
        assert top_selling_items(history, 2) == [("Wings (6 pcs)", 3), ("Soda", 3)]

    def test_revenue_breakdowns(self, history):
        assert revenue_by_payment_method(history) == {
            "Cash": Decimal("45000"),
            "Card": Decimal("54000"),
            "Transfer": Decimal("22000"),
        }
        assert revenue_by_order_type(history) == {
            "dine-in": Decimal("99000"),
            "delivery": Decimal("22000"),
            "to-go": Decimal("0"),
        }

    def test_average_revenue_per_table(self, history):
        # table-1 twice (54000 + 5000), table-2 once (40000)
        assert average_revenue_per_table(history) == Decimal("99000") / 2

    def test_average_revenue_per_table_ignores_pickups(self, engine, clock):
        sale = _sell(engine, clock, clock.now, [("soda", 1)], ToGoInfo("Luis"), order_type="to-go")
        assert average_revenue_per_table([sale]) == Decimal(0)

    def test_revenue_by_day(self, history):
        assert revenue_by_day(history) == {
            date(2025, 5, 30): Decimal("40000"),
            date(2025, 6, 16): Decimal("54000"),
            date(2025, 6, 18): Decimal("27000"),
        }

    def test_build_report(self, pos, history, clock):
        report = build_report(pos.sales.for_period("today", clock.now), period="today")
        assert report.period == "today"
        assert report.order_count == 2
        assert report.total_revenue == Decimal("27000")
        assert report.revenue_by_order_type["delivery"] == Decimal("22000")


class TestRestaurantLocalDays:
    """Timestamps are UTC; days follow the restaurant's wall clock (Bogota, UTC-5)."""

    EVENING = datetime(2025, 6, 18, 20, 0, tzinfo=timezone(timedelta(hours=-5)))

    def test_evening_sale_counts_on_local_day(self, engine, clock):
        sale = _sell(engine, clock, self.EVENING.astimezone(timezone.utc), [("wings_6", 1)])
        assert sale.timestamp.date() == date(2025, 6, 19)
        assert revenue_by_day([sale]) == {date(2025, 6, 18): Decimal("22000")}

    def test_today_uses_local_midnights(self, pos, engine, clock):
        evening = _sell(engine, clock, self.EVENING.astimezone(timezone.utc), [("soda", 1)])
        # 23:30 local on the 18th is already the 19th in UTC.
        late = datetime(2025, 6, 19, 4, 30, tzinfo=timezone.utc)
        assert [sale.id for sale in pos.sales.for_period("today", late)] == [evening.id]
        next_morning = datetime(2025, 6, 19, 13, 0, tzinfo=timezone.utc)
        assert pos.sales.for_period("today", next_morning) == []

    def test_week_starts_local_monday(self, pos, engine, clock):
        # Sunday 22:00 local is Monday 03:00 UTC.
        sunday_night = _sell(engine, clock, datetime(2025, 6, 16, 3, 0, tzinfo=timezone.utc), [("soda", 1)])
        monday = _sell(engine, clock, datetime(2025, 6, 16, 6, 0, tzinfo=timezone.utc), [("soda", 1)])
        week = pos.sales.for_period("week", datetime(2025, 6, 18, 12, 0, tzinfo=timezone.utc))
        assert [sale.id for sale in week] == [monday.id]
        assert sunday_night not in week
