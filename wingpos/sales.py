"""Sales ledger and the reports built from it.

The ledger is append-only. Aggregates are plain functions over a list of
sales so the same numbers can be computed for any period.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Sequence

from wingpos.config import RESTAURANT_TIMEZONE
from wingpos.constant import ORDER_TYPES
from wingpos.errors import ValidationError
from wingpos.models import Sale

logger = logging.getLogger(__name__)

PERIODS = ("all", "today", "week", "month")


def local_time(moment: datetime) -> datetime:
    """``moment`` on the restaurant's wall clock."""
    return moment.astimezone(RESTAURANT_TIMEZONE)


def local_day(moment: datetime) -> date:
    return local_time(moment).date()


class SalesLedger:
    """Append-only record of completed sales."""

    def __init__(self) -> None:
        self._sales: list[Sale] = []

    def __len__(self) -> int:
        return len(self._sales)

    def record(self, sale: Sale) -> Sale:
        self._sales.append(sale)
        logger.info("sale recorded id=%s total=%s", sale.id, sale.total)
        return sale

    def sales(self, start: datetime | None = None, end: datetime | None = None) -> list[Sale]:
        """Sales with ``start <= timestamp <= end``, newest first. Either bound may be omitted."""
        selected = [
            sale
            for sale in self._sales
            if (start is None or sale.timestamp >= start) and (end is None or sale.timestamp <= end)
        ]
        return sorted(selected, key=lambda sale: sale.timestamp, reverse=True)

    def for_period(self, period: str, now: datetime) -> list[Sale]:
        """Sales for "all", "today", "week" (since Monday) or "month", relative to ``now``.

        Day boundaries are midnights in ``RESTAURANT_TIMEZONE``, whatever zone ``now`` carries.
        """
        if period not in PERIODS:
            raise ValidationError(f"Period must be one of {', '.join(PERIODS)}.")
        if period == "all":
            return self.sales()

        today = local_day(now)
        midnight = datetime.combine(today, time.min, tzinfo=RESTAURANT_TIMEZONE)
        if period == "today":
            start = midnight
        elif period == "week":
            start = midnight - timedelta(days=today.weekday())
        else:
            start = midnight.replace(day=1)
        end = datetime.combine(today, time.max, tzinfo=RESTAURANT_TIMEZONE)
        return self.sales(start, end)


def total_revenue(sales: Sequence[Sale]) -> Decimal:
    return sum((sale.total for sale in sales), Decimal(0))


def order_count(sales: Sequence[Sale]) -> int:
    return len(sales)


def average_sale(sales: Sequence[Sale]) -> Decimal:
    if not sales:
        return Decimal(0)
    return total_revenue(sales) / len(sales)


def top_selling_items(sales: Sequence[Sale], n: int = 5) -> list[tuple[str, int]]:
    """Item names by units sold, best first."""
    counts: Counter[str] = Counter()
    for sale in sales:
        for line in sale.order.items:
            counts[line.name] += line.quantity
    return counts.most_common(n)


def revenue_by_payment_method(sales: Sequence[Sale]) -> dict[str, Decimal]:
    revenue: dict[str, Decimal] = {}
    for sale in sales:
        revenue[sale.payment_method] = revenue.get(sale.payment_method, Decimal(0)) + sale.total
    return revenue


def revenue_by_order_type(sales: Sequence[Sale]) -> dict[str, Decimal]:
    revenue = {order_type: Decimal(0) for order_type in ORDER_TYPES}
    for sale in sales:
        revenue[sale.order.order_type] += sale.total
    return revenue


def average_revenue_per_table(sales: Sequence[Sale]) -> Decimal:
    """Dine-in revenue divided by the number of distinct tables that produced it."""
    dine_in = [sale for sale in sales if sale.order.order_type == "dine-in" and sale.order.table_id]
    tables = {sale.order.table_id for sale in dine_in}
    if not tables:
        return Decimal(0)
    return total_revenue(dine_in) / len(tables)


def revenue_by_day(sales: Sequence[Sale]) -> dict[date, Decimal]:
    revenue: dict[date, Decimal] = {}
    for sale in sorted(sales, key=lambda sale: sale.timestamp):
        day = local_day(sale.timestamp)
        revenue[day] = revenue.get(day, Decimal(0)) + sale.total
    return revenue


@dataclass(frozen=True)
class SalesReport:
    """Aggregates for one reporting period."""

    period: str
    total_revenue: Decimal
    order_count: int
    average_sale: Decimal
    top_selling_items: list[tuple[str, int]] = field(default_factory=list)
    revenue_by_payment_method: dict[str, Decimal] = field(default_factory=dict)
    revenue_by_order_type: dict[str, Decimal] = field(default_factory=dict)
    average_revenue_per_table: Decimal = Decimal(0)
    revenue_by_day: dict[date, Decimal] = field(default_factory=dict)


def build_report(sales: Sequence[Sale], period: str = "all", top_n: int = 5) -> SalesReport:
    return SalesReport(
        period=period,
        total_revenue=total_revenue(sales),
        order_count=order_count(sales),
        average_sale=average_sale(sales),
        top_selling_items=top_selling_items(sales, top_n),
        revenue_by_payment_method=revenue_by_payment_method(sales),
        revenue_by_order_type=revenue_by_order_type(sales),
        average_revenue_per_table=average_revenue_per_table(sales),
        revenue_by_day=revenue_by_day(sales),
    )
