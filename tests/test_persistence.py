"""
Tests for wingpos.persistence: SQLite sales archive.
"""

from decimal import Decimal

import pytest

from wingpos.models import DeliveryInfo
from wingpos.persistence import bootstrap_schema, line_options, load_sales, save_sale


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "archive" / "wingpos.db"
    bootstrap_schema(path)
    return path


def _complete(engine, clock, destination, order_type, **options):
    draft = engine.start_draft(order_type)
    line = engine.add_item(draft, "wings_combo", **options)
    engine.update_item_quantity(draft, line.instance_id, 1)
    engine.add_item(draft, "soda", choice="Orange")
    order = engine.place_draft(draft, destination)
    clock.advance(minutes=1)
    return engine.complete_sale(order.id, "Card")


class TestSalesArchive:
    def test_bootstrap_is_idempotent(self, db_path):
        bootstrap_schema(db_path)
        assert load_sales(db_path) == []

    def test_round_trip_keeps_lines_and_totals(self, engine, clock, db_path):
        sale = _complete(
            engine,
            clock,
            "table-2",
            "dine-in",
            wing_sauces=["bbq"],
            fry_sauces=["garlic"],
            choice="Cola",
            notes="extra napkins",
        )
        save_sale(sale, db_path)

        [archived] = load_sales(db_path)
        assert archived.sale_id == sale.id
        assert archived.order_id == sale.order.id
        assert archived.destination == "table-2"
        assert archived.total == Decimal("69000")
        assert [(line.name, line.quantity) for line in archived.lines] == [("Wings Combo", 2), ("Soda", 1)]
        assert archived.lines[0].unit_price == Decimal("32000")
        assert archived.lines[0].options == "Cola; BBQ; Garlic; extra napkins"

    def test_newest_first(self, engine, clock, db_path):
        first = _complete(engine, clock, "table-1", "dine-in")
        second = _complete(engine, clock, DeliveryInfo("Ana", "3001234567", "Cra 7"), "delivery")
        save_sale(first, db_path)
        save_sale(second, db_path)

        archived = load_sales(db_path)
        assert [entry.sale_id for entry in archived] == [second.id, first.id]
        assert archived[0].destination == "Ana | 3001234567 | Cra 7"

    def test_dine_in_archived_under_table_name(self, engine, clock, db_path):
        sale = _complete(engine, clock, "table-5", "dine-in")
        save_sale(sale, db_path, table_name="Bar")
        assert load_sales(db_path)[0].destination == "Bar"

    def test_line_options_empty(self, engine):
        draft = engine.start_draft()
        line = engine.add_item(draft, "wings_6")
        assert line_options(line) == ""
