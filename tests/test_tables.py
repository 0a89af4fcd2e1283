"""
Tests for wingpos.tables: floor plan and occupancy guards.
"""

import pytest

from wingpos.errors import NotFoundError, ValidationError
from wingpos.tables import TableRegistry


@pytest.fixture
def registry():
    registry = TableRegistry()
    registry.add_table("Window", 2, x=10, y=10, table_id="w")
    registry.add_table("Patio", 6, table_id="p")
    return registry


class TestTableRegistry:
    def test_new_tables_are_available(self, registry):
        assert registry.get("w").status == "available"
        assert registry.status_counts() == {"available": 2, "occupied": 0, "reserved": 0, "cleaning": 0}

    def test_validation(self, registry):
        with pytest.raises(ValidationError, match="capacity"):
            registry.add_table("Tiny", 0)
        with pytest.raises(ValidationError, match="name"):
            registry.add_table("", 2)
        with pytest.raises(ValidationError, match="already exists"):
            registry.add_table("Again", 2, table_id="w")

    def test_update_never_changes_status(self, registry):
        registry.occupy("w")
        updated = registry.update_table("w", name="Window Seat", capacity=3, x=20)
        assert updated.status == "occupied"
        assert (updated.name, updated.capacity, updated.x, updated.y) == ("Window Seat", 3, 20, 10)

    def test_delete_occupied_table_rejected(self, registry):
        registry.occupy("w")
        with pytest.raises(ValidationError, match="occupied"):
            registry.delete_table("w")
        assert "w" in registry

    def test_delete_free_table(self, registry):
        registry.delete_table("p")
        assert [table.id for table in registry.tables()] == ["w"]
        with pytest.raises(NotFoundError):
            registry.get("p")

    def test_probe_blocks_manual_release_and_delete(self, registry):
        registry.install_occupancy_probe(lambda table_id: table_id == "p")
        registry.occupy("p")
        with pytest.raises(ValidationError, match="open order"):
            registry.set_status("p", "available")
        registry.set_status("p", "occupied")
        with pytest.raises(ValidationError):
            registry.delete_table("p")

    def test_set_status(self, registry):
        assert registry.set_status("w", "cleaning").status == "cleaning"
        with pytest.raises(ValidationError, match="Unknown table status"):
            registry.set_status("w", "broken")

    def test_manual_occupied_needs_open_order(self, registry):
        with pytest.raises(ValidationError, match="no open order"):
            registry.set_status("w", "occupied")
        assert registry.get("w").status == "available"

    def test_filters(self, registry):
        registry.set_status("p", "reserved")
        assert [table.id for table in registry.tables(status="reserved")] == ["p"]
        assert [table.id for table in registry.tables(search="win")] == ["w"]


class TestOccupancyFollowsOrders:
    def test_table_with_open_order_cannot_be_freed(self, pos, engine):
        draft = engine.start_draft()
        engine.add_item(draft, "soda")
        engine.place_draft(draft, "table-1")
        with pytest.raises(ValidationError):
            pos.tables.set_status("table-1", "cleaning")
        with pytest.raises(ValidationError):
            pos.tables.delete_table("table-1")
        assert pos.toasts.items("table_delete_rejected")

    def test_manual_occupied_without_order_keeps_table_orderable(self, pos, engine):
        with pytest.raises(ValidationError, match="no open order"):
            pos.tables.set_status("table-2", "occupied")
        draft = engine.start_draft()
        engine.add_item(draft, "soda")
        order = engine.place_draft(draft, "table-2")
        assert pos.tables.get("table-2").status == "occupied"
        assert engine.order_for_table("table-2").id == order.id
