"""
Tests for wingpos.printer: kitchen ticket layout and font resolution.
"""

import pytest

from wingpos import printer
from wingpos.models import DeliveryInfo, ToGoInfo
from wingpos.printer import SEPARATOR, item_detail_lines, kitchen_ticket_lines, resolve_printer_font_path


class TestKitchenTicketLines:
    def test_dine_in_ticket(self, engine):
        draft = engine.start_draft()
        combo = engine.add_item(
            draft,
            "wings_combo",
            wing_sauces=["bbq", "loco"],
            fry_sauces=["cheddar"],
            choice="Cola",
            notes="no celery",
        )
        engine.update_item_quantity(draft, combo.instance_id, 1)
        engine.add_item(draft, "gelato_2", flavors=["Mango", "Arequipe"])
        order = engine.place_draft(draft, "table-4")

        lines = kitchen_ticket_lines(order, "Table 4")

        assert lines[0] == "LOCO ALITAS"
        assert lines[2] == f"Order {order.id[-6:].upper()}"
        assert lines[3] == "2025-06-18 07:00"
        assert lines[4:7] == [SEPARATOR, "TABLE: Table 4", SEPARATOR]
        assert lines[7:] == [
            "2x Wings Combo",
            "    - Choice: Cola",
            "    - Wing sauces: BBQ, Loco Hot",
            "    - Fry sauces: Cheddar",
            "    ** NOTE: NO CELERY **",
            "1x Gelato (2 Flavors)",
            "    - Flavors: Mango, Arequipe",
        ]

    def test_pickup_headers(self, engine):
        draft = engine.start_draft("delivery")
        engine.add_item(draft, "soda")
        delivery = engine.place_draft(draft, DeliveryInfo("Ana", "3001234567", "Cra 7"))
        draft = engine.start_draft("to-go")
        engine.add_item(draft, "soda")
        to_go = engine.place_draft(draft, ToGoInfo("Luis"))

        assert "DELIVERY: Ana" in kitchen_ticket_lines(delivery)
        assert "TO GO: Luis" in kitchen_ticket_lines(to_go)

    def test_missing_table_name(self, engine):
        draft = engine.start_draft()
        engine.add_item(draft, "soda")
        order = engine.place_draft(draft, "table-1")
        assert "TABLE: N/A" in kitchen_ticket_lines(order)

    def test_plain_item_has_no_details(self, engine):
        draft = engine.start_draft()
        line = engine.add_item(draft, "wings_6")
        assert item_detail_lines(line) == []


class TestFontResolution:
    def test_env_override_wins(self, tmp_path, monkeypatch):
        font = tmp_path / "ticket.ttf"
        font.write_bytes(b"")
        monkeypatch.setenv("WINGPOS_PRINTER_FONT_PATH", str(font))
        assert resolve_printer_font_path() == str(font)

    def test_no_font_available(self, monkeypatch):
        monkeypatch.delenv("WINGPOS_PRINTER_FONT_PATH", raising=False)
        monkeypatch.setattr(printer, "PRINTER_FONT_PATH", "/nonexistent/font.ttf")
        monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())
        with pytest.raises(RuntimeError, match="WINGPOS_PRINTER_FONT_PATH"):
            resolve_printer_font_path()
