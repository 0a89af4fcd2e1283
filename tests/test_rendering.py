"""
Tests for wingpos.rendering: rich text helpers.
"""

from wingpos.rendering import (
    badge_style,
    format_line_label,
    format_option_tags,
    format_order_summary,
    format_order_type_badge,
    format_table_label,
)


class TestRendering:
    def test_badges_differ_per_order_type(self):
        styles = {badge_style(order_type) for order_type in ("dine-in", "delivery", "to-go")}
        assert len(styles) == 3
        assert format_order_type_badge("to-go").plain == " TOGO "

    def test_option_tags(self, engine):
        draft = engine.start_draft()
        line = engine.add_item(draft, "wings_combo", wing_sauces=["teriyaki"], choice="Orange", notes="extra hot")
        assert format_option_tags(line).plain == "[Orange] [Teriyaki] “extra hot”"

    def test_line_label(self, engine):
        draft = engine.start_draft()
        line = engine.add_item(draft, "soda")
        engine.update_item_quantity(draft, line.instance_id, 1)
        assert format_line_label(draft.items[0]).plain == "2x Soda  $10.000"

    def test_order_summary(self, engine):
        draft = engine.start_draft()
        engine.add_item(draft, "wings_12")
        order = engine.place_draft(draft, "table-1")
        text = format_order_summary(order, "TABLE: Table 1").plain
        assert text.startswith(" DINE ")
        assert "TABLE: Table 1" in text
        assert "$40.000" in text
        assert text.endswith("OPEN")

    def test_table_label(self, pos):
        assert format_table_label(pos.tables.get("table-5")).plain == "Bar (8) available"
