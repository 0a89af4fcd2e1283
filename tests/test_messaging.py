"""
Tests for wingpos.messaging: WhatsApp links and customer messages.
"""

from decimal import Decimal
from urllib.parse import unquote

from wingpos.messaging import (
    customer_contact,
    customer_links,
    customer_messages,
    format_price,
    order_details_text,
    whatsapp_link,
)
from wingpos.models import DeliveryInfo, ToGoInfo


def _pickup(engine, order_type, destination, items=("wings_6",)):
    draft = engine.start_draft(order_type)
    for item_id in items:
        engine.add_item(draft, item_id)
    return engine.place_draft(draft, destination)


class TestWhatsappLink:
    def test_local_number_gets_country_code(self):
        link = whatsapp_link("300 123-4567", "Hola")
        assert link == "https://wa.me/573001234567?text=Hola"

    def test_international_number_kept(self):
        assert whatsapp_link("+1 (415) 555-01234", "x").startswith("https://wa.me/141555501234?")

    def test_text_is_url_encoded(self):
        link = whatsapp_link("3001234567", "Total: $22.000 & more\nthanks")
        encoded = link.split("?text=", 1)[1]
        assert " " not in encoded and "&" not in encoded and "\n" not in encoded
        assert unquote(encoded) == "Total: $22.000 & more\nthanks"


class TestCustomerMessages:
    def test_format_price(self):
        assert format_price(Decimal("22000")) == "$22.000"
        assert format_price(1250000) == "$1.250.000"

    def test_contact_for_each_order_type(self, engine):
        delivery = _pickup(engine, "delivery", DeliveryInfo("Ana", "3001234567", "Cra 7"))
        to_go = _pickup(engine, "to-go", ToGoInfo("Luis"))
        dine_in = _pickup(engine, "dine-in", "table-1")
        assert customer_contact(delivery).phone == "3001234567"
        assert customer_contact(to_go).name == "Luis"
        assert not customer_contact(to_go).has_phone
        assert customer_contact(dine_in).name == "N/A"

    def test_order_details_text(self, engine):
        order = _pickup(engine, "to-go", ToGoInfo("Luis"), items=("wings_6", "soda"))
        text = order_details_text(order)
        assert "- 1x Wings (6 pcs)" in text
        assert "- 1x Soda" in text
        assert text.endswith("*Total: $27.000*")

    def test_messages_depend_on_order_type(self, engine):
        delivery = _pickup(engine, "delivery", DeliveryInfo("Ana", "3001234567", "Cra 7"))
        to_go = _pickup(engine, "to-go", ToGoInfo("Luis", "3009998877"))
        assert set(customer_messages(delivery)) == {"confirm", "on_way"}
        assert set(customer_messages(to_go)) == {"confirm", "ready"}
        assert "Ana" in customer_messages(delivery)["confirm"]
        assert "Wings (6 pcs)" in customer_messages(delivery)["confirm"]

    def test_links_need_a_phone(self, engine):
        no_phone = _pickup(engine, "to-go", ToGoInfo("Luis"))
        with_phone = _pickup(engine, "to-go", ToGoInfo("Luis", "3009998877"))
        assert customer_links(no_phone) == {}
        assert customer_links(with_phone)["ready"].startswith("https://wa.me/573009998877?text=")
