"""WhatsApp deep links and customer message templates for pickup orders."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from urllib.parse import quote

from wingpos.config import RESTAURANT_NAME, WHATSAPP_DEFAULT_COUNTRY_CODE, WHATSAPP_LOCAL_NUMBER_DIGITS
from wingpos.models import Order

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class CustomerContact:
    name: str
    phone: str

    @property
    def has_phone(self) -> bool:
        return bool(self.phone.strip())


def format_price(amount: Decimal | int | float) -> str:
    """Whole pesos with dot thousands separators, e.g. ``$22.000``."""
    return "$" + f"{Decimal(str(amount)):,.0f}".replace(",", ".")


def whatsapp_link(phone: str, text: str) -> str:
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) <= WHATSAPP_LOCAL_NUMBER_DIGITS:
        digits = f"{WHATSAPP_DEFAULT_COUNTRY_CODE}{digits}"
    return f"https://wa.me/{digits}?text={quote(text, safe='')}"


def customer_contact(order: Order) -> CustomerContact:
    if order.order_type == "delivery" and order.delivery is not None:
        return CustomerContact(name=order.delivery.name or "N/A", phone=order.delivery.phone)
    if order.order_type == "to-go" and order.to_go is not None:
        return CustomerContact(name=order.to_go.name or "N/A", phone=order.to_go.phone)
    return CustomerContact(name="N/A", phone="")


def order_details_text(order: Order) -> str:
    lines = "\n".join(f"- {line.quantity}x {line.name}" for line in order.items)
    return f"Your order details:\n{lines}\n\n*Total: {format_price(order.total)}*"


def customer_messages(order: Order) -> dict[str, str]:
    """Quick messages for a pickup order, keyed by purpose.

    Every order gets "confirm"; to-go orders add "ready" and delivery orders
    add "on_way".
    """
    name = customer_contact(order).name
    messages = {
        "confirm": (
            f"Hi {name}! Your order at {RESTAURANT_NAME} is confirmed. "
            f"We're preparing everything for you.\n\n{order_details_text(order)}"
        ),
    }
    if order.order_type == "to-go":
        messages["ready"] = f"Good news, {name}! Your {RESTAURANT_NAME} order is ready for pickup. See you soon!"
    elif order.order_type == "delivery":
        messages["on_way"] = f"Hi {name}! Your {RESTAURANT_NAME} order is on its way. Get ready to enjoy!"
    return messages


def customer_links(order: Order) -> dict[str, str]:
    """WhatsApp links for each of :func:`customer_messages`; empty when there is no phone."""
    contact = customer_contact(order)
    if not contact.has_phone:
        return {}
    return {purpose: whatsapp_link(contact.phone, text) for purpose, text in customer_messages(order).items()}
