"""Rich text helpers for the terminal front-end."""

from __future__ import annotations

from rich.text import Text

from wingpos.messaging import format_price
from wingpos.models import Order, OrderItem, Table
from wingpos.orders import short_id

_ORDER_TYPE_LABELS = {"dine-in": "DINE", "delivery": "DLVR", "to-go": "TOGO"}


def badge_style(order_type: str) -> str:
    """Return a consistent badge style for order types."""
    if order_type == "delivery":
        return "bold #ffffff on #2f6db5"
    if order_type == "to-go":
        return "bold #0b1f0f on #f2c14e"
    return "bold #ffffff on #b23a48"


def status_style(status: str) -> str:
    if status == "ready":
        return "bold #5fbf72"
    if status == "open":
        return "bold #f2c14e"
    if status in {"occupied", "cancelled"}:
        return "bold #e5484d"
    if status in {"reserved", "cleaning"}:
        return "bold #8aa4c8"
    return "#9aa0a6"


def format_order_type_badge(order_type: str) -> Text:
    return Text(f" {_ORDER_TYPE_LABELS.get(order_type, order_type.upper())} ", style=badge_style(order_type))


def format_option_tags(line: OrderItem) -> Text:
    """Render a line's selected options as compact tags."""
    tags: list[str] = []
    if line.choice:
        tags.append(line.choice)
    tags.extend(sauce.name for sauce in line.wing_sauces)
    tags.extend(sauce.name for sauce in line.fry_sauces)
    tags.extend(line.flavors)
    text = Text()
    for idx, tag in enumerate(tags):
        if idx > 0:
            text.append(" ")
        text.append(f"[{tag}]", style="white")
    if line.notes:
        if tags:
            text.append(" ")
        text.append(f"“{line.notes}”", style="italic #f2c14e")
    return text


def format_line_label(line: OrderItem) -> Text:
    """Render ``qty x name  price`` followed by any option tags."""
    text = Text()
    text.append(f"{line.quantity}x ", style="bold")
    text.append(line.name)
    text.append(f"  {format_price(line.line_total)}", style="#9aa0a6")
    tags = format_option_tags(line)
    if tags.plain:
        text.append("\n    ")
        text.append_text(tags)
    return text


def format_order_summary(order: Order, destination: str) -> Text:
    """One-line summary for the active orders list."""
    text = Text()
    text.append_text(format_order_type_badge(order.order_type))
    text.append(f" {short_id(order.id).upper()} ", style="bold")
    text.append(destination)
    text.append(f"  {format_price(order.total)}  ")
    text.append(order.status.upper(), style=status_style(order.status))
    return text


def format_table_label(table: Table) -> Text:
    text = Text(f"{table.name} ({table.capacity}) ")
    text.append(table.status, style=status_style(table.status))
    return text
