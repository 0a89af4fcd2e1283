"""Order engine: drafts, placed orders, status transitions and sale completion.

Lifecycle::

    draft --create_order--> open --mark_ready--> ready
                              |                    |
                              +---complete_sale----+--> completed (Sale recorded)
                              +---cancel_order-----+--> cancelled

Drafts are the only editable shape. Once placed, an order is a value that
moves through statuses until it leaves the active set on completion or
cancellation. Every operation validates before it mutates, so a rejected
call leaves orders, tables, inventory and sales exactly as they were.
"""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence
from uuid import uuid4

from wingpos.config import CLOSED_ORDER_HISTORY
from wingpos.constant import ORDER_STATUSES, ORDER_TYPES, PAYMENT_METHODS
from wingpos.data import FRY_SAUCES, WING_SAUCES, choices_for_submenu, is_known_flavor, resolve_sauce
from wingpos.errors import NotFoundError, ValidationError
from wingpos.inventory import InventoryLedger
from wingpos.menu import MenuCatalog
from wingpos.models import (
    DeliveryInfo,
    Destination,
    MenuItem,
    Order,
    OrderDraft,
    OrderItem,
    Sale,
    Sauce,
    ToGoInfo,
)
from wingpos.notifications import NotificationHub
from wingpos.sales import SalesLedger
from wingpos.tables import TableRegistry

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[str, frozenset[str]] = {
    "open": frozenset({"ready", "completed", "cancelled"}),
    "ready": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def short_id(order_id: str) -> str:
    """Last six characters of an id, as shown on tickets and toasts."""
    return order_id[-6:]


def destination_label(order: Order, table_name: str | None = None) -> str:
    """Ticket header naming where the order goes."""
    if order.order_type == "delivery":
        return f"DELIVERY: {order.delivery.name if order.delivery else 'N/A'}"
    if order.order_type == "to-go":
        return f"TO GO: {order.to_go.name if order.to_go else 'N/A'}"
    return f"TABLE: {table_name or 'N/A'}"


def _resolve_sauces(
    sauces: Iterable[Sauce | str], catalog: dict[str, Sauce], kind: str, item: MenuItem
) -> tuple[Sauce, ...]:
    resolved: list[Sauce] = []
    for sauce in sauces:
        match = resolve_sauce(sauce, catalog)
        if match is None:
            key = sauce.key if isinstance(sauce, Sauce) else sauce
            raise ValidationError(f"Unknown {kind} sauce '{key}' for {item.name}.")
        if match not in resolved:
            resolved.append(match)
    return tuple(resolved)


def _validate_flavors(flavors: Sequence[str], item: MenuItem) -> tuple[str, ...]:
    if not flavors:
        return ()
    if not item.max_choices:
        raise ValidationError(f"{item.name} does not take flavor selections.")
    if len(flavors) > item.max_choices:
        raise ValidationError(
            f"{item.name} allows at most {item.max_choices} flavor(s); got {len(flavors)}."
        )
    seen: set[str] = set()
    for flavor in flavors:
        if not is_known_flavor(flavor):
            raise ValidationError(f"Unknown flavor '{flavor}'.")
        if flavor in seen:
            raise ValidationError(f"Flavor '{flavor}' is selected more than once.")
        seen.add(flavor)
    return tuple(flavors)


def customize(
    line: OrderItem,
    wing_sauces: Iterable[Sauce | str] = (),
    fry_sauces: Iterable[Sauce | str] = (),
    choice: str | None = None,
    flavors: Sequence[str] = (),
    notes: str = "",
) -> OrderItem:
    """Return a copy of ``line`` carrying the given options, or raise ValidationError."""
    item = line.menu_item
    wing = _resolve_sauces(wing_sauces, WING_SAUCES, "wing", item)
    fry = _resolve_sauces(fry_sauces, FRY_SAUCES, "fry", item)
    if wing and not item.has_wings:
        raise ValidationError(f"{item.name} does not take wing sauces.")
    if fry and not item.has_fries:
        raise ValidationError(f"{item.name} does not take fry sauces.")

    if choice is not None:
        options = choices_for_submenu(item.submenu_key)
        if not options:
            raise ValidationError(f"{item.name} has no options to choose from.")
        if choice not in options:
            raise ValidationError(f"'{choice}' is not an option for {item.name}; pick one of {', '.join(options)}.")

    return replace(
        line,
        wing_sauces=wing,
        fry_sauces=fry,
        choice=choice,
        flavors=_validate_flavors(list(flavors), item),
        notes=(notes or "").strip(),
    )


class OrderEngine:
    """Creates and moves orders, and settles them against inventory, tables and sales.

    The last ``closed_history`` completed or cancelled orders are remembered so a repeated
    completion reports "already completed". Older ids become unknown, and they still
    cannot be settled twice because they are no longer active.
    """

    def __init__(
        self,
        menu: MenuCatalog,
        tables: TableRegistry,
        inventory: InventoryLedger,
        sales: SalesLedger,
        notifier: NotificationHub | None = None,
        clock: Callable[[], datetime] = utc_now,
        closed_history: int = CLOSED_ORDER_HISTORY,
    ) -> None:
        self._menu = menu
        self._tables = tables
        self._inventory = inventory
        self._sales = sales
        self._notifier = notifier or NotificationHub()
        self._clock = clock
        self._active: dict[str, Order] = {}
        self._closed: dict[str, Order] = {}
        self._closed_history = closed_history
        tables.install_occupancy_probe(self.has_open_order)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def start_draft(self, order_type: str = "dine-in") -> OrderDraft:
        _require_order_type(order_type)
        return OrderDraft(order_type=order_type)

    def add_item(
        self,
        draft: OrderDraft,
        menu_item: MenuItem | str,
        wing_sauces: Iterable[Sauce | str] = (),
        fry_sauces: Iterable[Sauce | str] = (),
        choice: str | None = None,
        flavors: Sequence[str] = (),
        notes: str = "",
    ) -> OrderItem:
        """Append a fresh snapshot of ``menu_item`` to the draft."""
        _require_draft(draft)
        item = self._menu.get(menu_item) if isinstance(menu_item, str) else menu_item
        line = customize(
            OrderItem(instance_id=uuid4().hex, menu_item=item),
            wing_sauces=wing_sauces,
            fry_sauces=fry_sauces,
            choice=choice,
            flavors=flavors,
            notes=notes,
        )
        draft.items.append(line)
        return line

    def update_item_quantity(self, draft: OrderDraft, instance_id: str, delta: int) -> OrderItem | None:
        """Change a line's quantity; the line is dropped when it reaches zero."""
        _require_draft(draft)
        index = _line_index(draft, instance_id)
        line = draft.items[index]
        quantity = line.quantity + delta
        if quantity <= 0:
            del draft.items[index]
            return None
        updated = replace(line, quantity=quantity)
        draft.items[index] = updated
        return updated

    def set_item_customization(
        self,
        draft: OrderDraft,
        instance_id: str,
        wing_sauces: Iterable[Sauce | str] = (),
        fry_sauces: Iterable[Sauce | str] = (),
        choice: str | None = None,
        flavors: Sequence[str] = (),
        notes: str = "",
    ) -> OrderItem:
        """Replace every option on one line. Invalid selections leave the line as it was."""
        _require_draft(draft)
        index = _line_index(draft, instance_id)
        updated = customize(
            draft.items[index],
            wing_sauces=wing_sauces,
            fry_sauces=fry_sauces,
            choice=choice,
            flavors=flavors,
            notes=notes,
        )
        draft.items[index] = updated
        return updated

    def choose_flavor(self, draft: OrderDraft, instance_id: str, slot: int, flavor: str) -> OrderItem:
        """Set a single flavor slot; the latest pick for a slot replaces the earlier one."""
        _require_draft(draft)
        index = _line_index(draft, instance_id)
        line = draft.items[index]
        limit = line.menu_item.max_choices or 0
        if not 0 <= slot < limit:
            raise ValidationError(f"{line.name} has {limit} flavor slot(s); slot {slot + 1} does not exist.")
        if slot > len(line.flavors):
            raise ValidationError(f"Pick flavor {len(line.flavors) + 1} before flavor {slot + 1}.")

        flavors = list(line.flavors)
        if slot == len(flavors):
            flavors.append(flavor)
        else:
            flavors[slot] = flavor
        updated = replace(line, flavors=_validate_flavors(flavors, line.menu_item))
        draft.items[index] = updated
        return updated

    # ------------------------------------------------------------------
    # Placing orders
    # ------------------------------------------------------------------

    def create_order(self, order_type: str, destination: Destination, items: Sequence[OrderItem]) -> Order:
        _require_order_type(order_type)
        if not items:
            raise ValidationError("An order needs at least one item.")
        instance_ids = [line.instance_id for line in items]
        if len(set(instance_ids)) != len(instance_ids):
            raise ValidationError("Order lines must have distinct instance ids.")
        if any(line.quantity < 1 for line in items):
            raise ValidationError("Order line quantities must be at least 1.")

        fields: dict[str, object] = {}
        if order_type == "dine-in":
            if not isinstance(destination, str) or not destination:
                raise ValidationError("Dine-in orders need a table.")
            table = self._tables.get(destination)
            if table.status != "available" or self.has_open_order(table.id):
                raise ValidationError(f"{table.name} is {table.status}; pick an available table.")
            fields["table_id"] = table.id
        elif order_type == "delivery":
            if not isinstance(destination, DeliveryInfo):
                raise ValidationError("Delivery orders need the customer's delivery info.")
            delivery = DeliveryInfo(
                name=destination.name.strip(),
                phone=destination.phone.strip(),
                address=destination.address.strip(),
            )
            if not (delivery.name and delivery.phone and delivery.address):
                raise ValidationError("Delivery orders need a name, phone and address.")
            fields["delivery"] = delivery
        else:
            if not isinstance(destination, ToGoInfo):
                raise ValidationError("To-go orders need the customer's name.")
            to_go = ToGoInfo(name=destination.name.strip(), phone=destination.phone.strip())
            if not to_go.name:
                raise ValidationError("To-go orders need the customer's name.")
            fields["to_go"] = to_go

        order = Order(
            id=uuid4().hex,
            order_type=order_type,
            items=tuple(items),
            created_at=self._clock(),
            status="open",
            **fields,  # type: ignore[arg-type]
        )
        if order.table_id is not None:
            self._tables.occupy(order.table_id)
        self._active[order.id] = order

        logger.info(
            "order created id=%s type=%s lines=%d total=%s",
            order.id,
            order.order_type,
            len(order.items),
            order.total,
        )
        self._notifier.notify("Order created", "success", kind="order_created")
        self._notifier.notify(
            f"New ticket {short_id(order.id)} for {self.destination_label(order)}",
            "info",
            kind="kitchen_ticket",
        )
        return order

    def place_draft(self, draft: OrderDraft, destination: Destination) -> Order:
        """Place the draft as an open order and clear it for the next customer."""
        _require_draft(draft)
        order = self.create_order(draft.order_type, destination, list(draft.items))
        draft.items.clear()
        return order

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def transition_status(self, order_id: str, new_status: str, payment_method: str | None = None) -> Order:
        order = self._require_active(order_id)
        if new_status not in ORDER_STATUSES:
            raise ValidationError(f"Unknown order status '{new_status}'.")
        if new_status not in _TRANSITIONS[order.status]:
            raise ValidationError(f"Order {short_id(order_id)} cannot go from {order.status} to {new_status}.")

        if new_status == "ready":
            return self.mark_ready(order_id)
        if new_status == "completed":
            if payment_method is None:
                raise ValidationError("Completing an order requires a payment method.")
            return self.complete_sale(order_id, payment_method).order
        return self.cancel_order(order_id)

    def mark_ready(self, order_id: str) -> Order:
        """Kitchen signals the order is done."""
        order = self._require_active(order_id)
        if order.status != "open":
            raise ValidationError(f"Order {short_id(order_id)} is {order.status}, not open.")
        ready = replace(order, status="ready")
        self._active[order_id] = ready
        logger.info("order ready id=%s", order_id)
        self._notifier.notify(f"Order {short_id(order_id)} marked as ready!", "info", kind="order_ready")
        return ready

    def complete_sale(self, order_id: str, payment_method: str) -> Sale:
        """Charge the order, consume its recipes, record the sale and free the table.

        Each order completes at most once; a second attempt raises and changes
        nothing.
        """
        order = self._require_active(order_id)
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"Payment method must be one of {', '.join(PAYMENT_METHODS)}.")

        deductions: dict[str, float] = defaultdict(float)
        for line in order.items:
            for ingredient in line.menu_item.recipe:
                deductions[ingredient.inventory_item_id] += ingredient.quantity * line.quantity
        for inventory_item_id in deductions:
            if inventory_item_id not in self._inventory:
                raise NotFoundError("Inventory item", inventory_item_id)

        completed = copy.deepcopy(replace(order, status="completed"))
        sale = Sale(
            id=uuid4().hex,
            order=completed,
            total=completed.total,
            timestamp=self._clock(),
            payment_method=payment_method,
        )

        self._inventory.deduct_many(dict(deductions))
        self._sales.record(sale)
        del self._active[order_id]
        self._remember_closed(completed)
        if order.table_id is not None:
            self._tables.release(order.table_id)

        logger.info("sale completed order=%s sale=%s total=%s method=%s", order_id, sale.id, sale.total, payment_method)
        self._notifier.notify("Sale completed", "success", kind="sale_completed")
        return sale

    def cancel_order(self, order_id: str, reason: str = "") -> Order:
        """Void an open or ready order. Inventory is untouched and no sale is recorded."""
        order = self._require_active(order_id)
        cancelled = replace(order, status="cancelled")
        del self._active[order_id]
        self._remember_closed(cancelled)
        if order.table_id is not None:
            self._tables.release(order.table_id)

        logger.info("order cancelled id=%s reason=%s", order_id, reason or "-")
        self._notifier.notify(f"Order {short_id(order_id)} cancelled", "info", kind="order_cancelled")
        return cancelled

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        return self._require_active(order_id)

    def open_orders(self) -> list[Order]:
        """Orders still in the working set (open or ready), oldest first."""
        return sorted(self._active.values(), key=lambda order: order.created_at)

    def kitchen_queue(self) -> list[Order]:
        return [order for order in self.open_orders() if order.status == "open"]

    def pickup_orders(self) -> list[Order]:
        return [order for order in self.open_orders() if order.order_type in {"delivery", "to-go"}]

    def order_for_table(self, table_id: str) -> Order | None:
        for order in self._active.values():
            if order.table_id == table_id:
                return order
        return None

    def has_open_order(self, table_id: str) -> bool:
        return self.order_for_table(table_id) is not None

    def closed_status(self, order_id: str) -> str | None:
        closed = self._closed.get(order_id)
        return closed.status if closed is not None else None

    def cancelled_orders(self) -> list[Order]:
        return [order for order in self._closed.values() if order.status == "cancelled"]

    def destination_label(self, order: Order) -> str:
        table_name = None
        if order.table_id is not None and order.table_id in self._tables:
            table_name = self._tables.get(order.table_id).name
        return destination_label(order, table_name)

    def _remember_closed(self, order: Order) -> None:
        self._closed[order.id] = order
        while len(self._closed) > self._closed_history:
            del self._closed[next(iter(self._closed))]

    def _require_active(self, order_id: str) -> Order:
        order = self._active.get(order_id)
        if order is not None:
            return order
        closed = self._closed.get(order_id)
        if closed is not None:
            raise ValidationError(f"Order {short_id(order_id)} is already {closed.status}.")
        raise NotFoundError("Order", order_id)


def _require_order_type(order_type: str) -> None:
    if order_type not in ORDER_TYPES:
        raise ValidationError(f"Order type must be one of {', '.join(ORDER_TYPES)}.")


def _require_draft(draft: object) -> None:
    if isinstance(draft, Order):
        raise ValidationError("Placed orders are locked; only the draft can be edited.")
    if not isinstance(draft, OrderDraft):
        raise ValidationError("Expected an order draft.")


def _line_index(draft: OrderDraft, instance_id: str) -> int:
    for index, line in enumerate(draft.items):
        if line.instance_id == instance_id:
            return index
    raise NotFoundError("Order line", instance_id)
