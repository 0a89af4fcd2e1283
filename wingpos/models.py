"""Domain models for wingpos."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Sauce:
    """A selectable wing or fry sauce."""

    key: str
    name: str


@dataclass(frozen=True)
class InventoryItem:
    """An ingredient held in stock."""

    id: str
    name: str
    stock: float
    unit: str
    cost: Decimal
    alert_threshold: float

    @property
    def is_low(self) -> bool:
        return self.stock <= self.alert_threshold


@dataclass(frozen=True)
class RecipeLine:
    """Quantity of one inventory item consumed per unit sold."""

    inventory_item_id: str
    quantity: float


@dataclass(frozen=True)
class MenuItem:
    """A sellable menu item and the recipe it consumes."""

    id: str
    name: str
    price: Decimal
    category: str
    description: str = ""
    has_wings: bool = False
    has_fries: bool = False
    submenu_key: str | None = None
    max_choices: int | None = None
    image_url: str = ""
    recipe: tuple[RecipeLine, ...] = ()


@dataclass(frozen=True)
class Table:
    """A physical table on the floor plan."""

    id: str
    name: str
    capacity: int
    status: str = "available"
    x: int | None = None
    y: int | None = None


@dataclass(frozen=True)
class OrderItem:
    """A menu item snapshot taken when it was added to an order, plus its options."""

    instance_id: str
    menu_item: MenuItem
    quantity: int = 1
    wing_sauces: tuple[Sauce, ...] = ()
    fry_sauces: tuple[Sauce, ...] = ()
    choice: str | None = None
    flavors: tuple[str, ...] = ()
    notes: str = ""

    @property
    def name(self) -> str:
        return self.menu_item.name

    @property
    def price(self) -> Decimal:
        return self.menu_item.price

    @property
    def line_total(self) -> Decimal:
        return self.menu_item.price * self.quantity


@dataclass(frozen=True)
class DeliveryInfo:
    """Contact and address for a delivery order."""

    name: str
    phone: str
    address: str


@dataclass(frozen=True)
class ToGoInfo:
    """Contact for a to-go order."""

    name: str
    phone: str = ""


Destination = str | DeliveryInfo | ToGoInfo


@dataclass(frozen=True)
class Order:
    """A placed order bound to exactly one destination."""

    id: str
    order_type: str
    items: tuple[OrderItem, ...]
    created_at: datetime
    status: str = "open"
    table_id: str | None = None
    delivery: DeliveryInfo | None = None
    to_go: ToGoInfo | None = None

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal(0))

    @property
    def is_active(self) -> bool:
        return self.status in {"open", "ready"}


@dataclass
class OrderDraft:
    """The order being built at the counter, before it is placed."""

    order_type: str = "dine-in"
    items: list[OrderItem] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal(0))


@dataclass(frozen=True)
class Sale:
    """A completed, paid order."""

    id: str
    order: Order
    total: Decimal
    timestamp: datetime
    payment_method: str
