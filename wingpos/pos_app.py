"""Main Textual app: counter order entry, active orders and checkout."""

from __future__ import annotations

import logging
import sqlite3
from typing import Callable, TypeVar

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from wingpos.advisory import AdvisoryClient
from wingpos.config import LOG_PATH, RESTAURANT_NAME
from wingpos.constant import ORDER_TYPES
from wingpos.destination_modal import DestinationModal
from wingpos.errors import PosError
from wingpos.messaging import customer_links, format_price
from wingpos.models import DeliveryInfo, MenuItem, Order, OrderItem, ToGoInfo
from wingpos.notifications import Notification
from wingpos.options_modal import OptionsModal
from wingpos.orders import short_id
from wingpos.payment_modal import PaymentModal
from wingpos.persistence import bootstrap_schema, save_sale
from wingpos.pos import PointOfSale
from wingpos.printer import check_printer_dependencies, print_kitchen_ticket
from wingpos.rendering import format_line_label, format_order_summary, format_order_type_badge

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TOAST_SEVERITY = {"success": "information", "info": "information", "warning": "warning", "error": "error"}


class PosApp(App):
    """A Textual app for taking orders, sending tickets and closing sales."""

    TITLE = RESTAURANT_NAME
    SUB_TITLE = "Point of Sale"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #draft-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #side-pane {
        width: 2fr;
    }

    #search-pane {
        height: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #orders-pane {
        height: 1fr;
        border: round $accent;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #draft-status {
        height: 3;
        margin-bottom: 1;
    }

    #results, #draft-list, #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_query = reactive("")
    selected_index = reactive(0)
    line_selected_index = reactive(None)
    order_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add item"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "place_and_print", "Place + Print", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, pos: PointOfSale | None = None, advisory: AdvisoryClient | None = None) -> None:
        super().__init__()
        self.pos = pos or PointOfSale.seeded()
        self.advisory = advisory or AdvisoryClient()
        self.draft = self.pos.orders.start_draft("dine-in")
        self.table_id: str | None = None
        self.system_status = ""
        self.upsell: list[str] = []
        self.pos.notifier.subscribe(self._toast)
        logger.debug("app_init")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="draft-pane"):
                yield Static("Current Order", classes="pane-title")
                yield Static(id="draft-status")
                yield Static("(no items yet)", id="draft-list")
            with Vertical(id="side-pane"):
                with Vertical(id="search-pane"):
                    yield Static(id="search-bar")
                    yield Static(id="results")
                with Vertical(id="orders-pane"):
                    yield Static("Active Orders", classes="pane-title")
                    yield Static("(no active orders)", id="orders-list")

    def on_mount(self) -> None:
        bootstrap_schema()
        _, msg = check_printer_dependencies()
        self.system_status = msg
        logger.debug("on_mount printer_status=%r", msg)
        self._refresh_all()

    def _toast(self, notification: Notification) -> None:
        self.notify(notification.message, severity=_TOAST_SEVERITY[notification.severity])

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        logger.debug(
            "on_key key=%r char=%r printable=%s state=%r", event.key, event.character, event.is_printable, self.input_state
        )

        if event.key == "ctrl+s":
            self.action_place_and_print()
            event.stop()
            return

        if self.input_state == "active":
            if event.is_printable and event.character and len(event.character) == 1:
                self.search_query += event.character
                self.selected_index = 0
                self._refresh_search()
                event.stop()
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        handlers = {
            "a": self._enter_search,
            "+": lambda: self._change_selected_quantity(1),
            "-": lambda: self._change_selected_quantity(-1),
            "d": self._remove_selected_line,
            "j": lambda: self._move_line_selection(1),
            "k": lambda: self._move_line_selection(-1),
            "n": self._open_options_for_selected_line,
            "o": self._cycle_order_type,
            "t": self._cycle_table,
            "h": lambda: self._move_order_selection(-1),
            "l": lambda: self._move_order_selection(1),
            "r": self._mark_selected_ready,
            "p": self._pay_selected_order,
            "x": self._cancel_selected_order,
            "w": self._show_customer_links,
            "u": self._suggest_upsell,
        }
        handler = handlers.get(event.character.lower() if event.character.isalpha() else event.character)
        if handler is None:
            return
        handler()
        event.stop()

    # ------------------------------------------------------------------
    # Search mode
    # ------------------------------------------------------------------

    def _enter_search(self) -> None:
        self.input_state = "active"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state != "active":
            return
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state != "active":
            return
        results = self._filtered_results()
        if not results:
            return
        line = self.pos.orders.add_item(self.draft, results[self.selected_index])
        self.line_selected_index = len(self.draft.items) - 1
        logger.debug("add_item menu_item=%s instance=%s", line.menu_item.id, line.instance_id)
        self._refresh_draft()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state != "active" or not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def _filtered_results(self) -> list[MenuItem]:
        return self.pos.menu.search(self.search_query)

    # ------------------------------------------------------------------
    # Draft editing
    # ------------------------------------------------------------------

    def _selected_line(self) -> OrderItem | None:
        if self.line_selected_index is None or not (0 <= self.line_selected_index < len(self.draft.items)):
            return None
        return self.draft.items[self.line_selected_index]

    def _move_line_selection(self, delta: int) -> None:
        if not self.draft.items:
            return
        if self.line_selected_index is None:
            self.line_selected_index = 0 if delta > 0 else len(self.draft.items) - 1
        else:
            self.line_selected_index = (self.line_selected_index + delta) % len(self.draft.items)
        self._refresh_draft()

    def _change_selected_quantity(self, delta: int) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.pos.orders.update_item_quantity(self.draft, line.instance_id, delta)
        self._clamp_line_selection()
        self._refresh_draft()

    def _remove_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.pos.orders.update_item_quantity(self.draft, line.instance_id, -line.quantity)
        self._clamp_line_selection()
        self._refresh_draft()

    def _clamp_line_selection(self) -> None:
        if not self.draft.items:
            self.line_selected_index = None
        elif self.line_selected_index is not None:
            self.line_selected_index = min(self.line_selected_index, len(self.draft.items) - 1)

    def _open_options_for_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return

        def save(**options: object) -> OrderItem:
            return self.pos.orders.set_item_customization(self.draft, line.instance_id, **options)

        self.push_screen(OptionsModal(line, on_save=save), lambda _: self._refresh_draft())

    def _cycle_order_type(self) -> None:
        index = ORDER_TYPES.index(self.draft.order_type)
        self.draft.order_type = ORDER_TYPES[(index + 1) % len(ORDER_TYPES)]
        self._refresh_draft()

    def _cycle_table(self) -> None:
        available = [table.id for table in self.pos.tables.tables(status="available")]
        if not available:
            self.table_id = None
            self.system_status = "No available tables"
        elif self.table_id not in available:
            self.table_id = available[0]
        else:
            self.table_id = available[(available.index(self.table_id) + 1) % len(available)]
        self._refresh_draft()

    def _suggest_upsell(self) -> None:
        if not self.draft.items:
            return
        self.run_worker(self._fetch_upsell(), exclusive=True, group="upsell")

    async def _fetch_upsell(self) -> None:
        self.upsell = await self.advisory.suggest_upsell(list(self.draft.items), self.pos.menu.items())
        self.system_status = f"Try: {', '.join(self.upsell)}" if self.upsell else "No suggestions right now"
        self._refresh_draft()

    # ------------------------------------------------------------------
    # Placing and closing orders
    # ------------------------------------------------------------------

    def action_place_and_print(self) -> None:
        logger.debug("place_enter state=%r rows=%d", self.input_state, len(self.draft.items))
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "normal":
            self.system_status = "Place orders only in NORMAL mode (Ctrl+C to exit search)"
            self._refresh_draft()
            return
        if not self.draft.items:
            self.system_status = "Nothing to place"
            self._refresh_draft()
            return

        if self.draft.order_type == "dine-in":
            if self.table_id is None:
                self.system_status = "Pick a table first (T)"
                self._refresh_draft()
                return
            self._place(self.table_id)
            return

        self.push_screen(DestinationModal(self.draft.order_type), self._on_destination)

    def _on_destination(self, destination: DeliveryInfo | ToGoInfo | None) -> None:
        if destination is None:
            return
        self._place(destination)

    def _place(self, destination: str | DeliveryInfo | ToGoInfo) -> None:
        try:
            order = self.pos.orders.place_draft(self.draft, destination)
        except PosError as exc:
            self.system_status = str(exc)
            self._refresh_draft()
            return

        self.table_id = None
        self.line_selected_index = None
        self.upsell = []
        table_name = self.pos.tables.get(order.table_id).name if order.table_id else None
        try:
            print_kitchen_ticket(order, table_name)
        except Exception as exc:
            logger.exception("print failed order_id=%s", order.id)
            self.system_status = f"Placed {short_id(order.id)} but print failed: {exc}"
        else:
            self.system_status = f"Placed + printed: {short_id(order.id)}"
        self._refresh_all()

    def _selected_order(self) -> Order | None:
        orders = self.pos.orders.open_orders()
        if self.order_selected_index is None or not (0 <= self.order_selected_index < len(orders)):
            return None
        return orders[self.order_selected_index]

    def _move_order_selection(self, delta: int) -> None:
        orders = self.pos.orders.open_orders()
        if not orders:
            return
        if self.order_selected_index is None:
            self.order_selected_index = 0 if delta > 0 else len(orders) - 1
        else:
            self.order_selected_index = (self.order_selected_index + delta) % len(orders)
        self._refresh_orders()

    def _mark_selected_ready(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        self._run_order_action(lambda: self.pos.orders.mark_ready(order.id))

    def _cancel_selected_order(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        self._run_order_action(lambda: self.pos.orders.cancel_order(order.id, reason="cancelled at counter"))

    def _pay_selected_order(self) -> None:
        order = self._selected_order()
        if order is None:
            return

        def on_method(method: str | None) -> None:
            if method is None:
                return
            sale = self._run_order_action(lambda: self.pos.orders.complete_sale(order.id, method))
            if sale is None:
                return
            table_name = self.pos.tables.get(order.table_id).name if order.table_id in self.pos.tables else None
            try:
                save_sale(sale, table_name=table_name)
            except sqlite3.Error as exc:
                logger.exception("archive failed sale_id=%s", sale.id)
                self.system_status = f"Sale {short_id(sale.id)} recorded but not archived: {exc}"
                self._refresh_draft()

        self.push_screen(PaymentModal(order.total, short_id(order.id).upper()), on_method)

    def _run_order_action(self, action: Callable[[], T]) -> T | None:
        try:
            result = action()
        except PosError as exc:
            self.system_status = str(exc)
            return None
        finally:
            self._refresh_all()
        return result

    def _show_customer_links(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        links = customer_links(order)
        if not links:
            self.system_status = "No phone number for this order"
        else:
            for purpose, link in links.items():
                logger.info("whatsapp %s order=%s %s", purpose, order.id, link)
            self.system_status = f"WhatsApp links for {short_id(order.id)} written to {LOG_PATH}"
        self._refresh_draft()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _refresh_all(self) -> None:
        self._refresh_draft()
        self._refresh_search()
        self._refresh_orders()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)
        rows = max(1, rows)
        if total <= rows:
            return (0, total)
        start = 0 if selected is None else max(0, min(selected - rows // 2, total - rows))
        return (start, start + rows)

    def _refresh_draft(self) -> None:
        try:
            status_widget = self.query_one("#draft-status", Static)
            draft_widget = self.query_one("#draft-list", Static)
        except NoMatches:
            return

        status = Text()
        status.append_text(format_order_type_badge(self.draft.order_type))
        if self.draft.order_type == "dine-in":
            table = self.pos.tables.get(self.table_id).name if self.table_id in self.pos.tables else "no table"
            status.append(f"  {table}")
        status.append(f"  Total {format_price(self.draft.total)}", style="bold")
        status.append(f"\n{self.system_status or 'Ready'}", style="dim")
        status_widget.update(status)

        if not self.draft.items:
            draft_widget.update("(no items yet)")
            return

        lines = Text()
        for idx, line in enumerate(self.draft.items):
            if idx > 0:
                lines.append("\n")
            lines.append("➤ " if idx == self.line_selected_index else "  ")
            lines.append_text(format_line_label(line))
        draft_widget.update(lines)

    def _refresh_orders(self) -> None:
        try:
            orders_widget = self.query_one("#orders-list", Static)
        except NoMatches:
            return
        orders = self.pos.orders.open_orders()
        if not orders:
            self.order_selected_index = None
            orders_widget.update("(no active orders)")
            return
        if self.order_selected_index is not None and self.order_selected_index >= len(orders):
            self.order_selected_index = len(orders) - 1

        start, end = self._window_bounds(len(orders), self._visible_rows(orders_widget), self.order_selected_index)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.order_selected_index else "  ")
            order = orders[idx]
            lines.append_text(format_order_summary(order, self.pos.orders.destination_label(order)))
        if end < len(orders):
            lines.append("\n⋮", style="dim")
        orders_widget.update(lines)

    def _refresh_search(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            bar.update("A search · J/K line · +/- qty · N options · O type · T table · Ctrl+S place")
            self._refresh_results([])
            return
        bar.update(Text(f"Search: {self.search_query}"))
        self._refresh_results(self._filtered_results())

    def _refresh_results(self, results: list[MenuItem]) -> None:
        results_widget = self.query_one("#results", Static)
        if self.input_state == "normal":
            results_widget.update("H/L order · R ready · P pay · X cancel · W WhatsApp · U upsell")
            return
        if not results:
            results_widget.update("No results")
            return
        if self.selected_index >= len(results):
            self.selected_index = 0

        start, end = self._window_bounds(len(results), self._visible_rows(results_widget), self.selected_index)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(f"{pointer}{results[idx].name}  {format_price(results[idx].price)}")
        if end < len(results):
            lines.append("\n⋮", style="dim")
        results_widget.update(lines)


def main() -> None:
    logging.basicConfig(
        filename=LOG_PATH,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    PosApp().run()


if __name__ == "__main__":
    main()
