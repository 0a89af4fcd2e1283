"""Payment method modal screen."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from wingpos.constant import PAYMENT_METHODS
from wingpos.messaging import format_price


class PaymentModal(ModalScreen[str | None]):
    """Prompt for the payment method before completing a sale."""

    CSS = """
    PaymentModal {
        align: center middle;
        background: $background 60%;
    }

    #payment-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #payment-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #payment-methods {
        color: white;
        margin-bottom: 1;
    }

    #payment-help {
        color: #dddddd;
    }
    """

    def __init__(self, total: Decimal, order_label: str) -> None:
        super().__init__()
        self.total = total
        self.order_label = order_label
        self.cursor_index = 0

    def compose(self) -> ComposeResult:
        with Container(id="payment-dialog"):
            yield Static(f"Charge {self.order_label}: {format_price(self.total)}", id="payment-title")
            yield Static(id="payment-methods")
            yield Static("1-3 or J/K pick, Enter confirm, Esc/q/Ctrl+C cancel.", id="payment-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "q", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(PAYMENT_METHODS[self.cursor_index])
            event.stop()
            return

        if event.key in {"j", "down"}:
            self.cursor_index = (self.cursor_index + 1) % len(PAYMENT_METHODS)
        elif event.key in {"k", "up"}:
            self.cursor_index = (self.cursor_index - 1) % len(PAYMENT_METHODS)
        elif event.is_printable and event.character and event.character.isdigit():
            picked = int(event.character) - 1
            if 0 <= picked < len(PAYMENT_METHODS):
                self.cursor_index = picked
        else:
            return
        self._refresh_content()
        event.stop()

    def _refresh_content(self) -> None:
        content = Text()
        for idx, method in enumerate(PAYMENT_METHODS):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(f"{pointer}{idx + 1}. {method}", style="bold white" if idx == self.cursor_index else "white")
        self.query_one("#payment-methods", Static).update(content)
