"""Customer details modal for delivery and to-go orders."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from wingpos.models import DeliveryInfo, ToGoInfo


class DestinationModal(ModalScreen[DeliveryInfo | ToGoInfo | None]):
    """Collect name, phone and (for delivery) address."""

    CSS = """
    DestinationModal {
        align: center middle;
        background: $background 60%;
    }

    #destination-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #destination-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #destination-fields {
        color: white;
        margin-bottom: 1;
    }

    #destination-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #destination-help {
        color: #dddddd;
    }
    """

    def __init__(self, order_type: str) -> None:
        super().__init__()
        self.order_type = order_type
        self.fields = ["name", "phone", "address"] if order_type == "delivery" else ["name", "phone"]
        self.values = {field: "" for field in self.fields}
        self.field_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        title = "Delivery details" if self.order_type == "delivery" else "To-go details"
        with Container(id="destination-dialog"):
            yield Static(title, id="destination-title")
            yield Static(id="destination-fields")
            yield Static(id="destination-error")
            yield Static("Tab/↓ next field, ↑ previous, Enter confirm, Esc cancel.", id="destination-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        field = self.fields[self.field_index]
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
            return
        if event.key == "enter":
            self._confirm()
            event.stop()
            return
        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self.fields)
        elif event.key == "up":
            self.field_index = (self.field_index - 1) % len(self.fields)
        elif event.key == "backspace":
            self.values[field] = self.values[field][:-1]
        elif event.is_printable and event.character:
            self.values[field] += event.character
            self.error = ""
        else:
            return
        self._refresh_content()
        event.stop()

    def _confirm(self) -> None:
        missing = [field for field in self.fields if field != "phone" or self.order_type == "delivery"]
        missing = [field for field in missing if not self.values[field].strip()]
        if missing:
            self.error = f"Required: {', '.join(missing)}"
            self._refresh_content()
            return
        if self.order_type == "delivery":
            self.dismiss(DeliveryInfo(**{field: value.strip() for field, value in self.values.items()}))
        else:
            self.dismiss(ToGoInfo(name=self.values["name"].strip(), phone=self.values["phone"].strip()))

    def _refresh_content(self) -> None:
        lines = []
        for idx, field in enumerate(self.fields):
            pointer = "➤ " if idx == self.field_index else "  "
            cursor = "|" if idx == self.field_index else ""
            lines.append(f"{pointer}{field.capitalize()}: {self.values[field]}{cursor}")
        self.query_one("#destination-fields", Static).update("\n".join(lines))
        self.query_one("#destination-error", Static).update(self.error)
