"""Item options modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from wingpos.constant import GELATO_FLAVORS
from wingpos.data import FRY_SAUCES, WING_SAUCES, choices_for_submenu
from wingpos.errors import ValidationError
from wingpos.models import OrderItem
from wingpos.rendering import format_line_label

SaveOptions = Callable[..., OrderItem]


class OptionsModal(ModalScreen[OrderItem | None]):
    """Centered modal to pick the choice, sauces, flavors and notes for one draft line."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("s", "save", "Save"),
    ]

    CSS = """
    OptionsModal {
        align: center middle;
        background: $background 60%;
    }

    #options-dialog {
        width: 64;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #options-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #options-body {
        margin-bottom: 1;
        color: white;
    }

    #options-error {
        color: #ffb3b3;
    }

    #options-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _CHOICE_KIND = "choice"
    _WING_KIND = "wing"
    _FRY_KIND = "fry"
    _FLAVOR_KIND = "flavor"
    _NOTES_KIND = "notes"

    def __init__(self, line: OrderItem, on_save: SaveOptions) -> None:
        super().__init__()
        self.line = line
        self.on_save = on_save
        self.choice = line.choice
        self.wing_keys = [sauce.key for sauce in line.wing_sauces]
        self.fry_keys = [sauce.key for sauce in line.fry_sauces]
        self.flavors = list(line.flavors)
        self.notes = line.notes
        self.typing_notes = False
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="options-dialog"):
            yield Static("Item Options", id="options-title")
            yield Static(id="options-body")
            yield Static(id="options-error")
            yield Static(id="options-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if not self.typing_notes:
            return

        if event.key in {"escape", "enter"}:
            self.typing_notes = False
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            self.notes = self.notes[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.notes += event.character
            self._refresh_content()
        # Ignore all non-text keys while typing.
        event.stop()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        rows = self._rows()
        if not rows:
            return
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        rows = self._rows()
        if not rows:
            return
        row_kind, row_value = rows[self.cursor_index]
        self.error = ""

        if row_kind == self._CHOICE_KIND:
            self.choice = None if self.choice == row_value else row_value
        elif row_kind == self._WING_KIND:
            _toggle(self.wing_keys, row_value)
        elif row_kind == self._FRY_KIND:
            _toggle(self.fry_keys, row_value)
        elif row_kind == self._FLAVOR_KIND:
            _toggle(self.flavors, row_value)
        else:
            self.typing_notes = True
        self._refresh_content()

    def action_save(self) -> None:
        try:
            updated = self.on_save(
                wing_sauces=self.wing_keys,
                fry_sauces=self.fry_keys,
                choice=self.choice,
                flavors=self.flavors,
                notes=self.notes,
            )
        except ValidationError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(updated)

    def _rows(self) -> list[tuple[str, str]]:
        item = self.line.menu_item
        rows: list[tuple[str, str]] = []
        rows.extend((self._CHOICE_KIND, choice) for choice in choices_for_submenu(item.submenu_key))
        if item.has_wings:
            rows.extend((self._WING_KIND, key) for key in WING_SAUCES)
        if item.has_fries:
            rows.extend((self._FRY_KIND, key) for key in FRY_SAUCES)
        if item.max_choices:
            rows.extend((self._FLAVOR_KIND, flavor) for flavor in GELATO_FLAVORS)
        rows.append((self._NOTES_KIND, "Notes"))
        return rows

    def _is_checked(self, row_kind: str, row_value: str) -> bool:
        if row_kind == self._CHOICE_KIND:
            return self.choice == row_value
        if row_kind == self._WING_KIND:
            return row_value in self.wing_keys
        if row_kind == self._FRY_KIND:
            return row_value in self.fry_keys
        return row_value in self.flavors

    def _row_label(self, row_kind: str, row_value: str) -> str:
        if row_kind == self._WING_KIND:
            return f"Wing sauce: {WING_SAUCES[row_value].name}"
        if row_kind == self._FRY_KIND:
            return f"Fry sauce: {FRY_SAUCES[row_value].name}"
        if row_kind == self._FLAVOR_KIND:
            slot = self.flavors.index(row_value) + 1 if row_value in self.flavors else None
            suffix = f" (#{slot})" if slot else ""
            return f"Flavor: {row_value}{suffix}"
        return f"Option: {row_value}"

    def _refresh_content(self) -> None:
        body = self.query_one("#options-body", Static)
        error_widget = self.query_one("#options-error", Static)
        help_text = self.query_one("#options-help", Static)

        content = Text(style="white")
        content.append_text(format_line_label(self.line))
        rows = self._rows()
        if self.cursor_index >= len(rows):
            self.cursor_index = max(0, len(rows) - 1)

        content.append("\n\n")
        for idx, (row_kind, row_value) in enumerate(rows):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            if row_kind == self._NOTES_KIND:
                cursor = "|" if self.typing_notes else ""
                content.append(f"{pointer}Notes: {self.notes}{cursor}", style="bold white" if self.typing_notes else "white")
                continue
            is_checked = self._is_checked(row_kind, row_value)
            checked = "[x]" if is_checked else "[ ]"
            content.append(
                f"{pointer}{checked} {self._row_label(row_kind, row_value)}",
                style="bold white" if is_checked else "white",
            )

        if self.typing_notes:
            help_text.update("Type notes, Enter/Esc done")
        else:
            help_text.update("J/K/↑/↓ move, Enter toggle, S save, Esc/q close")
        error_widget.update(self.error)
        body.update(content)


def _toggle(values: list[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)
