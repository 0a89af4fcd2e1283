"""Kitchen ticket printing on a USB ESC/POS thermal printer."""

from __future__ import annotations

import os
from pathlib import Path
from time import sleep

from wingpos.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
    RESTAURANT_NAME,
)
from wingpos.models import Order, OrderItem
from wingpos.orders import destination_label, short_id
from wingpos.sales import local_time

SEPARATOR = "__SEP__"
DETAIL_INDENT = "    "

# Separator tuning values.
_SECTION_SEPARATOR_HEIGHT_PX = 20
_SECTION_SEPARATOR_THICKNESS_PX = 5
_SECTION_SEPARATOR_STRIPE_HEIGHT_PX = 2
_SECTION_SEPARATOR_PAUSE_SECONDS = 0.1
# Extra vertical headroom for full-size lines to avoid descender clipping on thermal output.
_MAIN_LINE_EXTRA_PX = 30
_HEADER_LINE_COUNT = 4
_FONT_OVERRIDE_ENV = "WINGPOS_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def item_detail_lines(line: OrderItem) -> list[str]:
    """Option lines printed under an item, in kitchen reading order."""
    details: list[str] = []
    if line.choice:
        details.append(f"- Choice: {line.choice}")
    if line.wing_sauces:
        details.append(f"- Wing sauces: {', '.join(sauce.name for sauce in line.wing_sauces)}")
    if line.fry_sauces:
        details.append(f"- Fry sauces: {', '.join(sauce.name for sauce in line.fry_sauces)}")
    if line.flavors:
        details.append(f"- Flavors: {', '.join(line.flavors)}")
    if line.notes:
        details.append(f"** NOTE: {line.notes.upper()} **")
    return details


def kitchen_ticket_lines(order: Order, table_name: str | None = None) -> list[str]:
    """Text of a kitchen ticket; ``SEPARATOR`` marks a printed rule."""
    lines = [
        RESTAURANT_NAME.upper(),
        "Kitchen Ticket",
        f"Order {short_id(order.id).upper()}",
        local_time(order.created_at).strftime("%Y-%m-%d %H:%M"),
        SEPARATOR,
        destination_label(order, table_name),
        SEPARATOR,
    ]
    for line in order.items:
        lines.append(f"{line.quantity}x {line.name}")
        lines.extend(f"{DETAIL_INDENT}{detail}" for detail in item_detail_lines(line))
    return lines


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. WINGPOS_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable and a font is available."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, max(10, PRINTER_FONT_SIZE // 2))
    except (ImportError, OSError, RuntimeError) as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(probe)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_line(text: str, font: object, extra_px: int = _MAIN_LINE_EXTRA_PX) -> object:
    from PIL import Image, ImageDraw

    max_width = PRINTER_WIDTH_PX - (PRINTER_LEFT_INDENT_PX * 2)
    text = _fit_text_to_px(text, font, max_width)

    probe = Image.new("1", (1, 1), color=1)
    bbox = ImageDraw.Draw(probe).textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]
    canvas_height = max(12, text_height + extra_px)

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    # Offset by bbox top so descenders (g, y, p, etc.) are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), text, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _render_section_separator() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _SECTION_SEPARATOR_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = max(0, (_SECTION_SEPARATOR_HEIGHT_PX - _SECTION_SEPARATOR_THICKNESS_PX) // 2)
    bottom = min(_SECTION_SEPARATOR_HEIGHT_PX - 1, top + _SECTION_SEPARATOR_THICKNESS_PX - 1)
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, bottom), fill=0)
    return img


def _print_section_separator(printer: object) -> None:
    """Print the separator in short stripes with tiny pauses so the rule stays crisp."""
    separator = _render_section_separator()
    for top in range(0, separator.height, _SECTION_SEPARATOR_STRIPE_HEIGHT_PX):
        bottom = min(separator.height, top + _SECTION_SEPARATOR_STRIPE_HEIGHT_PX)
        stripe = separator.crop((0, top, PRINTER_WIDTH_PX, bottom))
        printer.image(stripe)
        if bottom < separator.height:
            sleep(_SECTION_SEPARATOR_PAUSE_SECONDS)


def print_kitchen_ticket(order: Order, table_name: str | None = None) -> None:
    """Print the kitchen ticket for ``order`` and cut the paper."""
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except ImportError as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font_path = resolve_printer_font_path()
    font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    header_font = ImageFont.truetype(font_path, max(20, PRINTER_FONT_SIZE - 14))
    detail_font = ImageFont.truetype(font_path, max(14, PRINTER_FONT_SIZE - 10))

    for index, text in enumerate(kitchen_ticket_lines(order, table_name)):
        if text == SEPARATOR:
            _print_section_separator(printer)
        elif index < _HEADER_LINE_COUNT:
            printer.image(_render_line(text, header_font, extra_px=8))
        elif text.startswith(DETAIL_INDENT):
            printer.image(_render_line(text, detail_font, extra_px=10))
        else:
            printer.image(_render_line(text, font))

    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
