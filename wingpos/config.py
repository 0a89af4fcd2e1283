"""Runtime configuration defaults for persistence, printing and advisory calls."""

from __future__ import annotations

import os
from zoneinfo import ZoneInfo

DB_PATH = os.environ.get("WINGPOS_DB_PATH", "data/wingpos.db")
LOG_PATH = os.environ.get("WINGPOS_LOG_PATH", "/tmp/wingpos-debug.log")

RESTAURANT_NAME = "Loco Alitas"
CURRENCY = "COP"
# Reports, tickets and "today" use the restaurant's wall clock; stored timestamps stay UTC.
RESTAURANT_TIMEZONE = ZoneInfo(os.environ.get("WINGPOS_TIMEZONE", "America/Bogota"))

# Numbers with at most this many digits get the default country code prepended.
WHATSAPP_LOCAL_NUMBER_DIGITS = 10
WHATSAPP_DEFAULT_COUNTRY_CODE = os.environ.get("WINGPOS_WHATSAPP_COUNTRY_CODE", "57")

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_TEXT_MODEL = "gemini-2.5-flash"
GEMINI_IMAGE_MODEL = "gemini-2.5-flash-image"
GEMINI_API_KEY_ENV = "WINGPOS_GEMINI_API_KEY"
GEMINI_TIMEOUT_SECONDS = 20.0

# Thermal kitchen printer (58mm ESC/POS over USB).
PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 34
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70

TOAST_HISTORY_SIZE = 20
# Completed and cancelled orders the engine remembers for lookups; sales keep the full record.
CLOSED_ORDER_HISTORY = 500
