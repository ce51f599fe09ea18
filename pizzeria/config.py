"""Runtime configuration defaults for persistence, logging, printing and the API."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("PIZZERIA_DB_PATH", "data/pizzeria.db")
RECEIPT_LOG_PATH = os.getenv("PIZZERIA_RECEIPT_LOG", "data/receipts.txt")
SUMMARY_PATH = os.getenv("PIZZERIA_SUMMARY_PATH", "data/summary.txt")

# The console app owns the terminal, so its logs go to a file.
LOG_FILE = os.getenv("PIZZERIA_LOG_FILE", "logs/pizzeria.log")

API_HOST = os.getenv("PIZZERIA_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("PIZZERIA_API_PORT", "3000"))

PRINT_RECEIPTS = _env_flag("PIZZERIA_PRINT_RECEIPTS")
PRINTER_USB_VENDOR_ID = int(os.getenv("PIZZERIA_PRINTER_VENDOR_ID", "0x28E9"), 16)
PRINTER_USB_PRODUCT_ID = int(os.getenv("PIZZERIA_PRINTER_PRODUCT_ID", "0x0289"), 16)
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 22
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNSMono.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70
