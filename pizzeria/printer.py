"""ESC/POS receipt printing.

Each receipt line is rasterised with Pillow into a strip as wide as the
paper roll and sent to the USB printer as an image, so accents and the
currency symbol print the same on any device code page.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from time import sleep

from pizzeria import config
from pizzeria.models import Order
from pizzeria.receipts import RECEIPT_RULE, RECEIPT_TITLE, receipt_lines

FONT_ENV_VAR = "PIZZERIA_PRINTER_FONT_PATH"
SYSTEM_MONO_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/liberation/LiberationMono-Regular.ttf",
)

ELLIPSIS = "..."
GAP_PX = 12
LINE_PADDING_PX = 10
RULE_HEIGHT_PX = 14
RULE_INK_PX = 3
# Rules are sent a couple of dot rows at a time so the print head cools between passes.
RULE_PASS_PX = 2
RULE_PASS_DELAY = 0.1


def _font_candidates() -> Iterator[str]:
    override = os.environ.get(FONT_ENV_VAR, "").strip()
    if override:
        yield override
    yield config.PRINTER_FONT_PATH
    yield from SYSTEM_MONO_FONTS


def resolve_printer_font_path() -> str:
    """First existing font file among the env override, the configured path and common system fonts."""
    tried = []
    for candidate in _font_candidates():
        if candidate in tried:
            continue
        tried.append(candidate)
        if Path(candidate).is_file():
            return candidate
    raise RuntimeError(f"No printer font found (set {FONT_ENV_VAR}); tried {', '.join(tried)}")


def check_printer_dependencies() -> tuple[bool, str]:
    try:
        import escpos.printer  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), config.PRINTER_FONT_SIZE)
    except Exception as exc:
        return False, f"Printer unavailable: {exc}"
    return True, "Printer ready"


def _blank(height: int):
    from PIL import Image

    return Image.new("1", (config.PRINTER_WIDTH_PX, max(1, height)), color=1)


def _measure(text: str, font) -> tuple[int, int, int, int]:
    from PIL import ImageDraw

    return ImageDraw.Draw(_blank(1)).textbbox((0, 0), text, font=font)


def fit_text_to_px(text: str, font, max_width_px: int) -> str:
    """Shorten ``text`` with a trailing ellipsis until it fits ``max_width_px``."""
    if _measure(text, font)[2] <= max_width_px:
        return text
    for end in range(len(text) - 1, 0, -1):
        shortened = text[:end] + ELLIPSIS
        if _measure(shortened, font)[2] <= max_width_px:
            return shortened
    return ELLIPSIS


def _text_strip(text: str, font, centered: bool = False):
    from PIL import ImageDraw

    usable = config.PRINTER_WIDTH_PX - 2 * config.PRINTER_LEFT_INDENT_PX
    text = fit_text_to_px(text, font, usable)
    left, top, right, bottom = _measure(text, font)
    strip = _blank(max(GAP_PX, bottom - top + LINE_PADDING_PX))
    if centered:
        x = (config.PRINTER_WIDTH_PX - (right - left)) // 2 - left
    else:
        x = config.PRINTER_LEFT_INDENT_PX
    # Shift by the box top so glyph descenders stay on the strip.
    y = (strip.height - (bottom - top)) // 2 - top
    ImageDraw.Draw(strip).text((x, y), text, font=font, fill=0)
    return strip


def _rule_strip():
    from PIL import ImageDraw

    strip = _blank(RULE_HEIGHT_PX)
    top = (RULE_HEIGHT_PX - RULE_INK_PX) // 2
    ImageDraw.Draw(strip).rectangle((0, top, config.PRINTER_WIDTH_PX - 1, top + RULE_INK_PX - 1), fill=0)
    return strip


def render_receipt_images(lines: list[str], font) -> list:
    """Rasterise receipt lines: the title centred, rules as solid bars, blank lines as gaps."""
    images = []
    for line in lines:
        if line == RECEIPT_RULE:
            images.append(_rule_strip())
        elif line == RECEIPT_TITLE:
            images.append(_text_strip(line.strip("= ").upper(), font, centered=True))
        elif line:
            images.append(_text_strip(line, font))
        else:
            images.append(_blank(GAP_PX))
    return images


def _send_rule(device, strip) -> None:
    for top in range(0, strip.height, RULE_PASS_PX):
        if top:
            sleep(RULE_PASS_DELAY)
        device.image(strip.crop((0, top, config.PRINTER_WIDTH_PX, min(strip.height, top + RULE_PASS_PX))))


def print_receipt(order: Order) -> None:
    """Print ``order``'s receipt on the USB printer and cut the paper."""
    from escpos.printer import Usb
    from PIL import ImageFont

    device = Usb(config.PRINTER_USB_VENDOR_ID, config.PRINTER_USB_PRODUCT_ID)
    font = ImageFont.truetype(resolve_printer_font_path(), config.PRINTER_FONT_SIZE)

    lines = receipt_lines(order)
    for line, strip in zip(lines, render_receipt_images(lines, font)):
        if line == RECEIPT_RULE:
            _send_rule(device, strip)
        else:
            device.image(strip)

    device.image(_blank(config.PRINTER_TAIL_SPACER_PX))
    device.cut()
