"""Tests for receipt image rendering and the print sequence, without a device."""

import escpos.printer
import pytest
from PIL import ImageFont

from pizzeria import printer
from pizzeria.config import PRINTER_WIDTH_PX
from pizzeria.receipts import RECEIPT_RULE, RECEIPT_TITLE


@pytest.fixture
def font():
    return ImageFont.load_default()


class FakeUsb:
    instances: list["FakeUsb"] = []

    def __init__(self, vendor_id, product_id):
        self.ids = (vendor_id, product_id)
        self.images = []
        self.cut_count = 0
        FakeUsb.instances.append(self)

    def image(self, img):
        self.images.append(img)

    def cut(self):
        self.cut_count += 1


class TestRendering:
    def test_every_line_is_full_printer_width(self, font):
        images = printer.render_receipt_images([RECEIPT_TITLE, "Total: R$ 90.00", "", RECEIPT_RULE], font)

        assert len(images) == 4
        assert all(img.width == PRINTER_WIDTH_PX for img in images)

    def test_long_text_is_trimmed_with_ellipsis(self, font):
        fitted = printer.fit_text_to_px("x" * 500, font, 100)
        assert fitted.endswith("...")
        assert len(fitted) < 500

    def test_short_text_is_unchanged(self, font):
        assert printer.fit_text_to_px("Guarana", font, 300) == "Guarana"

    def test_font_override_from_environment(self, monkeypatch, tmp_path):
        font_file = tmp_path / "mono.ttf"
        font_file.write_bytes(b"")
        monkeypatch.setenv("PIZZERIA_PRINTER_FONT_PATH", str(font_file))

        assert printer.resolve_printer_font_path() == str(font_file)


class TestPrintReceipt:
    def test_prints_every_line_then_cuts(self, monkeypatch, font, order_factory):
        FakeUsb.instances.clear()
        monkeypatch.setattr(escpos.printer, "Usb", FakeUsb)
        monkeypatch.setattr(ImageFont, "truetype", lambda path, size: font)
        monkeypatch.setattr(printer, "resolve_printer_font_path", lambda: "unused.ttf")
        monkeypatch.setattr(printer, "sleep", lambda seconds: None)

        printer.print_receipt(order_factory(("Pizza Calabresa", 2, "45.00")))

        device = FakeUsb.instances[-1]
        assert device.cut_count == 1
        # The separator is sent in stripes, so there are more images than lines.
        assert len(device.images) > 10
