"""Checkout modal screen: customer, delivery address, payment method and cash tendered."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from pizzeria.data import PAYMENT_KEYS, payment_label, payment_method_for_key
from pizzeria.models import PaymentMethod
from pizzeria.rendering import format_money


@dataclass(frozen=True)
class CheckoutRequest:
    customer_key: str
    delivery_address: str
    payment_method: PaymentMethod
    cash_tendered: str


class CheckoutModal(ModalScreen[CheckoutRequest | None]):
    """Collect what the order workflow needs before the order is recorded."""

    CSS = """
    CheckoutModal {
        align: center middle;
        background: $background 60%;
    }

    #checkout-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #checkout-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #checkout-fields {
        color: white;
        margin-bottom: 1;
    }

    #checkout-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #checkout-help {
        color: #dddddd;
    }
    """

    FIELDS = ("customer", "address", "payment", "cash")
    _LABELS = {
        "customer": "Customer (ID or name, optional)",
        "address": "Delivery address (optional)",
        "payment": "Payment method",
        "cash": "Cash tendered (optional)",
    }

    def __init__(self, total: Decimal) -> None:
        super().__init__()
        self.total = total
        self.field_index = 0
        self.values = {"customer": "", "address": "", "cash": ""}
        self.payment_method = PaymentMethod.CASH
        self.error = ""

    @property
    def current_field(self) -> str:
        return self.FIELDS[self.field_index]

    def compose(self) -> ComposeResult:
        with Container(id="checkout-dialog"):
            yield Static(f"Checkout - total {format_money(self.total)}", id="checkout-title")
            yield Static(id="checkout-fields")
            yield Static(id="checkout-error")
            yield Static(
                "Tab/↑/↓ move. Payment: 1 Pix 2 Card 3 Cash 4 Meal voucher. Enter confirm. Esc cancel.",
                id="checkout-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        event.stop()

        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            return

        if event.key == "enter":
            self._confirm()
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self.FIELDS)
            self._refresh_content()
            return

        if event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self.FIELDS)
            self._refresh_content()
            return

        field = self.current_field
        if field == "payment":
            method = payment_method_for_key(event.character or "")
            if method is not None:
                self.payment_method = method
                if method is not PaymentMethod.CASH:
                    self.values["cash"] = ""
                self.error = ""
                self._refresh_content()
            return

        if event.key == "backspace":
            if self.values[field]:
                self.values[field] = self.values[field][:-1]
                self.error = ""
                self._refresh_content()
            return

        if not event.is_printable or not event.character:
            return
        if field == "cash":
            if not (event.character.isdigit() or event.character in {",", "."}):
                return
            if self.payment_method is not PaymentMethod.CASH:
                self.error = "Cash tendered only applies to cash payments."
                self._refresh_content()
                return
        self.values[field] += event.character
        self.error = ""
        self._refresh_content()

    def _confirm(self) -> None:
        self.dismiss(
            CheckoutRequest(
                customer_key=self.values["customer"].strip(),
                delivery_address=self.values["address"].strip(),
                payment_method=self.payment_method,
                cash_tendered=self.values["cash"].strip(),
            )
        )

    def _refresh_content(self) -> None:
        fields_widget = self.query_one("#checkout-fields", Static)
        error_widget = self.query_one("#checkout-error", Static)

        content = Text()
        for idx, field in enumerate(self.FIELDS):
            if idx > 0:
                content.append("\n")
            active = idx == self.field_index
            pointer = "➤ " if active else "  "
            if field == "payment":
                options = "  ".join(
                    f"[{key}] {payment_label(method)}" + (" *" if method is self.payment_method else "")
                    for key, method in PAYMENT_KEYS.items()
                )
                value = options
            else:
                value = self.values[field] + ("|" if active else "")
            content.append(f"{pointer}{self._LABELS[field]}: ", style="bold" if active else "")
            content.append(value)
        fields_widget.update(content)
        error_widget.update(self.error or "")
