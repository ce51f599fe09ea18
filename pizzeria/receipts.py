"""Receipt rendering and the append-only receipt log."""

from __future__ import annotations

from pathlib import Path

from pizzeria import config
from pizzeria.constant import CURRENCY_SYMBOL, PAYMENT_METHOD_LABELS, TIMESTAMP_DISPLAY_FORMAT, UNIDENTIFIED_CUSTOMER
from pizzeria.errors import InvalidInputError, PersistenceError
from pizzeria.log import get_logger
from pizzeria.models import Order, OrderStatus

logger = get_logger(__name__)

RECEIPT_TITLE = "===== ORDER RECEIPT ====="
RECEIPT_RULE = "=" * 32
RECEIPT_FOOTER = "Thank you for your order!"


def _money(amount: object) -> str:
    return f"{CURRENCY_SYMBOL} {amount:.2f}"


def receipt_lines(order: Order) -> list[str]:
    """Receipt content as individual lines, shared by the text log and the printer."""
    lines = [
        RECEIPT_TITLE,
        f"Order ID: {order.id}",
        f"Customer: {order.customer_name or UNIDENTIFIED_CUSTOMER}",
    ]
    if order.delivery_address:
        lines.append(f"Delivery address: {order.delivery_address}")
    lines.append(f"Date: {order.created_at.astimezone():{TIMESTAMP_DISPLAY_FORMAT}}")
    lines.extend(["", "Items:"])

    for idx, line in enumerate(order.lines, start=1):
        text = f"{idx}) {line.name} - x{line.quantity} - {_money(line.subtotal)}"
        if line.note:
            text += f" ({line.note})"
        lines.append(text)

    lines.extend(
        [
            "",
            f"Total: {_money(order.total)}",
            f"Payment method: {PAYMENT_METHOD_LABELS.get(order.payment_method.value, order.payment_method.value)}",
        ]
    )
    change = order.change_due
    if change is not None:
        lines.append(f"Cash tendered: {_money(order.cash_tendered)}")
        lines.append(f"Change: {_money(change)}")

    lines.extend(["", RECEIPT_RULE, RECEIPT_FOOTER])
    return lines


def render_receipt(order: Order) -> str:
    return "\n" + "\n".join(receipt_lines(order)) + "\n"


def emit_receipt(order: Order, log_path: str | Path | None = None) -> str:
    """Render the receipt and append it to the receipt log; returns the rendered text."""
    if order.status is not OrderStatus.PERSISTED:
        raise InvalidInputError(f"Order {order.id} is not recorded yet")
    text = render_receipt(order)
    target = Path(log_path if log_path is not None else config.RECEIPT_LOG_PATH)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise PersistenceError(f"Cannot append receipt to {target}: {exc}") from exc
    logger.info("Receipt emitted", order_id=order.id, path=str(target))
    return text
