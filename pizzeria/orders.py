"""Order workflow: cart -> pending order -> payment -> persisted order."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal

from pizzeria.cart import Cart
from pizzeria.catalog import get_customer
from pizzeria.errors import EmptyCartError, InvalidInputError, NotFoundError
from pizzeria.log import get_logger
from pizzeria.models import Order, OrderLine, OrderStatus, PaymentMethod, new_id
from pizzeria.parsing import parse_payment_method, parse_price
from pizzeria.persistence import fetch_all, fetch_one, transaction

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def finalize_order(
    conn: sqlite3.Connection,
    cart: Cart,
    customer_id: str | None = None,
    delivery_address: str | None = None,
) -> Order:
    """Snapshot the cart into a pending order.

    The cart itself is left untouched; it is cleared only once the order is
    recorded. An unknown ``customer_id`` yields an anonymous order.
    """
    if cart.is_empty:
        raise EmptyCartError("Cart is empty; add items before finalizing the order")

    snapshot = cart.view()
    lines = [
        OrderLine(
            product_id=line.product_id,
            name=line.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            note=line.note,
        )
        for line in snapshot.lines
    ]

    customer = None
    if customer_id:
        try:
            customer = get_customer(conn, customer_id)
        except NotFoundError:
            logger.info("Unknown customer on finalize, continuing anonymously", customer_id=customer_id)

    address = (delivery_address or "").strip() or None
    if address is None and customer is not None:
        address = customer.address

    order = Order(
        id=new_id("O-"),
        lines=lines,
        total=sum((line.subtotal for line in lines), Decimal("0.00")),
        created_at=_utc_now(),
        customer_id=customer.id if customer else None,
        customer_name=customer.name if customer else None,
        payment_method=PaymentMethod.CASH,
        delivery_address=address,
    )
    logger.info("Order finalized", order_id=order.id, total=str(order.total), lines=len(lines))
    return order


def choose_payment(
    order: Order,
    method: PaymentMethod | str,
    cash_tendered: Decimal | str | None = None,
) -> Order:
    """Set the final payment method; cash tendered is only taken for cash and must cover the total."""
    if order.status is not OrderStatus.PENDING_PAYMENT:
        raise InvalidInputError(f"Order {order.id} is already recorded")

    method = parse_payment_method(method)
    tendered = None
    if cash_tendered is not None and str(cash_tendered).strip():
        if method is not PaymentMethod.CASH:
            raise InvalidInputError("Cash tendered only applies to cash payments")
        tendered = parse_price(cash_tendered)
        if tendered < order.total:
            raise InvalidInputError(f"Cash tendered {tendered} is less than the order total {order.total}")

    order.payment_method = method
    order.cash_tendered = tendered
    return order


def record_order(conn: sqlite3.Connection, order: Order, cart: Cart) -> Order:
    """Persist the order header and every line in one transaction, then clear the cart.

    On any failure nothing is written and the cart is left as it was.
    """
    if order.status is not OrderStatus.PENDING_PAYMENT:
        raise InvalidInputError(f"Order {order.id} is already recorded")
    if not order.lines:
        raise EmptyCartError(f"Order {order.id} has no lines")

    with transaction(conn):
        conn.execute(
            """
            INSERT INTO pedidos (id, cliente_id, cliente_nome, total, forma_pagamento, troco_para, data_iso, endereco_entrega)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                order.id,
                order.customer_id,
                order.customer_name,
                str(order.total),
                order.payment_method.value,
                str(order.cash_tendered) if order.cash_tendered is not None else None,
                order.created_at.isoformat(),
                order.delivery_address,
            ),
        )
        conn.executemany(
            """
            INSERT INTO itens_pedido (pedido_id, produto_id, nome, quantidade, preco_unit, observacao)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (order.id, line.product_id, line.name, line.quantity, str(line.unit_price), line.note)
                for line in order.lines
            ],
        )

    order.status = OrderStatus.PERSISTED
    cart.clear()
    logger.info(
        "Order recorded",
        order_id=order.id,
        total=str(order.total),
        payment_method=order.payment_method.value,
    )
    return order


def checkout(
    conn: sqlite3.Connection,
    cart: Cart,
    method: PaymentMethod | str = PaymentMethod.CASH,
    customer_id: str | None = None,
    cash_tendered: Decimal | str | None = None,
    delivery_address: str | None = None,
) -> Order:
    """Finalize, pay and record in one call."""
    order = finalize_order(conn, cart, customer_id=customer_id, delivery_address=delivery_address)
    choose_payment(order, method, cash_tendered)
    return record_order(conn, order, cart)


def _line_from_row(row: sqlite3.Row) -> OrderLine:
    return OrderLine(
        product_id=row["produto_id"],
        name=row["nome"],
        quantity=int(row["quantidade"]),
        unit_price=Decimal(row["preco_unit"]),
        note=row["observacao"],
    )


def _order_from_row(row: sqlite3.Row, lines: list[OrderLine]) -> Order:
    return Order(
        id=row["id"],
        lines=lines,
        total=Decimal(row["total"]),
        created_at=datetime.fromisoformat(row["data_iso"]),
        customer_id=row["cliente_id"],
        customer_name=row["cliente_nome"],
        payment_method=PaymentMethod(row["forma_pagamento"]),
        cash_tendered=Decimal(row["troco_para"]) if row["troco_para"] is not None else None,
        delivery_address=row["endereco_entrega"],
        status=OrderStatus.PERSISTED,
    )


def order_lines(conn: sqlite3.Connection, order_id: str) -> list[OrderLine]:
    rows = fetch_all(conn, "SELECT * FROM itens_pedido WHERE pedido_id = ? ORDER BY id", (order_id,))
    return [_line_from_row(row) for row in rows]


def get_order(conn: sqlite3.Connection, order_id: str) -> Order:
    row = fetch_one(conn, "SELECT * FROM pedidos WHERE id = ?", (order_id,))
    if row is None:
        raise NotFoundError(f"Order {order_id} not found")
    return _order_from_row(row, order_lines(conn, order_id))


def list_orders(conn: sqlite3.Connection) -> list[Order]:
    """All persisted orders, oldest first, with their lines."""
    header_rows = fetch_all(conn, "SELECT * FROM pedidos ORDER BY data_iso, id")
    line_rows = fetch_all(conn, "SELECT * FROM itens_pedido ORDER BY id")

    lines_by_order: dict[str, list[OrderLine]] = {}
    for row in line_rows:
        lines_by_order.setdefault(row["pedido_id"], []).append(_line_from_row(row))

    return [_order_from_row(row, lines_by_order.get(row["id"], [])) for row in header_rows]
