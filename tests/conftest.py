import os
from datetime import datetime, timezone
from decimal import Decimal

import pytest

os.environ.setdefault("ENVIRONMENT", "test")

from pizzeria.catalog import list_products, seed_products  # noqa: E402
from pizzeria.models import Order, OrderLine, OrderStatus, PaymentMethod, Product  # noqa: E402
from pizzeria.persistence import bootstrap_schema, connect  # noqa: E402


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "pizzeria.db"


@pytest.fixture
def conn(db_path):
    connection = connect(db_path)
    bootstrap_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def seeded_conn(conn):
    seed_products(conn)
    return conn


@pytest.fixture
def products(seeded_conn) -> dict[str, Product]:
    """Seeded catalog keyed by product name."""
    return {product.name: product for product in list_products(seeded_conn)}


@pytest.fixture
def receipt_log(tmp_path):
    return tmp_path / "receipts.txt"


@pytest.fixture
def order_factory():
    return make_order


def make_order(
    *lines: tuple[str, int, str],
    customer_name: str | None = None,
    created_at: datetime | None = None,
    order_id: str = "O-TEST",
) -> Order:
    """Build a persisted-looking order from ``(name, quantity, unit_price)`` tuples."""
    order_lines = [
        OrderLine(product_id=None, name=name, quantity=quantity, unit_price=Decimal(price))
        for name, quantity, price in lines
    ]
    return Order(
        id=order_id,
        lines=order_lines,
        total=sum((line.subtotal for line in order_lines), Decimal("0.00")),
        created_at=created_at or datetime(2024, 5, 10, 15, 0, tzinfo=timezone.utc),
        customer_name=customer_name,
        payment_method=PaymentMethod.PIX,
        status=OrderStatus.PERSISTED,
    )
