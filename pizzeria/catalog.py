"""Catalog store: customers and products."""

from __future__ import annotations

import sqlite3
from decimal import Decimal
from typing import Any, Iterable

from pizzeria.constant import SEED_PRODUCTS
from pizzeria.errors import InvalidInputError, NotFoundError
from pizzeria.log import get_logger
from pizzeria.models import Category, Customer, Product, new_id
from pizzeria.parsing import parse_category, parse_price
from pizzeria.persistence import execute, fetch_all, fetch_one, transaction

logger = get_logger(__name__)

# Model attribute -> column name.
_CUSTOMER_COLUMNS = {
    "name": "nome",
    "phone": "telefone",
    "email": "email",
    "address": "endereco",
}

_PRODUCT_COLUMNS = {
    "category": "categoria",
    "name": "nome",
    "description": "descricao",
    "price": "preco",
    "meta": "meta",
}
_REQUIRED_PRODUCT_FIELDS = frozenset({"category", "name", "price"})


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _customer_from_row(row: sqlite3.Row) -> Customer:
    return Customer(
        id=row["id"],
        name=row["nome"],
        phone=row["telefone"],
        email=row["email"],
        address=row["endereco"],
    )


def _product_from_row(row: sqlite3.Row) -> Product:
    return Product(
        id=row["id"],
        category=Category(row["categoria"]),
        name=row["nome"],
        description=row["descricao"],
        price=Decimal(row["preco"]),
        meta=row["meta"],
    )


def _patch_statement(table: str, columns: dict[str, str], record_id: str, updates: dict[str, Any]) -> tuple[str, list[Any]]:
    unknown = set(updates) - set(columns)
    if unknown:
        raise InvalidInputError(f"Unknown field(s): {', '.join(sorted(unknown))}")
    assignments = [f"{columns[name]} = ?" for name in updates]
    values = list(updates.values())
    values.append(record_id)
    return f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?", values


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
def list_customers(conn: sqlite3.Connection) -> list[Customer]:
    rows = fetch_all(conn, "SELECT * FROM clientes ORDER BY nome")
    return [_customer_from_row(row) for row in rows]


def register_customer(
    conn: sqlite3.Connection,
    name: str,
    phone: str,
    email: str | None = None,
    address: str | None = None,
) -> Customer:
    """Register a customer, or return the one already registered with this phone or email."""
    name = (name or "").strip()
    phone = (phone or "").strip()
    email = _clean(email)
    address = _clean(address)
    if not name:
        raise InvalidInputError("Customer name is required")
    if not phone:
        raise InvalidInputError("Customer phone is required")

    row = fetch_one(
        conn,
        "SELECT * FROM clientes WHERE telefone = ? OR (? IS NOT NULL AND email = ?) LIMIT 1",
        (phone, email, email),
    )
    if row is not None:
        existing = _customer_from_row(row)
        logger.info("Customer already registered", customer_id=existing.id)
        return existing

    customer = Customer(id=new_id("C-"), name=name, phone=phone, email=email, address=address)
    execute(
        conn,
        "INSERT INTO clientes (id, nome, telefone, email, endereco) VALUES (?, ?, ?, ?, ?)",
        (customer.id, customer.name, customer.phone, customer.email, customer.address),
    )
    logger.info("Customer registered", customer_id=customer.id)
    return customer


def get_customer(conn: sqlite3.Connection, customer_id: str) -> Customer:
    row = fetch_one(conn, "SELECT * FROM clientes WHERE id = ?", (customer_id,))
    if row is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return _customer_from_row(row)


def _like_fragment(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def find_customer(conn: sqlite3.Connection, key: str) -> Customer | None:
    """Look a customer up by exact id, falling back to a case-insensitive name fragment."""
    key = (key or "").strip()
    if not key:
        return None
    row = fetch_one(
        conn,
        "SELECT * FROM clientes WHERE id = ? OR LOWER(nome) LIKE LOWER(?) ESCAPE '\\' "
        "ORDER BY id = ? DESC, nome LIMIT 1",
        (key, _like_fragment(key), key),
    )
    if row is None:
        return None
    return _customer_from_row(row)


def update_customer(conn: sqlite3.Connection, customer_id: str, **updates: str | None) -> Customer:
    """Patch the given fields (``name``, ``phone``, ``email``, ``address``) of one customer."""
    if "name" in updates and not _clean(updates["name"]):
        raise InvalidInputError("Customer name cannot be blank")
    if "phone" in updates and not _clean(updates["phone"]):
        raise InvalidInputError("Customer phone cannot be blank")
    cleaned = {field: _clean(value) for field, value in updates.items()}
    if not cleaned:
        return get_customer(conn, customer_id)

    sql, values = _patch_statement("clientes", _CUSTOMER_COLUMNS, customer_id, cleaned)
    if execute(conn, sql, values) == 0:
        raise NotFoundError(f"Customer {customer_id} not found")
    logger.info("Customer updated", customer_id=customer_id, fields=sorted(cleaned))
    return get_customer(conn, customer_id)


def delete_customer(conn: sqlite3.Connection, customer_id: str) -> None:
    """Delete one customer; orders keep their customer name snapshot."""
    if execute(conn, "DELETE FROM clientes WHERE id = ?", (customer_id,)) == 0:
        raise NotFoundError(f"Customer {customer_id} not found")
    logger.info("Customer deleted", customer_id=customer_id)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
def list_products(conn: sqlite3.Connection, category: Category | None = None) -> list[Product]:
    if category is None:
        rows = fetch_all(conn, "SELECT * FROM produtos ORDER BY nome")
    else:
        rows = fetch_all(conn, "SELECT * FROM produtos WHERE categoria = ? ORDER BY nome", (category.value,))
    return [_product_from_row(row) for row in rows]


def register_product(
    conn: sqlite3.Connection,
    category: Category | str,
    name: str,
    price: Decimal | str | int,
    description: str | None = None,
    meta: str | None = None,
) -> Product:
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Product name is required")
    product = Product(
        id=new_id("P-"),
        category=parse_category(category),
        name=name,
        price=parse_price(price),
        description=_clean(description),
        meta=_clean(meta),
    )
    execute(
        conn,
        "INSERT INTO produtos (id, categoria, nome, descricao, preco, meta) VALUES (?, ?, ?, ?, ?, ?)",
        (product.id, product.category.value, product.name, product.description, str(product.price), product.meta),
    )
    logger.info("Product registered", product_id=product.id, name=product.name, price=str(product.price))
    return product


def get_product(conn: sqlite3.Connection, product_id: str) -> Product:
    row = fetch_one(conn, "SELECT * FROM produtos WHERE id = ?", (product_id,))
    if row is None:
        raise NotFoundError(f"Product {product_id} not found")
    return _product_from_row(row)


def search_products_by_name(conn: sqlite3.Connection, fragment: str, category: Category | None = None) -> list[Product]:
    """Case-insensitive substring search over product names."""
    needle = (fragment or "").strip().lower()
    return [
        product
        for product in list_products(conn, category)
        if needle in product.name.lower()
    ]


def update_product(conn: sqlite3.Connection, product_id: str, **updates: Any) -> Product:
    """Patch the given fields of one product; past orders keep their snapshots."""
    cleaned: dict[str, Any] = {}
    for field, value in updates.items():
        if value is None and field in _REQUIRED_PRODUCT_FIELDS:
            raise InvalidInputError(f"Product {field} cannot be cleared")
        if field == "category":
            cleaned[field] = parse_category(value).value
        elif field == "price":
            cleaned[field] = str(parse_price(value))
        elif field == "name":
            if not _clean(value):
                raise InvalidInputError("Product name cannot be blank")
            cleaned[field] = _clean(value)
        else:
            cleaned[field] = _clean(value)
    if not cleaned:
        return get_product(conn, product_id)

    sql, values = _patch_statement("produtos", _PRODUCT_COLUMNS, product_id, cleaned)
    if execute(conn, sql, values) == 0:
        raise NotFoundError(f"Product {product_id} not found")
    logger.info("Product updated", product_id=product_id, fields=sorted(cleaned))
    return get_product(conn, product_id)


def delete_product(conn: sqlite3.Connection, product_id: str) -> None:
    """Delete one product; carts and orders referencing it keep their snapshots."""
    if execute(conn, "DELETE FROM produtos WHERE id = ?", (product_id,)) == 0:
        raise NotFoundError(f"Product {product_id} not found")
    logger.info("Product deleted", product_id=product_id)


def seed_products(conn: sqlite3.Connection, entries: Iterable[dict[str, str | None]] = SEED_PRODUCTS) -> int:
    """Load the static menu into an empty catalog; returns how many products were added."""
    if fetch_one(conn, "SELECT 1 FROM produtos LIMIT 1") is not None:
        return 0

    products = [
        Product(
            id=new_id("P-"),
            category=parse_category(str(entry["category"])),
            name=str(entry["name"]),
            price=parse_price(str(entry["price"])),
            description=entry.get("description"),
            meta=entry.get("meta"),
        )
        for entry in entries
    ]
    with transaction(conn):
        conn.executemany(
            "INSERT INTO produtos (id, categoria, nome, descricao, preco, meta) VALUES (?, ?, ?, ?, ?, ?)",
            [
                (p.id, p.category.value, p.name, p.description, str(p.price), p.meta)
                for p in products
            ],
        )
    logger.info("Catalog seeded", products=len(products))
    return len(products)
