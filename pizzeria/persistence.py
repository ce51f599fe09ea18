"""SQLite storage: connections, schema bootstrap and error translation."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from pizzeria import config
from pizzeria.errors import PersistenceError

SCHEMA = """
CREATE TABLE IF NOT EXISTS clientes (
    id TEXT PRIMARY KEY,
    nome TEXT NOT NULL,
    telefone TEXT NOT NULL,
    email TEXT,
    endereco TEXT
);

CREATE TABLE IF NOT EXISTS produtos (
    id TEXT PRIMARY KEY,
    categoria TEXT NOT NULL,
    nome TEXT NOT NULL,
    descricao TEXT,
    preco TEXT NOT NULL,
    meta TEXT
);

CREATE TABLE IF NOT EXISTS pedidos (
    id TEXT PRIMARY KEY,
    cliente_id TEXT,
    cliente_nome TEXT,
    total TEXT NOT NULL,
    forma_pagamento TEXT NOT NULL,
    troco_para TEXT,
    data_iso TEXT NOT NULL,
    endereco_entrega TEXT
);

CREATE TABLE IF NOT EXISTS itens_pedido (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    pedido_id TEXT NOT NULL,
    produto_id TEXT,
    nome TEXT NOT NULL,
    quantidade INTEGER NOT NULL CHECK (quantidade > 0),
    preco_unit TEXT NOT NULL,
    observacao TEXT,
    FOREIGN KEY(pedido_id) REFERENCES pedidos(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS avaliacoes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    cliente_nome TEXT NOT NULL,
    nota INTEGER NOT NULL CHECK (nota BETWEEN 1 AND 5),
    data_hora TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_itens_pedido_pedido_id
    ON itens_pedido(pedido_id);

CREATE INDEX IF NOT EXISTS idx_pedidos_data_iso
    ON pedidos(data_iso);
"""


def connect(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Open a connection with name-addressable rows and foreign keys enforced.

    ``":memory:"`` is passed through untouched; file paths get their parent
    directory created.
    """
    target = str(db_path if db_path is not None else config.DB_PATH)
    if target != ":memory:":
        Path(target).parent.mkdir(parents=True, exist_ok=True)
    try:
        conn = sqlite3.connect(target, check_same_thread=False)
    except sqlite3.Error as exc:
        raise PersistenceError(f"Cannot open database {target}: {exc}") from exc
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema(conn: sqlite3.Connection) -> None:
    """Create persistence schema if it does not already exist."""
    try:
        with conn:
            conn.executescript(SCHEMA)
            order_columns = {row[1] for row in conn.execute("PRAGMA table_info(pedidos)")}
            if "endereco_entrega" not in order_columns:
                conn.execute("ALTER TABLE pedidos ADD COLUMN endereco_entrega TEXT")
    except sqlite3.Error as exc:
        raise PersistenceError(f"Schema bootstrap failed: {exc}") from exc


def fetch_all(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
    try:
        return conn.execute(sql, params).fetchall()
    except sqlite3.Error as exc:
        raise PersistenceError(str(exc)) from exc


def fetch_one(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> sqlite3.Row | None:
    try:
        return conn.execute(sql, params).fetchone()
    except sqlite3.Error as exc:
        raise PersistenceError(str(exc)) from exc


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Commit every statement issued inside the block, or none of them.

    Any exception rolls the block back; storage errors are re-raised as
    ``PersistenceError`` and everything else propagates unchanged.
    """
    try:
        with conn:
            yield conn
    except sqlite3.Error as exc:
        raise PersistenceError(str(exc)) from exc


def execute(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> int:
    """Run one write statement in its own transaction and return the affected row count."""
    with transaction(conn):
        cur = conn.execute(sql, params)
    return cur.rowcount
