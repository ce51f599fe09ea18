"""Customer experience ratings collected after checkout."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal

from pizzeria.constant import UNIDENTIFIED_CUSTOMER
from pizzeria.log import get_logger
from pizzeria.models import Rating
from pizzeria.parsing import parse_rating
from pizzeria.persistence import execute, fetch_all

logger = get_logger(__name__)


def record_rating(conn: sqlite3.Connection, customer_name: str | None, score: int | str) -> Rating:
    """Store a 1-5 star rating; anonymous ratings are filed under the unidentified-customer label."""
    rating = Rating(
        customer_name=(customer_name or "").strip() or UNIDENTIFIED_CUSTOMER,
        score=parse_rating(score),
        rated_at=datetime.now(timezone.utc).isoformat(),
    )
    execute(
        conn,
        "INSERT INTO avaliacoes (cliente_nome, nota, data_hora) VALUES (?, ?, ?)",
        (rating.customer_name, rating.score, rating.rated_at),
    )
    logger.info("Rating recorded", customer_name=rating.customer_name, score=rating.score)
    return rating


def list_ratings(conn: sqlite3.Connection) -> list[Rating]:
    rows = fetch_all(conn, "SELECT cliente_nome, nota, data_hora FROM avaliacoes ORDER BY data_hora, id")
    return [Rating(customer_name=row["cliente_nome"], score=int(row["nota"]), rated_at=row["data_hora"]) for row in rows]


def average_rating(ratings: list[Rating]) -> Decimal | None:
    if not ratings:
        return None
    return (Decimal(sum(r.score for r in ratings)) / len(ratings)).quantize(Decimal("0.01"))
