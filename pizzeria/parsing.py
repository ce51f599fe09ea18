"""Parsing of operator-typed values into domain values."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from pizzeria.constant import DAY_DISPLAY_FORMAT, RATING_MAX, RATING_MIN
from pizzeria.errors import InvalidInputError
from pizzeria.models import CENTS, Category, PaymentMethod


def parse_price(raw: str | Decimal | int | float) -> Decimal:
    """Parse a non-negative money amount; accepts ``45,00`` as well as ``45.00``."""
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            raise InvalidInputError("Price is required")
        try:
            value = Decimal(text)
        except InvalidOperation as exc:
            raise InvalidInputError(f"Invalid price: {raw!r}") from exc
    if not value.is_finite():
        raise InvalidInputError(f"Invalid price: {raw!r}")
    if value < 0:
        raise InvalidInputError("Price must not be negative")
    return value.quantize(CENTS)


def parse_quantity(raw: str | int) -> int:
    """Parse a positive whole quantity."""
    try:
        quantity = int(str(raw).strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid quantity: {raw!r}") from exc
    if quantity < 1:
        raise InvalidInputError("Quantity must be at least 1")
    return quantity


def parse_rating(raw: str | int) -> int:
    try:
        score = int(str(raw).strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid rating: {raw!r}") from exc
    if not (RATING_MIN <= score <= RATING_MAX):
        raise InvalidInputError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
    return score


def parse_date(raw: str) -> date:
    """Parse a ``DD/MM/YYYY`` calendar date."""
    try:
        return datetime.strptime(raw.strip(), DAY_DISPLAY_FORMAT).date()
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date {raw!r}, expected DD/MM/YYYY") from exc


def _choice_text(raw: object, label: str) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInputError(f"{label} is required")
    return raw.strip().lower()


def parse_category(raw: str | Category) -> Category:
    if isinstance(raw, Category):
        return raw
    text = _choice_text(raw, "Category")
    for category in Category:
        if category.value.lower() == text:
            return category
    choices = ", ".join(category.value for category in Category)
    raise InvalidInputError(f"Unknown category {raw!r}, expected one of: {choices}")


def parse_payment_method(raw: str | PaymentMethod) -> PaymentMethod:
    if isinstance(raw, PaymentMethod):
        return raw
    text = _choice_text(raw, "Payment method")
    for method in PaymentMethod:
        if method.value.lower() == text:
            return method
    choices = ", ".join(method.value for method in PaymentMethod)
    raise InvalidInputError(f"Unknown payment method {raw!r}, expected one of: {choices}")
