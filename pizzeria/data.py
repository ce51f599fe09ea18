"""Typed views over the static configuration in ``pizzeria.constant``."""

from __future__ import annotations

from pizzeria.constant import (
    CATEGORY_BY_KEY,
    NOTE_PRESETS_BY_CATEGORY,
    PAYMENT_METHOD_BY_KEY,
    PAYMENT_METHOD_LABELS,
)
from pizzeria.models import Category, PaymentMethod

CATEGORY_KEYS: dict[str, Category] = {key: Category(value) for key, value in CATEGORY_BY_KEY.items()}

PAYMENT_KEYS: dict[str, PaymentMethod] = {key: PaymentMethod(value) for key, value in PAYMENT_METHOD_BY_KEY.items()}


def category_for_key(key: str) -> Category | None:
    return CATEGORY_KEYS.get(key.lower())


def payment_method_for_key(key: str) -> PaymentMethod | None:
    return PAYMENT_KEYS.get(key)


def payment_label(method: PaymentMethod) -> str:
    return PAYMENT_METHOD_LABELS.get(method.value, method.value)


def note_presets_for(category: Category | None) -> list[str]:
    """Preset notes offered for a product category (empty for unknown categories)."""
    if category is None:
        return []
    return list(NOTE_PRESETS_BY_CATEGORY.get(category.value, []))
