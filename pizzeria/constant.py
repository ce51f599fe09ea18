"""Editable static menu, note and label configuration."""

from __future__ import annotations

UNIDENTIFIED_CUSTOMER = "unidentified customer"

# Order lines whose name contains any of these count as pizza sales.
PIZZA_KEYWORDS: tuple[str, ...] = ("inteira", "meia", "pizza")

DAY_DISPLAY_FORMAT = "%d/%m/%Y"
TIMESTAMP_DISPLAY_FORMAT = "%d/%m/%Y %H:%M:%S"

CURRENCY_SYMBOL = "R$"

TOP_PRODUCTS_LIMIT = 10

RATING_MIN = 1
RATING_MAX = 5

# Key pressed in the console app -> product category searched.
CATEGORY_BY_KEY: dict[str, str] = {
    "p": "Pizza",
    "b": "Beverage",
    "o": "Other",
}

# Key pressed in the checkout screen -> payment method.
PAYMENT_METHOD_BY_KEY: dict[str, str] = {
    "1": "Pix",
    "2": "Card",
    "3": "Cash",
    "4": "MealVoucher",
}

PAYMENT_METHOD_LABELS: dict[str, str] = {
    "Pix": "Pix",
    "Card": "Card",
    "Cash": "Cash",
    "MealVoucher": "Meal voucher",
}

NOTE_PRESETS_BY_CATEGORY: dict[str, list[str]] = {
    "Pizza": [
        "Half and half",
        "Thin crust",
        "Well done",
        "No onions",
        "Extra cheese",
        "No olives",
    ],
    "Beverage": [
        "No ice",
        "With lemon",
        "Very cold",
    ],
    "Other": [],
}

# Catalog loaded into an empty database on first start.
SEED_PRODUCTS: list[dict[str, str | None]] = [
    {"category": "Pizza", "name": "Pizza Calabresa", "description": "Calabresa sausage, onion, olives", "price": "45.00", "meta": "8 slices"},
    {"category": "Pizza", "name": "Pizza Margherita", "description": "Tomato, mozzarella, basil", "price": "42.00", "meta": "8 slices"},
    {"category": "Pizza", "name": "Pizza Frango com Catupiry", "description": "Shredded chicken, catupiry cheese", "price": "49.00", "meta": "8 slices"},
    {"category": "Pizza", "name": "Pizza Portuguesa", "description": "Ham, egg, onion, peas, olives", "price": "48.00", "meta": "8 slices"},
    {"category": "Pizza", "name": "Pizza Quatro Queijos", "description": "Mozzarella, provolone, parmesan, gorgonzola", "price": "52.00", "meta": "8 slices"},
    {"category": "Pizza", "name": "Broto Meia Calabresa", "description": "Small half pizza", "price": "24.00", "meta": "4 slices"},
    {"category": "Beverage", "name": "Guarana", "description": None, "price": "6.00", "meta": "Can"},
    {"category": "Beverage", "name": "Coca-Cola", "description": None, "price": "7.00", "meta": "Can"},
    {"category": "Beverage", "name": "Coca-Cola 2L", "description": None, "price": "14.00", "meta": "Bottle"},
    {"category": "Beverage", "name": "Suco de Laranja", "description": "Fresh orange juice", "price": "9.00", "meta": "500 ml"},
    {"category": "Other", "name": "Borda Recheada", "description": "Stuffed crust add-on", "price": "8.00", "meta": None},
    {"category": "Other", "name": "Brownie", "description": None, "price": "12.00", "meta": "Slice"},
]
