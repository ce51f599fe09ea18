"""Rich text helpers for the console app."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text

from pizzeria.constant import CURRENCY_SYMBOL
from pizzeria.models import CartLine, Category, Product


def badge_style(category: Category | None) -> str:
    """Return a consistent badge style for category tags."""
    if category is Category.PIZZA:
        return "bold #ffffff on #b23a48"
    if category is Category.BEVERAGE:
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_money(amount: Decimal) -> str:
    return f"{CURRENCY_SYMBOL} {amount:.2f}"


def format_category_badge(category: Category) -> Text:
    return Text(category.value[0], style=badge_style(category))


def format_product_label(product: Product) -> Text:
    """Render a search result: badge, name, price and the optional meta note."""
    text = Text()
    text.append_text(format_category_badge(product.category))
    text.append(f" {product.name}  {format_money(product.price)}")
    if product.meta:
        text.append(f"  ({product.meta})", style="dim")
    return text


def format_cart_line(line: CartLine, category: Category | None = None) -> Text:
    """Render a cart row with quantity, subtotal and note tag."""
    text = Text()
    if category is not None:
        text.append_text(format_category_badge(category))
        text.append(" ")
    text.append(f"{line.name} x{line.quantity}")
    text.append(f"  {format_money(line.subtotal)}", style="bold")
    if line.note:
        text.append(f"  [{line.note}]", style="white")
    return text
