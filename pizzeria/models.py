"""Domain models for the pizzeria."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

CENTS = Decimal("0.01")


class Category(str, Enum):
    PIZZA = "Pizza"
    BEVERAGE = "Beverage"
    OTHER = "Other"


class PaymentMethod(str, Enum):
    PIX = "Pix"
    CARD = "Card"
    CASH = "Cash"
    MEAL_VOUCHER = "MealVoucher"


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "PendingPayment"
    PERSISTED = "Persisted"


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``O-3F9A1C07B2D4``."""
    return f"{prefix}{uuid4().hex[:12].upper()}"


@dataclass
class Customer:
    id: str
    name: str
    phone: str
    email: str | None = None
    address: str | None = None


@dataclass
class Product:
    id: str
    category: Category
    name: str
    price: Decimal
    description: str | None = None
    meta: str | None = None


@dataclass
class CartLine:
    """A cart row; name and price are snapshots of the product at add time."""

    product_id: str
    name: str
    quantity: int
    unit_price: Decimal
    note: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def merge_key(self) -> tuple[str, str]:
        return (self.product_id, self.note or "")

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1, note: str | None = None) -> CartLine:
        return cls(
            product_id=product.id,
            name=product.name,
            quantity=quantity,
            unit_price=product.price,
            note=note or None,
        )


@dataclass(frozen=True)
class OrderLine:
    """An immutable copy of a cart line captured when the order was finalized."""

    product_id: str | None
    name: str
    quantity: int
    unit_price: Decimal
    note: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Order:
    id: str
    lines: list[OrderLine]
    total: Decimal
    created_at: datetime
    customer_id: str | None = None
    customer_name: str | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    cash_tendered: Decimal | None = None
    delivery_address: str | None = None
    status: OrderStatus = OrderStatus.PENDING_PAYMENT

    @property
    def change_due(self) -> Decimal | None:
        """Change owed to a cash customer, or None when not applicable."""
        if self.payment_method is not PaymentMethod.CASH or self.cash_tendered is None:
            return None
        return self.cash_tendered - self.total

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


@dataclass(frozen=True)
class Rating:
    customer_name: str
    score: int
    rated_at: str


@dataclass(frozen=True)
class CartView:
    """Read-only snapshot of a cart and its running total."""

    lines: tuple[CartLine, ...] = field(default_factory=tuple)
    total: Decimal = Decimal("0.00")
