"""Pydantic request/response schemas for the HTTP API.

These are the external contracts; the domain dataclasses in
``pizzeria.models`` stay free of transport concerns.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from pizzeria.models import Category, OrderStatus, PaymentMethod


class ErrorResponse(BaseModel):
    error: str


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class ProductCreate(BaseModel):
    category: str
    name: str
    price: Decimal
    description: str | None = None
    meta: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "category": "Pizza",
                    "name": "Pizza Calabresa",
                    "price": "45.00",
                    "description": "Calabresa, onion and mozzarella",
                    "meta": None,
                }
            ]
        }
    }


class ProductUpdate(BaseModel):
    category: str | None = None
    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    meta: str | None = None


class ProductResponse(BaseModel):
    id: str
    category: Category
    name: str
    price: Decimal
    description: str | None = None
    meta: str | None = None

    model_config = {"from_attributes": True}


class CustomerCreate(BaseModel):
    name: str
    phone: str
    email: str | None = None
    address: str | None = None


class CustomerUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class CustomerResponse(BaseModel):
    id: str
    name: str
    phone: str
    email: str | None = None
    address: str | None = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int = 1
    note: str | None = None


class OrderCreateRequest(BaseModel):
    items: list[OrderItemRequest] = Field(default_factory=list)
    customer_id: str | None = None
    payment_method: str = PaymentMethod.CASH.value
    cash_tendered: Decimal | None = None
    delivery_address: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "P-3F9A1C07B2D4", "quantity": 2, "note": None}],
                    "customer_id": None,
                    "payment_method": "Cash",
                    "cash_tendered": "100.00",
                    "delivery_address": None,
                }
            ]
        }
    }


class OrderLineResponse(BaseModel):
    product_id: str | None = None
    name: str
    quantity: int
    unit_price: Decimal
    note: str | None = None
    subtotal: Decimal

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: str
    customer_id: str | None = None
    customer_name: str | None = None
    total: Decimal
    payment_method: PaymentMethod
    cash_tendered: Decimal | None = None
    change_due: Decimal | None = None
    delivery_address: str | None = None
    created_at: datetime
    status: OrderStatus
    item_count: int
    lines: list[OrderLineResponse]

    model_config = {"from_attributes": True}


class OrderCreatedResponse(BaseModel):
    order: OrderResponse
    receipt: str


class ReceiptResponse(BaseModel):
    order_id: str
    receipt: str


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
class CustomerSalesResponse(BaseModel):
    customer_name: str
    order_count: int
    total: Decimal

    model_config = {"from_attributes": True}


class ProductSalesResponse(BaseModel):
    name: str
    quantity: int
    revenue: Decimal

    model_config = {"from_attributes": True}


class SalesReportResponse(BaseModel):
    generated_at: datetime
    order_count: int
    total_sales: Decimal
    sales_by_customer: list[CustomerSalesResponse]
    top_products: list[ProductSalesResponse]
    pizzas_per_day: dict[str, int]
    pizzas_this_month: int

    model_config = {"from_attributes": True}


class DateRangeResponse(BaseModel):
    start: date
    end: date
    order_count: int
    total: Decimal
    orders: list[OrderResponse]

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------
class RatingCreate(BaseModel):
    customer_name: str | None = None
    score: int


class RatingResponse(BaseModel):
    customer_name: str
    score: int
    rated_at: datetime

    model_config = {"from_attributes": True}


class RatingSummaryResponse(BaseModel):
    ratings: list[RatingResponse]
    average: Decimal | None = None
