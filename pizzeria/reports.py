"""Sales reports computed from the full set of persisted orders.

Every function here is a pure function of the orders it is given; nothing is
cached and every report is recomputed from scratch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from pizzeria import config
from pizzeria.constant import (
    CURRENCY_SYMBOL,
    DAY_DISPLAY_FORMAT,
    PIZZA_KEYWORDS,
    TIMESTAMP_DISPLAY_FORMAT,
    TOP_PRODUCTS_LIMIT,
    UNIDENTIFIED_CUSTOMER,
)
from pizzeria.errors import InvalidInputError, PersistenceError
from pizzeria.models import Order, OrderLine

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class CustomerSales:
    customer_name: str
    order_count: int
    total: Decimal


@dataclass(frozen=True)
class ProductSales:
    name: str
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class DateRangeReport:
    start: date
    end: date
    orders: list[Order]
    order_count: int
    total: Decimal


@dataclass(frozen=True)
class SalesReport:
    generated_at: datetime
    order_count: int
    total_sales: Decimal
    sales_by_customer: list[CustomerSales] = field(default_factory=list)
    top_products: list[ProductSales] = field(default_factory=list)
    pizzas_per_day: dict[str, int] = field(default_factory=dict)
    pizzas_this_month: int = 0


def _money(amount: Decimal) -> str:
    return f"{CURRENCY_SYMBOL} {amount:.2f}"


def local_day(order: Order) -> date:
    """Calendar date of an order in the machine's local time zone."""
    return order.created_at.astimezone().date()


def is_pizza(line: OrderLine) -> bool:
    name = line.name.lower()
    return any(keyword in name for keyword in PIZZA_KEYWORDS)


def total_sales(orders: Sequence[Order]) -> Decimal:
    return sum((order.total for order in orders), ZERO)


def sales_by_customer(orders: Sequence[Order]) -> list[CustomerSales]:
    """Order count and summed total per customer name, in first-seen order."""
    groups: dict[str, tuple[int, Decimal]] = {}
    for order in orders:
        key = order.customer_name or UNIDENTIFIED_CUSTOMER
        count, total = groups.get(key, (0, ZERO))
        groups[key] = (count + 1, total + order.total)
    return [CustomerSales(name, count, total) for name, (count, total) in groups.items()]


def top_customers(orders: Sequence[Order]) -> list[CustomerSales]:
    return sorted(sales_by_customer(orders), key=lambda row: row.total, reverse=True)


def top_products(orders: Sequence[Order], limit: int | None = TOP_PRODUCTS_LIMIT) -> list[ProductSales]:
    """Units sold and revenue per product name, best sellers first."""
    groups: dict[str, tuple[int, Decimal]] = {}
    for order in orders:
        for line in order.lines:
            quantity, revenue = groups.get(line.name, (0, ZERO))
            groups[line.name] = (quantity + line.quantity, revenue + line.subtotal)

    rows = [ProductSales(name, quantity, revenue) for name, (quantity, revenue) in groups.items()]
    rows.sort(key=lambda row: row.quantity, reverse=True)
    if limit is not None:
        rows = rows[:limit]
    return rows


def filter_orders_by_date_range(orders: Sequence[Order], start: date, end: date) -> DateRangeReport:
    """Orders placed between ``start`` and ``end`` inclusive, by local calendar date."""
    if start > end:
        raise InvalidInputError(
            f"Start date {start:{DAY_DISPLAY_FORMAT}} is after end date {end:{DAY_DISPLAY_FORMAT}}"
        )
    selected = [order for order in orders if start <= local_day(order) <= end]
    return DateRangeReport(
        start=start,
        end=end,
        orders=selected,
        order_count=len(selected),
        total=total_sales(selected),
    )


def pizzas_per_day(orders: Sequence[Order]) -> dict[str, int]:
    """Pizza units sold per local day, keyed ``DD/MM/YYYY``."""
    per_day: dict[str, int] = {}
    for order in orders:
        day_key = local_day(order).strftime(DAY_DISPLAY_FORMAT)
        for line in order.lines:
            if is_pizza(line):
                per_day[day_key] = per_day.get(day_key, 0) + line.quantity
    return per_day


def pizzas_in_month(orders: Sequence[Order], today: date) -> int:
    """Pizza units sold in the calendar month containing ``today``."""
    count = 0
    for order in orders:
        day = local_day(order)
        if (day.year, day.month) != (today.year, today.month):
            continue
        count += sum(line.quantity for line in order.lines if is_pizza(line))
    return count


def generate_reports(orders: Sequence[Order], now: datetime | None = None) -> SalesReport:
    now = now or datetime.now().astimezone()
    return SalesReport(
        generated_at=now,
        order_count=len(orders),
        total_sales=total_sales(orders),
        sales_by_customer=sales_by_customer(orders),
        top_products=top_products(orders),
        pizzas_per_day=pizzas_per_day(orders),
        pizzas_this_month=pizzas_in_month(orders, now.date()),
    )


def format_summary(report: SalesReport) -> list[str]:
    lines = [
        f"Sales summary - {report.generated_at:{TIMESTAMP_DISPLAY_FORMAT}}",
        f"Total orders: {report.order_count}",
        f"Total sales: {_money(report.total_sales)}",
        "",
        "Top products:",
    ]
    lines.extend(f"{row.name}: {row.quantity} ({_money(row.revenue)})" for row in report.top_products)
    lines.extend(["", "Sales by customer:"])
    lines.extend(
        f"{row.customer_name}: {row.order_count} orders - {_money(row.total)}"
        for row in report.sales_by_customer
    )
    lines.extend(["", "Pizzas per day:"])
    lines.extend(f"{day}: {count} pizzas" for day, count in report.pizzas_per_day.items())
    lines.extend(["", f"Pizzas this month: {report.pizzas_this_month}"])
    return lines


def format_date_range(report: DateRangeReport) -> list[str]:
    header = f"Orders from {report.start:{DAY_DISPLAY_FORMAT}} to {report.end:{DAY_DISPLAY_FORMAT}}:"
    if not report.orders:
        return [header, "No orders found in this period."]
    lines = [header]
    lines.extend(
        f"ID: {order.id}, Customer: {order.customer_name or UNIDENTIFIED_CUSTOMER}, "
        f"Total: {_money(order.total)}, Date: {local_day(order):{DAY_DISPLAY_FORMAT}}"
        for order in report.orders
    )
    lines.append(f"Orders in period: {report.order_count}")
    lines.append(f"Sales in period: {_money(report.total)}")
    return lines


def export_summary(report: SalesReport, path: str | Path | None = None) -> Path:
    """Write the summary to a text file, replacing any previous summary."""
    target = Path(path if path is not None else config.SUMMARY_PATH)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("\n".join(format_summary(report)) + "\n", encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Cannot write summary to {target}: {exc}") from exc
    return target
