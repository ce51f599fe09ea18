"""Tests for sales report aggregation and the summary export."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from pizzeria.constant import UNIDENTIFIED_CUSTOMER
from pizzeria.errors import InvalidInputError
from pizzeria.reports import (
    export_summary,
    filter_orders_by_date_range,
    format_date_range,
    format_summary,
    generate_reports,
    pizzas_in_month,
    pizzas_per_day,
    sales_by_customer,
    top_customers,
    top_products,
    total_sales,
)

# Midday UTC keeps the local calendar date stable in any time zone within +-11h.
MAY_10 = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)
MAY_11 = datetime(2024, 5, 11, 12, 0, tzinfo=timezone.utc)
JUNE_2 = datetime(2024, 6, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def orders(order_factory):
    return [
        order_factory(("Pizza Calabresa", 2, "45.00"), ("Guarana", 1, "6.00"), customer_name="Ana", created_at=MAY_10, order_id="O-1"),
        order_factory(("Broto Meia Calabresa", 1, "24.00"), created_at=MAY_10, order_id="O-2"),
        order_factory(("Guarana", 3, "6.00"), customer_name="Ana", created_at=MAY_11, order_id="O-3"),
        order_factory(("Pizza Margherita", 1, "42.00"), customer_name="Bruno", created_at=JUNE_2, order_id="O-4"),
    ]


class TestTotals:
    def test_total_sales_is_sum_of_order_totals(self, orders):
        assert total_sales(orders) == sum(order.total for order in orders)
        assert total_sales(orders) == Decimal("180.00")

    def test_total_sales_of_nothing_is_zero(self):
        assert total_sales([]) == Decimal("0.00")


class TestGrouping:
    def test_sales_by_customer_uses_sentinel_for_anonymous(self, orders):
        rows = {row.customer_name: row for row in sales_by_customer(orders)}

        assert rows["Ana"].order_count == 2
        assert rows["Ana"].total == Decimal("114.00")
        assert rows[UNIDENTIFIED_CUSTOMER].total == Decimal("24.00")

    def test_sales_by_customer_keeps_first_seen_order(self, orders):
        names = [row.customer_name for row in sales_by_customer(orders)]
        assert names == ["Ana", UNIDENTIFIED_CUSTOMER, "Bruno"]

    def test_top_customers_by_total(self, orders):
        assert [row.customer_name for row in top_customers(orders)] == ["Ana", "Bruno", UNIDENTIFIED_CUSTOMER]

    def test_top_products_sorted_by_quantity(self, orders):
        rows = top_products(orders)

        assert rows[0].name == "Guarana"
        assert rows[0].quantity == 4
        assert rows[0].revenue == Decimal("24.00")

    def test_top_products_limit(self, orders):
        assert len(top_products(orders, limit=2)) == 2


class TestDateRange:
    def test_range_is_inclusive(self, orders):
        report = filter_orders_by_date_range(orders, date(2024, 5, 10), date(2024, 5, 11))

        assert [order.id for order in report.orders] == ["O-1", "O-2", "O-3"]
        assert report.order_count == 3
        assert report.total == Decimal("138.00")

    def test_empty_range(self, orders):
        report = filter_orders_by_date_range(orders, date(2023, 1, 1), date(2023, 1, 31))

        assert report.orders == []
        assert report.total == Decimal("0.00")
        assert format_date_range(report)[-1] == "No orders found in this period."

    def test_start_after_end_is_rejected(self, orders):
        with pytest.raises(InvalidInputError):
            filter_orders_by_date_range(orders, date(2024, 5, 11), date(2024, 5, 10))

    def test_format_lists_each_order(self, orders):
        report = filter_orders_by_date_range(orders, date(2024, 5, 10), date(2024, 5, 10))
        lines = format_date_range(report)

        assert lines[0] == "Orders from 10/05/2024 to 10/05/2024:"
        assert any(UNIDENTIFIED_CUSTOMER in line and "O-2" in line for line in lines)
        assert lines[-1] == "Sales in period: R$ 120.00"


class TestPizzaCounts:
    def test_pizzas_per_day_counts_pizza_keywords(self, orders):
        assert pizzas_per_day(orders) == {"10/05/2024": 3, "02/06/2024": 1}

    def test_pizzas_in_month(self, orders):
        assert pizzas_in_month(orders, date(2024, 5, 20)) == 3
        assert pizzas_in_month(orders, date(2024, 7, 1)) == 0


class TestSummary:
    def test_generate_reports(self, orders):
        report = generate_reports(orders, now=datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc))

        assert report.order_count == 4
        assert report.total_sales == Decimal("180.00")
        assert report.pizzas_this_month == 1

    def test_format_summary_headline(self, orders):
        lines = format_summary(generate_reports(orders))
        assert "Total orders: 4" in lines
        assert "Total sales: R$ 180.00" in lines

    def test_export_overwrites(self, orders, tmp_path):
        target = tmp_path / "out" / "summary.txt"
        target.parent.mkdir()
        target.write_text("old content\n", encoding="utf-8")

        written = export_summary(generate_reports(orders), target)

        content = written.read_text(encoding="utf-8")
        assert "old content" not in content
        assert "Total sales: R$ 180.00" in content
