"""Tests for customer and product maintenance."""

from decimal import Decimal

import pytest

from pizzeria.catalog import (
    delete_customer,
    delete_product,
    find_customer,
    get_customer,
    get_product,
    list_customers,
    list_products,
    register_customer,
    register_product,
    search_products_by_name,
    seed_products,
    update_customer,
    update_product,
)
from pizzeria.constant import SEED_PRODUCTS
from pizzeria.errors import InvalidInputError, NotFoundError
from pizzeria.models import Category


class TestCustomers:
    def test_register_and_get(self, conn):
        customer = register_customer(conn, " Ana ", "11 99999-0000", email="ana@example.com", address="Rua A, 10")

        assert customer.id.startswith("C-")
        assert get_customer(conn, customer.id) == customer
        assert customer.name == "Ana"

    def test_same_phone_returns_existing_customer(self, conn):
        first = register_customer(conn, "Ana", "11 99999-0000")
        second = register_customer(conn, "Ana Maria", "11 99999-0000")

        assert second.id == first.id
        assert len(list_customers(conn)) == 1

    def test_same_email_returns_existing_customer(self, conn):
        first = register_customer(conn, "Ana", "111", email="ana@example.com")
        second = register_customer(conn, "Ana", "222", email="ana@example.com")

        assert second.id == first.id

    def test_customers_without_email_are_not_merged(self, conn):
        register_customer(conn, "Ana", "111")
        register_customer(conn, "Bruno", "222")

        assert len(list_customers(conn)) == 2

    @pytest.mark.parametrize("name,phone", [("", "111"), ("Ana", "  ")])
    def test_name_and_phone_are_required(self, conn, name, phone):
        with pytest.raises(InvalidInputError):
            register_customer(conn, name, phone)

    def test_find_by_id_or_name_fragment(self, conn):
        ana = register_customer(conn, "Ana Souza", "111")

        assert find_customer(conn, ana.id) == ana
        assert find_customer(conn, "souza") == ana
        assert find_customer(conn, "nobody") is None
        assert find_customer(conn, "") is None

    @pytest.mark.parametrize("key", ["%", "_", "\\"])
    def test_find_treats_wildcards_literally(self, conn, key):
        register_customer(conn, "Ana Souza", "111")

        assert find_customer(conn, key) is None

    def test_find_name_with_underscore(self, conn):
        register_customer(conn, "Ana Souza", "111")
        bar = register_customer(conn, "Bar_do_Ze", "222")

        assert find_customer(conn, "r_do") == bar

    def test_update_fields(self, conn):
        ana = register_customer(conn, "Ana", "111")

        updated = update_customer(conn, ana.id, address="Rua B, 20")

        assert updated.address == "Rua B, 20"
        assert updated.name == "Ana"

    def test_update_rejects_blank_name(self, conn):
        ana = register_customer(conn, "Ana", "111")
        with pytest.raises(InvalidInputError):
            update_customer(conn, ana.id, name=" ")

    def test_update_missing_customer(self, conn):
        with pytest.raises(NotFoundError):
            update_customer(conn, "C-NOPE", address="x")

    def test_delete(self, conn):
        ana = register_customer(conn, "Ana", "111")
        delete_customer(conn, ana.id)

        with pytest.raises(NotFoundError):
            get_customer(conn, ana.id)
        with pytest.raises(NotFoundError):
            delete_customer(conn, ana.id)


class TestProducts:
    def test_register_parses_price(self, conn):
        product = register_product(conn, "pizza", "Pizza Napolitana", "47,50")

        assert product.category is Category.PIZZA
        assert product.price == Decimal("47.50")
        assert get_product(conn, product.id) == product

    def test_register_rejects_negative_price(self, conn):
        with pytest.raises(InvalidInputError):
            register_product(conn, "Pizza", "Free Pizza", "-1")

    def test_register_rejects_unknown_category(self, conn):
        with pytest.raises(InvalidInputError):
            register_product(conn, "Dessert", "Pudim", "10")

    def test_list_by_category(self, products, seeded_conn):
        beverages = list_products(seeded_conn, Category.BEVERAGE)

        assert beverages
        assert all(p.category is Category.BEVERAGE for p in beverages)

    def test_search_is_case_insensitive(self, seeded_conn):
        names = [p.name for p in search_products_by_name(seeded_conn, "COCA")]
        assert names == ["Coca-Cola", "Coca-Cola 2L"]

    def test_search_within_category(self, seeded_conn):
        assert search_products_by_name(seeded_conn, "calabresa", Category.BEVERAGE) == []

    def test_update_price(self, products, seeded_conn):
        product = products["Guarana"]
        updated = update_product(seeded_conn, product.id, price="6,50")
        assert updated.price == Decimal("6.50")

    def test_update_unknown_field(self, products, seeded_conn):
        with pytest.raises(InvalidInputError):
            update_product(seeded_conn, products["Guarana"].id, colour="green")

    def test_delete_missing_product(self, conn):
        with pytest.raises(NotFoundError):
            delete_product(conn, "P-NOPE")


class TestSeeding:
    def test_seed_fills_empty_catalog_once(self, conn):
        assert seed_products(conn) == len(SEED_PRODUCTS)
        assert seed_products(conn) == 0
        assert len(list_products(conn)) == len(SEED_PRODUCTS)

    @pytest.mark.parametrize("field", ["category", "name", "price"])
    def test_update_cannot_clear_required_field(self, products, seeded_conn, field):
        product = products["Guarana"]
        with pytest.raises(InvalidInputError):
            update_product(seeded_conn, product.id, **{field: None})

        assert get_product(seeded_conn, product.id) == product
