from datetime import date
from decimal import Decimal

import pytest

from pizzeria.errors import InvalidInputError
from pizzeria.models import Category, PaymentMethod
from pizzeria.parsing import (
    parse_category,
    parse_date,
    parse_payment_method,
    parse_price,
    parse_quantity,
    parse_rating,
)


class TestParsePrice:
    @pytest.mark.parametrize("raw,expected", [("45", "45.00"), ("45,5", "45.50"), (" 3.999 ", "4.00"), (Decimal("7"), "7.00")])
    def test_valid(self, raw, expected):
        assert parse_price(raw) == Decimal(expected)

    @pytest.mark.parametrize("raw", ["", "abc", "-0.01", "NaN"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidInputError):
            parse_price(raw)


class TestParseOthers:
    def test_quantity(self):
        assert parse_quantity(" 3 ") == 3
        with pytest.raises(InvalidInputError):
            parse_quantity("0")
        with pytest.raises(InvalidInputError):
            parse_quantity("two")

    def test_rating_bounds(self):
        assert parse_rating("5") == 5
        with pytest.raises(InvalidInputError):
            parse_rating(6)

    def test_date_format(self):
        assert parse_date("01/02/2024") == date(2024, 2, 1)
        with pytest.raises(InvalidInputError):
            parse_date("2024-02-01")

    def test_category_and_payment_method(self):
        assert parse_category("BEVERAGE") is Category.BEVERAGE
        assert parse_payment_method("mealvoucher") is PaymentMethod.MEAL_VOUCHER
        with pytest.raises(InvalidInputError):
            parse_payment_method("cheque")

    @pytest.mark.parametrize("parse", [parse_category, parse_payment_method])
    @pytest.mark.parametrize("raw", [None, "", 3])
    def test_choices_require_text(self, parse, raw):
        with pytest.raises(InvalidInputError):
            parse(raw)
