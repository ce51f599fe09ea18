"""Tests for the session cart: merging, removal and notes."""

from decimal import Decimal

import pytest

from pizzeria.cart import Cart
from pizzeria.errors import InvalidInputError, NotFoundError
from pizzeria.models import CartLine


def line(product_id="P1", quantity=1, price="45.00", note=None, name="Pizza Calabresa"):
    return CartLine(product_id=product_id, name=name, quantity=quantity, unit_price=Decimal(price), note=note)


class TestCartAdd:
    def test_new_cart_is_empty(self):
        cart = Cart()
        assert cart.is_empty
        assert len(cart) == 0
        assert cart.total == Decimal("0.00")

    def test_same_product_and_empty_note_merge_into_one_line(self):
        cart = Cart()
        cart.add(line(note=""))
        cart.add(line(note=None))

        lines = cart.view().lines
        assert len(lines) == 1
        assert lines[0].quantity == 2

    def test_merge_sums_quantities(self):
        cart = Cart()
        cart.add(line(quantity=2, note="Thin crust"))
        merged = cart.add(line(quantity=3, note="Thin crust"))

        assert merged.quantity == 5
        assert len(cart) == 1

    def test_different_notes_stay_separate(self):
        cart = Cart()
        cart.add(line(note="Thin crust"))
        cart.add(line(note="Well done"))

        assert [ln.note for ln in cart] == ["Thin crust", "Well done"]

    def test_different_products_keep_insertion_order(self):
        cart = Cart()
        cart.add(line(product_id="P2", name="Guarana", price="6.00"))
        cart.add(line(product_id="P1"))

        assert [ln.product_id for ln in cart] == ["P2", "P1"]

    def test_total_is_sum_of_subtotals(self):
        cart = Cart()
        cart.add(line(quantity=2))
        cart.add(line(product_id="P2", name="Guarana", price="6.00", quantity=3))

        assert cart.total == Decimal("108.00")
        assert cart.view().total == Decimal("108.00")

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_quantity_below_one(self, quantity):
        cart = Cart()
        with pytest.raises(InvalidInputError):
            cart.add(line(quantity=quantity))
        assert cart.is_empty

    def test_returned_line_is_a_copy(self):
        cart = Cart()
        returned = cart.add(line())
        returned.quantity = 99

        assert cart.view().lines[0].quantity == 1

    def test_view_lines_are_copies(self):
        cart = Cart()
        cart.add(line())
        cart.view().lines[0].quantity = 50

        assert cart.total == Decimal("45.00")


class TestCartRemove:
    def test_remove_by_one_based_position(self):
        cart = Cart()
        cart.add(line(product_id="P1"))
        cart.add(line(product_id="P2", name="Guarana", price="6.00"))

        removed = cart.remove(1)

        assert removed.product_id == "P1"
        assert [ln.product_id for ln in cart] == ["P2"]

    def test_remove_out_of_range_leaves_cart_unchanged(self):
        cart = Cart()
        cart.add(line(product_id="P1"))
        cart.add(line(product_id="P2", name="Guarana", price="6.00"))
        before = cart.view()

        with pytest.raises(NotFoundError):
            cart.remove(5)

        assert cart.view() == before

    def test_remove_zero_is_out_of_range(self):
        cart = Cart()
        cart.add(line())
        with pytest.raises(NotFoundError):
            cart.remove(0)

    def test_clear_empties_the_cart(self):
        cart = Cart()
        cart.add(line())
        cart.clear()
        assert cart.is_empty


class TestCartNotes:
    def test_set_note_keeps_position(self):
        cart = Cart()
        cart.add(line(product_id="P1"))
        cart.add(line(product_id="P2", name="Guarana", price="6.00"))

        cart.set_note(1, "Thin crust")

        lines = cart.view().lines
        assert [ln.product_id for ln in lines] == ["P1", "P2"]
        assert lines[0].note == "Thin crust"

    def test_set_note_merges_into_matching_line(self):
        cart = Cart()
        cart.add(line(quantity=1, note="Thin crust"))
        cart.add(line(quantity=2))

        merged = cart.set_note(2, "Thin crust")

        assert len(cart) == 1
        assert merged.quantity == 3

    def test_blank_note_clears_it(self):
        cart = Cart()
        cart.add(line(note="Well done"))

        updated = cart.set_note(1, "   ")

        assert updated.note is None

    def test_set_note_out_of_range(self):
        with pytest.raises(NotFoundError):
            Cart().set_note(1, "Well done")
