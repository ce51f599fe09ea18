"""Console app tests driven through Textual's pilot."""

import pytest
from rich.text import Text

from pizzeria.checkout_modal import CheckoutModal
from pizzeria.feedback import list_ratings
from pizzeria.models import PaymentMethod
from pizzeria.orders import list_orders
from pizzeria.pizzeria_app import PizzeriaApp, render_list, scroll_window
from pizzeria.rating_modal import RatingModal
from pizzeria.report_modal import ReportModal


@pytest.fixture
def app(tmp_path, receipt_log):
    return PizzeriaApp(
        db_path=tmp_path / "app.db",
        receipt_log_path=receipt_log,
        print_receipts=False,
        summary_path=tmp_path / "summary.txt",
    )


async def add_margherita(pilot):
    await pilot.press("p", *"margherita", "enter")


class TestCartKeys:
    async def test_search_and_add_merges_repeats(self, app):
        async with app.run_test() as pilot:
            await add_margherita(pilot)
            await pilot.press("enter")

            lines = app.cart.view().lines
            assert len(lines) == 1
            assert lines[0].name == "Pizza Margherita"
            assert lines[0].quantity == 2

    async def test_remove_and_clear(self, app):
        async with app.run_test() as pilot:
            await add_margherita(pilot)
            await pilot.press("escape", "b", *"guarana", "enter", "escape")
            assert len(app.cart) == 2

            await pilot.press("k", "j", "d")
            assert [line.name for line in app.cart] == ["Pizza Margherita"]

            await pilot.press("x")
            assert app.cart.is_empty


class TestCheckout:
    async def test_empty_cart_does_not_open_checkout(self, app):
        async with app.run_test() as pilot:
            await pilot.press("ctrl+s")
            assert not isinstance(app.screen, CheckoutModal)
            assert "empty" in app.system_status

    async def test_checkout_records_order_receipt_and_rating(self, app, receipt_log):
        async with app.run_test() as pilot:
            await add_margherita(pilot)
            await pilot.press("escape", "ctrl+s")
            assert isinstance(app.screen, CheckoutModal)

            await pilot.press("tab", "tab", "1", "enter")
            await pilot.pause()
            assert isinstance(app.screen, RatingModal)

            await pilot.press("4", "enter")
            await pilot.pause()

            assert app.cart.is_empty
            orders = list_orders(app.conn)
            assert len(orders) == 1
            assert orders[0].payment_method is PaymentMethod.PIX
            assert [r.score for r in list_ratings(app.conn)] == [4]

        assert "Pizza Margherita" in receipt_log.read_text(encoding="utf-8")

    async def test_cancelled_checkout_keeps_cart(self, app):
        async with app.run_test() as pilot:
            await add_margherita(pilot)
            await pilot.press("escape", "ctrl+s")
            await pilot.press("escape")
            await pilot.pause()

            assert len(app.cart) == 1
            assert app.system_status == "Checkout cancelled"


class TestReports:
    async def test_report_screen_opens_and_closes(self, app):
        async with app.run_test() as pilot:
            await pilot.press("ctrl+r")
            assert isinstance(app.screen, ReportModal)

            await pilot.press("escape")
            await pilot.pause()
            assert not isinstance(app.screen, ReportModal)


class TestScrollWindow:
    def test_short_list_is_shown_whole(self):
        assert scroll_window(3, 8, 2) == range(3)

    def test_window_centres_on_focus_and_stops_at_the_end(self):
        assert scroll_window(20, 4, 10) == range(8, 12)
        assert scroll_window(20, 4, 19) == range(16, 20)
        assert scroll_window(20, 4, None) == range(0, 4)

    def test_render_marks_focus_and_cut_off_rows(self):
        rows = [Text(f"row {n}") for n in range(10)]

        plain = render_list(rows, 5, 3).plain.splitlines()

        assert plain == ["⋮", "  row 4", "➤ row 5", "  row 6", "⋮"]
