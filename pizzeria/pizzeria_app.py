"""Main Textual app class."""

from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from pizzeria import config
from pizzeria.cart import Cart
from pizzeria.catalog import find_customer, list_products, seed_products
from pizzeria.checkout_modal import CheckoutModal, CheckoutRequest
from pizzeria.data import category_for_key, note_presets_for
from pizzeria.errors import PersistenceError, PizzeriaError
from pizzeria.feedback import record_rating
from pizzeria.log import get_logger
from pizzeria.models import CartLine, Category, Order, Product
from pizzeria.notes_modal import NotesModal
from pizzeria.orders import choose_payment, finalize_order, list_orders, record_order
from pizzeria.persistence import bootstrap_schema, connect
from pizzeria.printer import check_printer_dependencies, print_receipt
from pizzeria.rating_modal import RatingModal
from pizzeria.receipts import emit_receipt
from pizzeria.rendering import badge_style, format_cart_line, format_money, format_product_label
from pizzeria.report_modal import ReportModal

logger = get_logger(__name__)

DEFAULT_LIST_ROWS = 8


def scroll_window(total: int, rows: int, focus: int | None) -> range:
    """Indices of a ``rows``-tall slice of a list, centred on ``focus`` when possible."""
    rows = max(1, rows)
    if total <= rows:
        return range(total)
    first = 0 if focus is None else min(max(0, focus - rows // 2), total - rows)
    return range(first, first + rows)


def render_list(rows: list[Text], focus: int | None, height: int) -> Text:
    """Join ``rows`` into one block, with a pointer on ``focus`` and ⋮ where rows are cut off."""
    window = scroll_window(len(rows), height if height > 0 else DEFAULT_LIST_ROWS, focus)
    block = Text()
    if window.start > 0:
        block.append("⋮\n", style="dim")
    block.append_text(
        Text("\n").join(Text("➤ " if idx == focus else "  ").append_text(rows[idx]) for idx in window)
    )
    if window.stop < len(rows):
        block.append("\n⋮", style="dim")
    return block


class PizzeriaApp(App):
    """A Textual app for building a cart from the catalog and checking out orders."""

    TITLE = "Pizzeria"
    SUB_TITLE = "Orders"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-total {
        height: 1;
        text-style: bold;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    category = reactive(Category.PIZZA)
    search_query = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add to cart"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "checkout", "Checkout", priority=True),
        Binding("ctrl+r", "show_reports", "Reports", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit active mode"),
        ("escape", "cancel_active_mode", "Exit active mode"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        db_path: str | Path | None = None,
        receipt_log_path: str | Path | None = None,
        print_receipts: bool | None = None,
        summary_path: str | Path | None = None,
    ) -> None:
        super().__init__()
        self.db_path = db_path if db_path is not None else config.DB_PATH
        self.receipt_log_path = receipt_log_path
        self.summary_path = summary_path
        self.print_receipts = config.PRINT_RECEIPTS if print_receipts is None else print_receipts
        self.cart = Cart()
        self.products: list[Product] = []
        self.system_status = ""
        self.last_order: Order | None = None
        self.conn = connect(self.db_path)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Cart", classes="pane-title")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-total")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        bootstrap_schema(self.conn)
        seeded = seed_products(self.conn)
        self.products = list_products(self.conn)
        if self.print_receipts:
            _, msg = check_printer_dependencies()
            self.system_status = msg
        elif seeded:
            self.system_status = f"Catalog seeded with {seeded} products"
        logger.info("App mounted", db_path=str(self.db_path), products=len(self.products))
        self._refresh_all()

    def on_unmount(self) -> None:
        self.conn.close()

    def on_key(self, event: Key) -> None:
        # While a modal is active, let the modal own keyboard handling.
        if isinstance(self.screen, ModalScreen):
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if self.input_state == "normal":
            key = char.lower()
            if char == "+":
                self._add_one_more_of_selected()
            elif key == "d":
                self._remove_selected_line()
            elif key == "j":
                self._move_cart_selection(1)
            elif key == "k":
                self._move_cart_selection(-1)
            elif key == "n":
                self._open_notes_for_selected_line()
            elif key == "x":
                self._clear_cart()
            else:
                category = category_for_key(key)
                if category is None:
                    return
                self.category = category
                self.input_state = "active"
                self.search_query = ""
                self.selected_index = 0
                self._refresh_search()
            event.stop()
            return

        if not (char.isalnum() or char == " "):
            return
        self.search_query += char
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        product = results[self.selected_index]
        self.cart.add(CartLine.from_product(product))
        self.cart_selected_index = self._line_position(product.id, None)
        self.system_status = f"Added {product.name}"
        logger.debug("Cart line added", product_id=product.id, lines=len(self.cart))
        self._refresh_all()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_checkout(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "normal":
            self.system_status = "Checkout only in NORMAL mode (Esc or Ctrl+C to exit search)"
            self._refresh_search()
            return
        if self.cart.is_empty:
            self.system_status = "Cart is empty; add items before checkout"
            self._refresh_search()
            return
        self.push_screen(CheckoutModal(self.cart.total), self._complete_checkout)

    def action_show_reports(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        try:
            orders = list_orders(self.conn)
        except PersistenceError as exc:
            self.system_status = f"Reports unavailable: {exc}"
            self._refresh_search()
            return
        self.push_screen(ReportModal(orders, summary_path=self.summary_path))

    def _complete_checkout(self, request: CheckoutRequest | None) -> None:
        if request is None:
            self.system_status = "Checkout cancelled"
            self._refresh_search()
            return

        customer_id = None
        notice = ""
        if request.customer_key:
            try:
                customer = find_customer(self.conn, request.customer_key)
            except PersistenceError as exc:
                self.system_status = f"Checkout failed: {exc}"
                self._refresh_search()
                return
            if customer is None:
                notice = " (customer not found, order is anonymous)"
            else:
                customer_id = customer.id

        try:
            order = finalize_order(self.conn, self.cart, customer_id, request.delivery_address)
            choose_payment(order, request.payment_method, request.cash_tendered or None)
            record_order(self.conn, order, self.cart)
        except PizzeriaError as exc:
            self.system_status = f"Checkout failed: {exc}"
            logger.warning("Checkout failed", error=str(exc))
            self._refresh_search()
            return

        self.last_order = order
        self.cart_selected_index = None
        self.system_status = f"Saved order {order.id} - {format_money(order.total)}{notice}"
        try:
            emit_receipt(order, self.receipt_log_path)
        except PersistenceError as exc:
            self.system_status = f"Saved order {order.id} but receipt log failed: {exc}"
            logger.error("Receipt log failed", order_id=order.id, error=str(exc))

        if self.print_receipts:
            try:
                print_receipt(order)
            except Exception as exc:
                self.system_status = f"Saved order {order.id} but print failed: {exc}"
                logger.warning("Receipt print failed", order_id=order.id, error=repr(exc))

        self._refresh_all()
        self.push_screen(RatingModal(order.customer_name), self._record_rating)

    def _record_rating(self, score: int | None) -> None:
        if score is None or self.last_order is None:
            return
        try:
            record_rating(self.conn, self.last_order.customer_name, score)
        except PizzeriaError as exc:
            self.system_status = f"Rating not saved: {exc}"
        else:
            self.system_status = f"Thanks for the feedback: {score} star(s)"
        self._refresh_search()

    def _filtered_results(self) -> list[Product]:
        source = [product for product in self.products if product.category is self.category]
        if not self.search_query:
            return source
        q = self.search_query.lower()
        return [product for product in source if q in product.name.lower()]

    def _category_of(self, product_id: str) -> Category | None:
        return next((p.category for p in self.products if p.id == product_id), None)

    def _line_position(self, product_id: str, note: str | None) -> int | None:
        key = (product_id, note or "")
        for idx, line in enumerate(self.cart.view().lines):
            if line.merge_key == key:
                return idx
        return None

    def _selected_line(self) -> CartLine | None:
        if self.cart_selected_index is None:
            return None
        lines = self.cart.view().lines
        if not (0 <= self.cart_selected_index < len(lines)):
            return None
        return lines[self.cart_selected_index]

    def _add_one_more_of_selected(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.cart.add(CartLine(line.product_id, line.name, 1, line.unit_price, line.note))
        self._refresh_all()

    def _remove_selected_line(self) -> None:
        if self.cart_selected_index is None:
            return
        idx = self.cart_selected_index
        removed = self.cart.remove(idx + 1)
        self.system_status = f"Removed {removed.name}"

        if self.cart.is_empty:
            self.cart_selected_index = None
        else:
            self.cart_selected_index = min(idx, len(self.cart) - 1)
        self._refresh_all()

    def _clear_cart(self) -> None:
        if self.cart.is_empty:
            return
        self.cart.clear()
        self.cart_selected_index = None
        self.system_status = "Cart cleared"
        self._refresh_all()

    def _move_cart_selection(self, delta: int) -> None:
        if self.cart.is_empty:
            return

        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else len(self.cart) - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % len(self.cart)
        self._refresh_cart()

    def _open_notes_for_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        position = self.cart_selected_index + 1
        presets = note_presets_for(self._category_of(line.product_id))

        def apply_note(note: str | None) -> None:
            if note is None:
                return
            updated = self.cart.set_note(position, note)
            self.cart_selected_index = self._line_position(updated.product_id, updated.note)
            self.system_status = f"Note updated for {updated.name}"
            self._refresh_all()

        self.push_screen(NotesModal(line, presets), apply_note)

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            total_widget = self.query_one("#cart-total", Static)
        except NoMatches:
            return
        view = self.cart.view()
        total_widget.update(f"Total: {format_money(view.total)}")
        if not view.lines:
            self.cart_selected_index = None
            cart_widget.update("(cart is empty)")
            return
        if self.cart_selected_index is not None:
            self.cart_selected_index = min(self.cart_selected_index, len(view.lines) - 1)

        rows = [
            Text(f"{position}. ").append_text(format_cart_line(line, self._category_of(line.product_id)))
            for position, line in enumerate(view.lines, start=1)
        ]
        cart_widget.update(render_list(rows, self.cart_selected_index, cart_widget.size.height))

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            text = Text("P/B/O search Pizza/Beverage/Other. J/K select, + more, D remove, N note, X clear.\n")
            text.append("Ctrl+S checkout, Ctrl+R reports.\n")
            text.append(status, style="bold")
            bar.update(text)
            return

        text = Text()
        text.append(self.category.value[0], style=badge_style(self.category))
        text.append(f": {self.search_query}")
        bar.update(text)

    def _refresh_results(self, results: list[Product]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
        elif not results:
            results_widget.update("No results")
        else:
            if self.selected_index >= len(results):
                self.selected_index = 0
            rows = [format_product_label(product) for product in results]
            results_widget.update(render_list(rows, self.selected_index, results_widget.size.height))
