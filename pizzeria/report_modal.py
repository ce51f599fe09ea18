"""Sales report screen with an optional date-range filter."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from pizzeria.errors import InvalidInputError, PersistenceError
from pizzeria.models import Order
from pizzeria.parsing import parse_date
from pizzeria.reports import (
    export_summary,
    filter_orders_by_date_range,
    format_date_range,
    format_summary,
    generate_reports,
)


class ReportModal(ModalScreen[None]):
    """Full summary by default; type ``DD/MM/YYYY DD/MM/YYYY`` and Enter to filter by period."""

    CSS = """
    ReportModal {
        align: center middle;
        background: $background 60%;
    }

    #report-dialog {
        width: 80;
        height: 80%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #report-filter {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #report-body {
        color: white;
    }

    #report-help {
        color: #dddddd;
        margin-top: 1;
    }
    """

    def __init__(self, orders: list[Order], now: datetime | None = None, summary_path: str | Path | None = None) -> None:
        super().__init__()
        self.orders = orders
        self.now = now
        self.summary_path = summary_path
        self.filter_value = ""
        self.lines = self._summary_lines()

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="report-dialog"):
            yield Static(id="report-filter")
            yield Static(id="report-body")
            yield Static("Type start and end date, Enter filter, Backspace edit, E export, Esc/q close.", id="report-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "q", "ctrl+c"}:
            event.stop()
            self.dismiss()
            return

        if event.key == "enter":
            event.stop()
            self._apply_filter()
            return

        if event.key == "e":
            event.stop()
            self._export()
            return

        if event.key == "backspace":
            event.stop()
            self.filter_value = self.filter_value[:-1]
            if not self.filter_value:
                self.lines = self._summary_lines()
            self._refresh_content()
            return

        if event.character and (event.character.isdigit() or event.character in {"/", " "}):
            event.stop()
            self.filter_value += event.character
            self._refresh_content()

    def _summary_lines(self) -> list[str]:
        if not self.orders:
            return ["No orders recorded."]
        return format_summary(generate_reports(self.orders, now=self.now))

    def _apply_filter(self) -> None:
        parts = self.filter_value.split()
        if not parts:
            self.lines = self._summary_lines()
            self._refresh_content()
            return
        try:
            if len(parts) != 2:
                raise InvalidInputError("Enter a start and an end date: DD/MM/YYYY DD/MM/YYYY")
            report = filter_orders_by_date_range(self.orders, parse_date(parts[0]), parse_date(parts[1]))
        except InvalidInputError as exc:
            self.lines = [str(exc)]
        else:
            self.lines = format_date_range(report)
        self._refresh_content()

    def _export(self) -> None:
        try:
            target = export_summary(generate_reports(self.orders, now=self.now), self.summary_path)
        except PersistenceError as exc:
            self.lines = [*self._summary_lines(), "", str(exc)]
        else:
            self.lines = [*self._summary_lines(), "", f"Summary exported to {target}"]
        self.filter_value = ""
        self._refresh_content()

    def _refresh_content(self) -> None:
        self.query_one("#report-filter", Static).update(Text(f"Period: {self.filter_value}|"))
        self.query_one("#report-body", Static).update(Text("\n".join(self.lines)))
