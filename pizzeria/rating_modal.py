"""Post-checkout rating prompt."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from pizzeria.constant import RATING_MAX, RATING_MIN, UNIDENTIFIED_CUSTOMER


class RatingModal(ModalScreen[int | None]):
    """Ask the customer for a 1-5 star rating; Esc skips."""

    CSS = """
    RatingModal {
        align: center middle;
        background: $background 60%;
    }

    #rating-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #rating-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #rating-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #rating-help {
        color: #dddddd;
    }
    """

    def __init__(self, customer_name: str | None) -> None:
        super().__init__()
        self.customer_name = customer_name or UNIDENTIFIED_CUSTOMER
        self.value: int | None = None

    def compose(self) -> ComposeResult:
        with Container(id="rating-dialog"):
            yield Static(Text(f"Rate your experience, {self.customer_name}"), id="rating-title")
            yield Static(id="rating-value")
            yield Static(
                f"{RATING_MIN}-{RATING_MAX} stars. Enter confirm. Esc/q skip.",
                id="rating-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.key in {"escape", "q", "ctrl+c"}:
            self.dismiss(None)
            return

        if event.key == "enter":
            if self.value is not None:
                self.dismiss(self.value)
            return

        if event.character and event.character.isdigit():
            score = int(event.character)
            if RATING_MIN <= score <= RATING_MAX:
                self.value = score
                self._refresh_content()

    def _refresh_content(self) -> None:
        stars = "★" * (self.value or 0) + "☆" * (RATING_MAX - (self.value or 0))
        self.query_one("#rating-value", Static).update(stars)
