"""Note picker for one cart line."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from pizzeria.models import CartLine
from pizzeria.rendering import format_cart_line

WRITE_NOTE_LABEL = "Write a note..."


class NotesModal(ModalScreen[str | None]):
    """Pick one preset note, write a free-text note, or clear the note.

    Dismisses with the new note (``""`` clears it), or ``None`` when the
    note is left as it was.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("up", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("enter", "choose", "Choose"),
    ]

    CSS = """
    NotesModal {
        align: center middle;
        background: $background 60%;
    }

    #notes-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #notes-line {
        margin-bottom: 1;
        color: white;
    }

    #notes-choices {
        color: white;
    }

    #notes-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, line: CartLine, presets: list[str]) -> None:
        super().__init__()
        self.line = line
        self.selected = line.note or ""
        self.choices = list(presets)
        if self.selected and self.selected not in self.choices:
            self.choices.append(self.selected)
        self.cursor = self.choices.index(self.selected) if self.selected else 0
        self.writing = False
        self.draft = ""

    def compose(self) -> ComposeResult:
        with Container(id="notes-dialog"):
            yield Static(format_cart_line(self.line), id="notes-line")
            yield Static(id="notes-choices")
            yield Static(id="notes-help")

    def on_mount(self) -> None:
        self._render_choices()

    def on_key(self, event: Key) -> None:
        if not self.writing:
            return
        event.stop()

        if event.key == "escape":
            self.writing = False
        elif event.key == "enter":
            self._accept_draft()
        elif event.key == "backspace":
            self.draft = self.draft[:-1]
        elif event.is_printable and event.character:
            self.draft += event.character
        self._render_choices()

    def action_close(self) -> None:
        changed = self.selected != (self.line.note or "")
        self.dismiss(self.selected if changed else None)

    def action_move(self, delta: int) -> None:
        rows = len(self.choices) + 1
        self.cursor = (self.cursor + delta) % rows
        self._render_choices()

    def action_choose(self) -> None:
        if self.cursor == len(self.choices):
            self.writing = True
            self.draft = ""
        else:
            choice = self.choices[self.cursor]
            self.selected = "" if self.selected == choice else choice
        self._render_choices()

    def _accept_draft(self) -> None:
        note = self.draft.strip()
        self.writing = False
        self.draft = ""
        if not note:
            return
        if note not in self.choices:
            self.choices.append(note)
        self.selected = note
        self.cursor = self.choices.index(note)

    def _render_choices(self) -> None:
        content = Text()
        for idx, choice in enumerate(self.choices):
            pointer = "➤ " if idx == self.cursor else "  "
            mark = "(x)" if choice == self.selected else "( )"
            content.append(f"{pointer}{mark} {choice}\n", style="bold white" if choice == self.selected else "white")

        pointer = "➤ " if self.cursor == len(self.choices) else "  "
        if self.writing:
            content.append(f"{pointer}    {self.draft}|", style="bold white")
        else:
            content.append(f"{pointer}    {WRITE_NOTE_LABEL}", style="dim")
        self.query_one("#notes-choices", Static).update(content)

        help_text = (
            "Type the note, Enter save, Esc cancel"
            if self.writing
            else "J/K/↑/↓ move, Enter select or clear, Esc/q done"
        )
        self.query_one("#notes-help", Static).update(help_text)
