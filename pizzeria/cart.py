"""Session-scoped shopping cart.

A ``Cart`` belongs to whoever created it: the console session keeps one for
its lifetime, the API builds one per request. Nothing here is shared
between sessions.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Iterator

from pizzeria.errors import InvalidInputError, NotFoundError
from pizzeria.models import CartLine, CartView


class Cart:
    """Ordered cart lines, merged on ``(product_id, note)``."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.view().lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines), Decimal("0.00"))

    def add(self, line: CartLine) -> CartLine:
        """Add a line, summing quantities into an existing line with the same product and note.

        Returns the cart's copy of the affected line.
        """
        if line.quantity < 1:
            raise InvalidInputError("Quantity must be at least 1")

        existing = next((ci for ci in self._lines if ci.merge_key == line.merge_key), None)
        if existing is not None:
            existing.quantity += line.quantity
            return replace(existing)

        copied = replace(line, note=line.note or None)
        self._lines.append(copied)
        return replace(copied)

    def remove(self, index: int) -> CartLine:
        """Remove the line at a 1-based position and return it."""
        if not (1 <= index <= len(self._lines)):
            raise NotFoundError(f"No cart line at position {index}")
        return self._lines.pop(index - 1)

    def set_note(self, index: int, note: str | None) -> CartLine:
        """Change a line's note; it merges into a line that already carries that note."""
        line = self.remove(index)
        updated = replace(line, note=(note or "").strip() or None)
        existing_index = next(
            (idx for idx, ci in enumerate(self._lines) if ci.merge_key == updated.merge_key),
            None,
        )
        if existing_index is None:
            self._lines.insert(index - 1, updated)
            return replace(updated)
        return self.add(updated)

    def view(self) -> CartView:
        """Copies of the current lines plus the running total."""
        return CartView(lines=tuple(replace(line) for line in self._lines), total=self.total)

    def clear(self) -> None:
        self._lines.clear()
