"""Error taxonomy shared by the core and both front ends."""

from __future__ import annotations


class PizzeriaError(Exception):
    """Base class for every error the pizzeria core raises."""


class NotFoundError(PizzeriaError):
    """An unknown customer, product, order or cart index was referenced."""


class EmptyCartError(PizzeriaError):
    """An order was finalized with no cart lines."""


class InvalidInputError(PizzeriaError):
    """A price, quantity, rating, date or payment value could not be accepted."""


class PersistenceError(PizzeriaError):
    """The storage layer failed; the original error is chained as the cause."""
