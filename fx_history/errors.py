"""Exception hierarchy raised by the fx_history loaders and queries."""

from __future__ import annotations

from datetime import date
from enum import Enum


class Side(str, Enum):
    """Which leg of a conversion an error refers to."""

    SOURCE = "source"
    TARGET = "target"


class FxHistoryError(ValueError):
    """Base class for every error reported by fx_history."""


class ParseError(FxHistoryError):
    """Raised when the raw rate table cannot be loaded."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class UnknownCurrency(FxHistoryError):
    """Raised when a currency code has no rates in the loaded table."""

    def __init__(self, currency: str, side: Side | None = None) -> None:
        self.currency = currency
        self.side = side
        if side is None:
            message = "No rates found, invalid currency provided"
        else:
            message = f"No rates found, invalid {side.value} currency provided"
        super().__init__(message)


class NoRatesForDate(FxHistoryError):
    """Raised when at least one currency has no applicable rate on a date."""

    def __init__(self, rate_date: date, missing: tuple[str, ...] = ()) -> None:
        self.rate_date = rate_date
        self.missing = missing
        super().__init__("There are no valid rates for the given date")


class InvalidRange(FxHistoryError):
    """Raised when a date range starts after it ends."""

    def __init__(self, start: date, end: date) -> None:
        self.start = start
        self.end = end
        super().__init__("Invalid date range")


class InvalidAmount(FxHistoryError):
    """Raised when a conversion amount is not a positive number."""

    def __init__(self, amount: object) -> None:
        self.amount = amount
        super().__init__("Invalid amount provided, aborting conversion")


class RateNotApplicable(FxHistoryError):
    """Raised when a conversion leg has no usable rate on the requested date."""

    def __init__(self, currency: str, side: Side, rate_date: date) -> None:
        self.currency = currency
        self.side = side
        self.rate_date = rate_date
        super().__init__(
            f"The rate for the {side.value} currency is not applicable, aborting conversion"
        )


__all__ = [
    "FxHistoryError",
    "InvalidAmount",
    "InvalidRange",
    "NoRatesForDate",
    "ParseError",
    "RateNotApplicable",
    "Side",
    "UnknownCurrency",
]
