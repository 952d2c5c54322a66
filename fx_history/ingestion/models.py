"""Data models shared by the loader and the query helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Final, Mapping, Union


class _NotApplicable:
    """Marker for a currency that had no rate on a published day."""

    _instance: "_NotApplicable | None" = None

    def __new__(cls) -> "_NotApplicable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_APPLICABLE"

    def __str__(self) -> str:
        return "N/A"


NOT_APPLICABLE: Final = _NotApplicable()

RateRecord = Union[Decimal, _NotApplicable]


def normalise_code(currency: str) -> str:
    """Currency codes are matched case-insensitively and stored uppercase."""

    return currency.strip().upper()


@dataclass(frozen=True)
class RateTable:
    """Per-currency, date-indexed store of reference rates.

    ``currencies`` maps an uppercase currency code to a mapping of
    ``date -> RateRecord``; ``column_order`` keeps the header order of the
    source so full rows can be rebuilt. Both are read-only views once the
    table has been constructed.
    """

    currencies: Mapping[str, Mapping[date, RateRecord]]
    column_order: tuple[str, ...]
    _dates: tuple[date, ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self) -> None:
        frozen = {
            code: MappingProxyType(dict(self.currencies.get(code, {})))
            for code in self.column_order
        }
        for code, rates in self.currencies.items():
            frozen.setdefault(code, MappingProxyType(dict(rates)))
        object.__setattr__(self, "currencies", MappingProxyType(frozen))
        object.__setattr__(self, "column_order", tuple(self.column_order))
        days = {day for rates in frozen.values() for day in rates}
        object.__setattr__(self, "_dates", tuple(sorted(days)))

    def rates_for(self, currency: str) -> Mapping[date, RateRecord]:
        """Return the date map of ``currency`` (empty when it is unknown)."""

        return self.currencies.get(currency, MappingProxyType({}))

    def rate(self, currency: str, rate_date: date) -> RateRecord | None:
        """Return the stored record or ``None`` when the date has no entry."""

        return self.rates_for(currency).get(rate_date)

    def applicable_rate(self, currency: str, rate_date: date) -> Decimal | None:
        """Return the decimal rate, or ``None`` if it is missing or ``N/A``."""

        record = self.rate(currency, rate_date)
        if isinstance(record, Decimal):
            return record
        return None

    def has_rates(self, currency: str) -> bool:
        return bool(self.rates_for(currency))

    @property
    def dates(self) -> tuple[date, ...]:
        """Sorted dates that have at least one published entry."""

        return self._dates

    @property
    def first_date(self) -> date | None:
        return self._dates[0] if self._dates else None

    @property
    def last_date(self) -> date | None:
        return self._dates[-1] if self._dates else None

    def __len__(self) -> int:
        return len(self._dates)


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    """Inputs of a single cross-rate conversion."""

    rate_date: date
    source: str
    target: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Outcome of a conversion, kept together for presentation."""

    request: ConversionRequest
    source_rate: Decimal
    target_rate: Decimal
    cross_rate: Decimal
    converted: Decimal


__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "NOT_APPLICABLE",
    "RateRecord",
    "RateTable",
    "normalise_code",
]
