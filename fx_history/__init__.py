"""Public interface for the fx_history package."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

from fx_history.data import DEFAULT_RATES_CSV_PATH
from fx_history.errors import (
    FxHistoryError,
    InvalidAmount,
    InvalidRange,
    NoRatesForDate,
    ParseError,
    RateNotApplicable,
    Side,
    UnknownCurrency,
)
from fx_history.ingestion.ecb_csv import load, load_path
from fx_history.ingestion.models import (
    NOT_APPLICABLE,
    ConversionResult,
    RateRecord,
    RateTable,
    normalise_code,
)
from fx_history.queries import (
    StatMode,
    convert,
    convert_detailed,
    format_header,
    format_row,
    range_stats,
    rate_row,
)
from fx_history.utils.date_range import parse_date

__all__ = [
    "__version__",
    "FxHistory",
    "FxHistoryError",
    "InvalidAmount",
    "InvalidRange",
    "NOT_APPLICABLE",
    "NoRatesForDate",
    "ParseError",
    "RateNotApplicable",
    "RateTable",
    "Side",
    "StatMode",
    "UnknownCurrency",
    "load",
    "load_path",
]

try:
    __version__ = importlib_metadata.version("fx-history")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


class FxHistory:
    """Package facade that owns one loaded rate table and answers queries on it."""

    __slots__ = ("table", "source")

    # Provide direct access to the package version as a class attribute.
    __version__ = __version__

    def __init__(
        self,
        source: RateTable | str | Path | None = None,
    ) -> None:
        """Load the rate table the queries run against.

        ``source`` may be an already built :class:`RateTable`, or a path to a
        CSV (or zipped CSV) file. When omitted the bundled
        ``eurofxref-hist.csv`` is used.
        """

        if isinstance(source, RateTable):
            self.table = source
            self.source: Path | None = None
        else:
            path = Path(source) if source is not None else DEFAULT_RATES_CSV_PATH
            self.table = load_path(path)
            self.source = path

    @classmethod
    def from_text(cls, raw_text: str) -> "FxHistory":
        return cls(load(raw_text))

    @classmethod
    def from_path(cls, path: str | Path) -> "FxHistory":
        return cls(Path(path))

    def currencies(self) -> tuple[str, ...]:
        """Currency codes in the order the source header lists them."""

        return self.table.column_order

    def supports(self, currency: str) -> bool:
        """Return True when ``currency`` has at least one published entry."""

        return self.table.has_rates(normalise_code(currency))

    def rate_row(
        self,
        rate_date: date | str,
        *,
        include_not_applicable: bool = False,
    ) -> tuple[RateRecord, ...]:
        return rate_row(
            self.table,
            parse_date(rate_date),
            include_not_applicable=include_not_applicable,
        )

    def header_line(self) -> str:
        return format_header(self.table)

    def rates_line(
        self,
        rate_date: date | str,
        *,
        include_not_applicable: bool = False,
    ) -> str:
        """Return the row for ``rate_date`` rendered the way the source lists it."""

        day = parse_date(rate_date)
        row = rate_row(self.table, day, include_not_applicable=include_not_applicable)
        return format_row(day, row)

    def stats(
        self,
        start: date | str,
        end: date | str,
        currency: str,
        mode: StatMode | str,
    ) -> Decimal:
        return range_stats(self.table, parse_date(start), parse_date(end), currency, mode)

    def highest(self, start: date | str, end: date | str, currency: str) -> Decimal:
        return self.stats(start, end, currency, StatMode.MAXIMUM)

    def average(self, start: date | str, end: date | str, currency: str) -> Decimal:
        return self.stats(start, end, currency, StatMode.AVERAGE)

    def convert(
        self,
        rate_date: date | str,
        source: str,
        target: str,
        amount: Decimal | int | float | str,
    ) -> Decimal:
        return convert(self.table, parse_date(rate_date), source, target, amount)

    def convert_detailed(
        self,
        rate_date: date | str,
        source: str,
        target: str,
        amount: Decimal | int | float | str,
    ) -> ConversionResult:
        return convert_detailed(self.table, parse_date(rate_date), source, target, amount)


def __getattr__(name: str) -> Any:
    """Lazily import the CLI so library users never pay for argparse setup."""

    if name == "main":
        from fx_history.cli import main as _main

        return _main
    raise AttributeError(f"module 'fx_history' has no attribute {name}")
