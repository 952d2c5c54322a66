"""Rebuild the full published row of rates for a single day."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from fx_history.errors import NoRatesForDate
from fx_history.ingestion.ecb_csv import DATE_COLUMN
from fx_history.ingestion.models import NOT_APPLICABLE, RateRecord, RateTable
from fx_history.utils.logger import get_logger

LOGGER = get_logger(__name__)


def rate_row(
    table: RateTable,
    rate_date: date,
    *,
    include_not_applicable: bool = False,
) -> tuple[RateRecord, ...]:
    """Return every currency's rate on ``rate_date`` in header order.

    By default the row is only returned when each currency has an applicable
    rate, so a weekend, a holiday or a currency that was not yet (or no
    longer) quoted makes the whole row unavailable. With
    ``include_not_applicable`` the ``N/A`` cells of a published day are kept
    as :data:`NOT_APPLICABLE` and only days without an entry fail.
    """

    row: list[RateRecord] = []
    missing: list[str] = []
    for code in table.column_order:
        record = table.rate(code, rate_date)
        if record is None or (record is NOT_APPLICABLE and not include_not_applicable):
            missing.append(code)
        else:
            row.append(record)
    if missing:
        LOGGER.debug("No complete row for %s; missing %s", rate_date, ", ".join(missing))
        raise NoRatesForDate(rate_date, tuple(missing))
    return tuple(row)


def format_row(rate_date: date, rates: Iterable[RateRecord]) -> str:
    """Render ``<date>,<rate1>,...,<rateN>,`` keeping each value as stored."""

    return "".join(f"{value}," for value in (rate_date.isoformat(), *rates))


def format_header(table: RateTable) -> str:
    """Render the header line matching :func:`format_row` output."""

    return "".join(f"{token}," for token in (DATE_COLUMN, *table.column_order))


__all__ = ["format_header", "format_row", "rate_row"]
