"""Maximum and average of a currency's rate over an inclusive date range."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, DefaultContext, localcontext
from enum import Enum
from typing import Final

from fx_history.errors import UnknownCurrency
from fx_history.ingestion.models import RateTable, normalise_code
from fx_history.utils.date_range import DateRange
from fx_history.utils.logger import get_logger

LOGGER = get_logger(__name__)

RATE_DECIMAL_PLACES: Final = 4
RATE_QUANTUM: Final = Decimal(1).scaleb(-RATE_DECIMAL_PLACES)
ZERO: Final = Decimal(0)


class StatMode(str, Enum):
    """Aggregations supported by :func:`range_stats`."""

    MAXIMUM = "max"
    AVERAGE = "average"

    @classmethod
    def from_value(cls, value: "StatMode | str") -> "StatMode":
        if isinstance(value, cls):
            return value
        lowered = value.strip().lower()
        if lowered in {"max", "maximum", "highest"}:
            return cls.MAXIMUM
        if lowered in {"avg", "average", "mean"}:
            return cls.AVERAGE
        raise ValueError("mode must be one of: max, average")


def quantize_rate(value: Decimal) -> Decimal:
    """Round to the four decimal places used by the published rates.

    The context precision is raised for values too large to carry four
    decimals in the default 28 digits.
    """

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + RATE_DECIMAL_PLACES + 2)
        return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def working_precision(value: Decimal) -> int:
    """Digits needed to carry ``value`` plus a full default-precision fraction."""

    return DefaultContext.prec + max(value.adjusted(), 0) + RATE_DECIMAL_PLACES


def range_stats(
    table: RateTable,
    start: date,
    end: date,
    currency: str,
    mode: StatMode | str,
) -> Decimal:
    """Aggregate ``currency`` over ``start``..``end`` inclusive.

    Days without an applicable rate are skipped entirely. If no day in the
    range is applicable the result is ``0`` for both modes.
    """

    code = normalise_code(currency)
    stat_mode = StatMode.from_value(mode)
    rates = table.rates_for(code)
    if not rates:
        raise UnknownCurrency(code)
    window = DateRange(start=start, end=end)

    highest = ZERO
    total = ZERO
    applicable_days = 0
    with localcontext() as ctx:
        for day in window:
            rate = table.applicable_rate(code, day)
            if rate is None:
                continue
            if rate > highest:
                highest = rate
            ctx.prec = max(ctx.prec, working_precision(rate))
            total += rate
            applicable_days += 1

    LOGGER.debug(
        "%s %s over %s → %s: %s applicable of %s days",
        stat_mode.value,
        code,
        start,
        end,
        applicable_days,
        len(window),
    )
    if stat_mode is StatMode.MAXIMUM:
        return highest
    if applicable_days == 0:
        return ZERO
    with localcontext() as ctx:
        ctx.prec = working_precision(total)
        return quantize_rate(total / applicable_days)


def highest_rate(table: RateTable, start: date, end: date, currency: str) -> Decimal:
    return range_stats(table, start, end, currency, StatMode.MAXIMUM)


def average_rate(table: RateTable, start: date, end: date, currency: str) -> Decimal:
    return range_stats(table, start, end, currency, StatMode.AVERAGE)


__all__ = [
    "RATE_DECIMAL_PLACES",
    "StatMode",
    "average_rate",
    "highest_rate",
    "quantize_rate",
    "range_stats",
    "working_precision",
]
