"""Cross-currency conversion pivoting through the table's reference currency."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, DecimalException, InvalidOperation, localcontext

from fx_history.errors import InvalidAmount, RateNotApplicable, Side, UnknownCurrency
from fx_history.ingestion.models import (
    ConversionRequest,
    ConversionResult,
    RateTable,
    normalise_code,
)
from fx_history.queries.stats import quantize_rate, working_precision
from fx_history.utils.logger import get_logger

LOGGER = get_logger(__name__)


def to_amount(value: Decimal | int | float | str) -> Decimal:
    """Coerce user-supplied amounts into a positive :class:`Decimal`."""

    if isinstance(value, bool):
        raise InvalidAmount(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise InvalidAmount(value) from exc
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount(value)
    return amount


def convert_detailed(
    table: RateTable,
    rate_date: date,
    source: str,
    target: str,
    amount: Decimal | int | float | str,
) -> ConversionResult:
    """Convert ``amount`` of ``source`` into ``target`` on ``rate_date``.

    Table rates are quoted as units of currency per one reference unit, so the
    cross rate is ``target_rate / source_rate``.
    """

    value = to_amount(amount)
    request = ConversionRequest(
        rate_date=rate_date,
        source=normalise_code(source),
        target=normalise_code(target),
        amount=value,
    )
    for code, side in ((request.source, Side.SOURCE), (request.target, Side.TARGET)):
        if not table.has_rates(code):
            raise UnknownCurrency(code, side)

    source_rate = table.applicable_rate(request.source, rate_date)
    if source_rate is None:
        raise RateNotApplicable(request.source, Side.SOURCE, rate_date)
    target_rate = table.applicable_rate(request.target, rate_date)
    if target_rate is None:
        raise RateNotApplicable(request.target, Side.TARGET, rate_date)

    cross_rate = target_rate / source_rate
    try:
        with localcontext() as ctx:
            ctx.prec = working_precision(value) + max(cross_rate.adjusted(), 0)
            converted = quantize_rate(value * target_rate / source_rate)
    except DecimalException as exc:
        # Only amounts near the decimal exponent limit get here.
        raise InvalidAmount(amount) from exc
    LOGGER.debug(
        "Converted %s %s → %s %s on %s (cross rate %s)",
        value,
        request.source,
        converted,
        request.target,
        rate_date,
        cross_rate,
    )
    return ConversionResult(
        request=request,
        source_rate=source_rate,
        target_rate=target_rate,
        cross_rate=cross_rate,
        converted=converted,
    )


def convert(
    table: RateTable,
    rate_date: date,
    source: str,
    target: str,
    amount: Decimal | int | float | str,
) -> Decimal:
    """Return ``amount`` converted from ``source`` to ``target``, 4 decimals."""

    return convert_detailed(table, rate_date, source, target, amount).converted


__all__ = ["convert", "convert_detailed", "to_amount"]
