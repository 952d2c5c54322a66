"""Read-only queries answered from a loaded :class:`~fx_history.ingestion.models.RateTable`."""

from __future__ import annotations

from fx_history.queries.conversion import convert, convert_detailed
from fx_history.queries.lookup import format_header, format_row, rate_row
from fx_history.queries.stats import StatMode, average_rate, highest_rate, range_stats

__all__ = [
    "StatMode",
    "average_rate",
    "convert",
    "convert_detailed",
    "format_header",
    "format_row",
    "highest_rate",
    "range_stats",
    "rate_row",
]
