"""Load ECB-style historical reference-rate CSV data into a :class:`RateTable`."""

from __future__ import annotations

import csv
import io
import zipfile
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Sequence

from fx_history.errors import ParseError
from fx_history.ingestion.models import NOT_APPLICABLE, RateRecord, RateTable
from fx_history.utils.logger import get_logger

LOGGER = get_logger(__name__)

DATE_COLUMN = "Date"
DATE_FORMAT = "%Y-%m-%d"
NOT_APPLICABLE_TOKEN = "N/A"


class ECBCSVParser:
    """Parse the ``Date,USD,JPY,...`` layout published by the ECB.

    Each data line holds one business day; ``N/A`` marks a currency that was
    not quoted on that day. Lines may end with a trailing comma.
    """

    def __init__(self, *, date_format: str = DATE_FORMAT) -> None:
        self.date_format = date_format

    def parse(self, csv_path: str | Path, *, encoding: str = "utf-8") -> RateTable:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(path)
        LOGGER.info("Loading reference rates from %s", path)
        try:
            raw = path.read_text(encoding=encoding)
        except UnicodeDecodeError as exc:
            raise ParseError(f"{path.name} is not valid {encoding} text") from exc
        return self.parse_text(raw)

    def parse_zip(self, zip_path: str | Path, *, encoding: str = "utf-8") -> RateTable:
        """Parse the first CSV member of an archive such as ``eurofxref-hist.zip``."""

        path = Path(zip_path)
        if not path.exists():
            raise FileNotFoundError(path)
        try:
            with zipfile.ZipFile(path) as archive:
                members = [
                    name for name in archive.namelist() if name.lower().endswith(".csv")
                ]
                if not members:
                    raise ParseError(f"{path.name} does not contain a CSV file")
                LOGGER.info("Loading reference rates from %s!%s", path, members[0])
                raw = archive.read(members[0]).decode(encoding)
        except zipfile.BadZipFile as exc:
            raise ParseError(f"{path.name} is not a valid zip archive") from exc
        except UnicodeDecodeError as exc:
            raise ParseError(f"{path.name}!{members[0]} is not valid {encoding} text") from exc
        return self.parse_text(raw)

    def parse_text(self, raw_text: str) -> RateTable:
        reader = csv.reader(io.StringIO(raw_text))
        header = next(reader, None)
        column_order = self._parse_header(header)
        currencies: dict[str, dict[date, RateRecord]] = {code: {} for code in column_order}

        rows = 0
        for row in reader:
            line_number = reader.line_num
            cells = _drop_line_terminator(row, len(column_order) + 1)
            if not any(cells):
                continue
            rate_date = self._parse_date(cells[0], line_number)
            values = cells[1:]
            if len(values) > len(column_order):
                raise ParseError(
                    f"expected at most {len(column_order)} rates, found {len(values)}",
                    line_number=line_number,
                )
            for code, raw_value in zip(column_order, values):
                currencies[code][rate_date] = _parse_rate(raw_value, code, line_number)
            rows += 1

        table = RateTable(currencies=currencies, column_order=column_order)
        LOGGER.info(
            "Loaded %s rows for %s currencies (%s → %s)",
            rows,
            len(column_order),
            table.first_date,
            table.last_date,
        )
        return table

    @staticmethod
    def _parse_header(header: Sequence[str] | None) -> tuple[str, ...]:
        tokens = _drop_line_terminator(header or [])
        if not tokens:
            raise ParseError("CSV data does not contain a header row", line_number=1)
        if tokens[0].lower() != DATE_COLUMN.lower():
            raise ParseError("Unexpected CSV header format", line_number=1)
        codes = tuple(token.upper() for token in tokens[1:])
        if any(not code for code in codes):
            raise ParseError("header contains an empty currency code", line_number=1)
        duplicates = sorted({code for code in codes if codes.count(code) > 1})
        if duplicates:
            raise ParseError(
                f"duplicate currency columns: {', '.join(duplicates)}", line_number=1
            )
        return codes

    def _parse_date(self, value: str, line_number: int) -> date:
        try:
            return datetime.strptime(value, self.date_format).date()
        except ValueError as exc:
            raise ParseError(f"invalid date {value!r}", line_number=line_number) from exc


def _drop_line_terminator(cells: Iterable[str], width: int | None = None) -> list[str]:
    """Strip cells and drop the empty token a line-ending comma leaves behind.

    ``width`` is the number of cells a complete line holds. An empty last cell
    inside that width is a blank rate, not a terminator, and is kept.
    """

    stripped = [cell.strip() for cell in cells]
    if stripped and not stripped[-1] and (width is None or len(stripped) > width):
        stripped.pop()
    return stripped


def _parse_rate(value: str, currency: str, line_number: int) -> RateRecord:
    if not value or value.upper() == NOT_APPLICABLE_TOKEN:
        return NOT_APPLICABLE
    try:
        rate = Decimal(value)
    except InvalidOperation as exc:
        raise ParseError(
            f"invalid rate {value!r} for {currency}", line_number=line_number
        ) from exc
    if not rate.is_finite() or rate <= 0:
        raise ParseError(f"invalid rate {value!r} for {currency}", line_number=line_number)
    return rate


def load(raw_text: str) -> RateTable:
    """Build a :class:`RateTable` from raw CSV text."""

    return ECBCSVParser().parse_text(raw_text)


def load_path(csv_path: str | Path, *, encoding: str = "utf-8") -> RateTable:
    """Build a :class:`RateTable` from a CSV (or zipped CSV) file on disk."""

    path = Path(csv_path)
    parser = ECBCSVParser()
    if path.suffix.lower() == ".zip":
        return parser.parse_zip(path, encoding=encoding)
    return parser.parse(path, encoding=encoding)


__all__ = [
    "DATE_COLUMN",
    "ECBCSVParser",
    "NOT_APPLICABLE_TOKEN",
    "load",
    "load_path",
]
