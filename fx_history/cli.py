"""Command line and interactive shell for querying historical reference rates."""

from __future__ import annotations

import argparse
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Sequence

from fx_history import FxHistory
from fx_history.data import DEFAULT_RATES_CSV_PATH
from fx_history.errors import FxHistoryError
from fx_history.queries.stats import StatMode
from fx_history.utils.date_range import parse_date
from fx_history.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)

__all__ = ["build_parser", "parse_args", "run_shell", "main"]

MENU = (
    "Options",
    "Type 1 to retrieve the rates of a specific date.",
    "Type 2 to retrieve the highest rate of a currency within a specific region of dates.",
    "Type 3 to retrieve the average rate of a currency within a specific region of dates.",
    "Type 4 to convert an amount of money from a source currency to a target one "
    "using the exchange rates of a particular date.",
    "Type Q or q to quit",
)

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]


class _InvalidInput(Exception):
    """Raised for user input the shell cannot turn into a typed value."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fx-history", description=__doc__)
    parser.add_argument(
        "--csv",
        dest="csv_path",
        default=str(DEFAULT_RATES_CSV_PATH),
        help="Reference-rate CSV (or .zip) file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    rates = commands.add_parser("rates", help="Print every rate published on a date")
    rates.add_argument("date", help="Date (YYYY-MM-DD)")
    rates.add_argument(
        "--strict",
        action="store_true",
        help="Fail unless every currency has a rate (N/A cells included)",
    )

    for name, help_text in (
        ("highest", "Highest rate of a currency within a date range"),
        ("average", "Average rate of a currency within a date range"),
    ):
        stats = commands.add_parser(name, help=help_text)
        stats.add_argument("start", help="Start date (YYYY-MM-DD)")
        stats.add_argument("end", help="End date (YYYY-MM-DD)")
        stats.add_argument("currency", help="Currency code, e.g. USD")

    convert = commands.add_parser("convert", help="Convert an amount between two currencies")
    convert.add_argument("date", help="Date (YYYY-MM-DD)")
    convert.add_argument("source", help="Source currency code")
    convert.add_argument("target", help="Target currency code")
    convert.add_argument("amount", help="Amount of the source currency")

    commands.add_parser("shell", help="Start the interactive menu")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _read_date(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise _InvalidInput("Invalid date") from exc


def _read_amount(value: str) -> Decimal:
    # Only the syntax is checked here; the sign is validated by the conversion.
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise _InvalidInput("Invalid amount") from exc


def _rates(app: FxHistory, raw_date: str, *, strict: bool = False) -> list[str]:
    day = _read_date(raw_date)
    return [app.header_line(), app.rates_line(day, include_not_applicable=not strict)]


def _stats(app: FxHistory, start: str, end: str, currency: str, mode: StatMode) -> list[str]:
    start_day = _read_date(start)
    end_day = _read_date(end)
    return [str(app.stats(start_day, end_day, currency, mode))]


def _convert(app: FxHistory, raw_date: str, source: str, target: str, amount: str) -> list[str]:
    day = _read_date(raw_date)
    value = _read_amount(amount)
    result = app.convert_detailed(day, source, target, value)
    request = result.request
    return [
        f"The amount of {request.amount} {request.source} on {request.rate_date} "
        f"is equal to {result.converted} {request.target}"
    ]


def run_shell(
    app: FxHistory,
    *,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
) -> None:
    """Numbered menu loop; every error is reported and the loop continues."""

    while True:
        for line in MENU:
            print_fn(line)
        try:
            choice = input_fn("> ").strip()
        except EOFError:
            return
        if choice.lower() == "q":
            return
        try:
            if choice == "1":
                lines = _rates(app, input_fn("Please provide a date with the format YYYY-MM-DD: "))
            elif choice in {"2", "3"}:
                start = _read_date(
                    input_fn("Please provide a start date with the format YYYY-MM-DD: ")
                )
                end = _read_date(
                    input_fn("Please provide an end date with the format YYYY-MM-DD: ")
                )
                currency = input_fn("Please provide the currency: ")
                mode = StatMode.MAXIMUM if choice == "2" else StatMode.AVERAGE
                lines = [str(app.stats(start, end, currency, mode))]
            elif choice == "4":
                raw_date = input_fn("Please provide a date with the format YYYY-MM-DD: ")
                _read_date(raw_date)
                source = input_fn("Please provide the source currency: ")
                target = input_fn("Please provide the target currency: ")
                amount = input_fn("Please provide the amount of money to be converted: ")
                lines = _convert(app, raw_date, source, target, amount)
            else:
                continue
        except EOFError:
            return
        except _InvalidInput as exc:
            lines = [str(exc)]
        except FxHistoryError as exc:
            LOGGER.debug("Query failed: %s", exc)
            lines = [str(exc)]
        for line in lines:
            print_fn(line)
        print_fn("")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    set_verbosity(args.verbose)
    try:
        app = FxHistory(args.csv_path)
    except FileNotFoundError as exc:
        LOGGER.error("Reference-rate file not found: %s", exc)
        return 1
    except FxHistoryError as exc:
        LOGGER.error("Could not load %s: %s", args.csv_path, exc)
        return 1

    if args.command == "shell":
        run_shell(app)
        return 0

    try:
        if args.command == "rates":
            lines = _rates(app, args.date, strict=args.strict)
        elif args.command == "convert":
            lines = _convert(app, args.date, args.source, args.target, args.amount)
        else:
            mode = StatMode.MAXIMUM if args.command == "highest" else StatMode.AVERAGE
            lines = _stats(app, args.start, args.end, args.currency, mode)
    except _InvalidInput as exc:
        print(exc)
        return 1
    except FxHistoryError as exc:
        LOGGER.warning("%s failed: %s", args.command, exc)
        print(exc)
        return 1
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
