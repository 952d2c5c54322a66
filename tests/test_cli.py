from __future__ import annotations

import runpy
from pathlib import Path

import pytest

from fx_history import FxHistory
from fx_history import cli as cli_module
from fx_history.cli import MENU, main, parse_args, run_shell


def _run(capsys, sample_csv_path: Path, *argv: str) -> tuple[int, list[str]]:
    code = main(["--csv", str(sample_csv_path), *argv])
    return code, capsys.readouterr().out.splitlines()


def test_parse_args_defaults() -> None:
    args = parse_args(["rates", "2020-09-14"])

    assert args.command == "rates"
    assert args.strict is False
    assert args.verbose is False
    assert args.csv_path.endswith("eurofxref-hist.csv")


def test_parse_args_requires_command() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args([])
    assert excinfo.value.code == 2


def test_rates_command(capsys, sample_csv_path: Path) -> None:
    code, out = _run(capsys, sample_csv_path, "rates", "2020-09-14")

    assert code == 0
    assert out[0].startswith("Date,USD,JPY,")
    assert out[1].startswith("2020-09-14,1.1876,125.82,")


def test_rates_command_strict(capsys, sample_csv_path: Path) -> None:
    code, out = _run(capsys, sample_csv_path, "rates", "--strict", "2020-09-14")

    assert code == 1
    assert out == ["There are no valid rates for the given date"]


def test_rates_command_invalid_date(capsys, sample_csv_path: Path) -> None:
    code, out = _run(capsys, sample_csv_path, "rates", "2020-02-30")

    assert code == 1
    assert out == ["Invalid date"]


def test_stats_commands(capsys, sample_csv_path: Path) -> None:
    assert _run(capsys, sample_csv_path, "highest", "2020-09-07", "2020-09-14", "usd") == (
        0,
        ["1.1876"],
    )
    assert _run(capsys, sample_csv_path, "average", "2020-09-07", "2020-09-14", "USD") == (
        0,
        ["1.1827"],
    )


def test_stats_command_unknown_currency(capsys, sample_csv_path: Path) -> None:
    code, out = _run(capsys, sample_csv_path, "highest", "2020-09-07", "2020-09-14", "USB")

    assert code == 1
    assert out == ["No rates found, invalid currency provided"]


def test_convert_command(capsys, sample_csv_path: Path) -> None:
    code, out = _run(capsys, sample_csv_path, "convert", "2020-09-11", "gbp", "usd", "10.0")

    assert code == 0
    assert out == ["The amount of 10.0 GBP on 2020-09-11 is equal to 12.8279 USD"]


@pytest.mark.parametrize(
    "amount, message",
    [
        ("-10", "Invalid amount provided, aborting conversion"),
        ("ten", "Invalid amount"),
    ],
)
def test_convert_command_bad_amounts(capsys, sample_csv_path: Path, amount: str, message: str) -> None:
    code, out = _run(capsys, sample_csv_path, "convert", "2020-09-11", "GBP", "USD", amount)

    assert code == 1
    assert out == [message]


def test_convert_command_large_amount(capsys, sample_csv_path: Path) -> None:
    code, out = _run(capsys, sample_csv_path, "convert", "2020-09-11", "GBP", "USD", "1e25")

    assert code == 0
    assert out[0].startswith("The amount of 1E+25 GBP on 2020-09-11 is equal to 128278")
    assert out[0].endswith(" USD")


def test_missing_csv_returns_error(tmp_path: Path) -> None:
    assert main(["--csv", str(tmp_path / "missing.csv"), "rates", "2020-09-14"]) == 1


def test_unparseable_csv_returns_error(tmp_path: Path) -> None:
    bad = tmp_path / "bad.csv"
    bad.write_text("USD,GBP\n1,2\n", encoding="utf-8")

    assert main(["--csv", str(bad), "rates", "2020-09-14"]) == 1


@pytest.mark.parametrize(
    "name, payload",
    [
        ("latin.csv", b"Date,USD\n2020-01-01,1.\xff\n"),
        ("eurofxref-hist.zip", b"not a zip archive"),
    ],
)
def test_unreadable_csv_returns_error(tmp_path: Path, name: str, payload: bytes) -> None:
    bad = tmp_path / name
    bad.write_bytes(payload)

    assert main(["--csv", str(bad), "rates", "2020-01-01"]) == 1


def _scripted(answers: list[str]):
    remaining = iter(answers)

    def _input(prompt: str) -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return _input


def test_shell_answers_every_option(app: FxHistory) -> None:
    printed: list[str] = []
    answers = [
        "1", "2020-09-14",
        "2", "2020-09-07", "2020-09-14", "usd",
        "3", "2020-09-07", "2020-09-14", "USD",
        "4", "2020-09-11", "GBP", "USD", "10",
        "q",
    ]

    run_shell(app, input_fn=_scripted(answers), print_fn=printed.append)

    assert printed.count(MENU[0]) == 5
    assert any(line.startswith("2020-09-14,1.1876,") for line in printed)
    assert "1.1876" in printed
    assert "1.1827" in printed
    assert "The amount of 10 GBP on 2020-09-11 is equal to 12.8279 USD" in printed


def test_shell_reports_errors_and_continues(app: FxHistory) -> None:
    printed: list[str] = []
    answers = [
        "1", "2020-09-13",
        "2", "bad-date",
        "3", "2020-09-14", "2020-09-07", "USD",
        "4", "2020-09-11", "GBP", "CYP", "10",
        "4", "2020-09-11", "GBP", "USD", "lots",
        "9",
        "Q",
    ]

    run_shell(app, input_fn=_scripted(answers), print_fn=printed.append)

    assert "There are no valid rates for the given date" in printed
    assert "Invalid date" in printed
    assert "Invalid date range" in printed
    assert "The rate for the target currency is not applicable, aborting conversion" in printed
    assert "Invalid amount" in printed
    assert printed.count(MENU[0]) == 7


def test_shell_stops_on_end_of_input(app: FxHistory) -> None:
    printed: list[str] = []

    run_shell(app, input_fn=_scripted(["4", "2020-09-11"]), print_fn=printed.append)

    assert printed.count(MENU[0]) == 1


def test_shell_command_uses_run_shell(monkeypatch, sample_csv_path: Path) -> None:
    called = {"value": False}

    def _fake_shell(app: FxHistory) -> None:
        called["value"] = isinstance(app, FxHistory)

    monkeypatch.setattr(cli_module, "run_shell", _fake_shell)

    assert main(["--csv", str(sample_csv_path), "shell"]) == 0
    assert called["value"] is True


def test_module_entry_point_invokes_main(monkeypatch) -> None:
    monkeypatch.setattr(cli_module, "main", lambda: 0)

    with pytest.raises(SystemExit) as excinfo:
        runpy.run_module("fx_history", run_name="__main__")
    assert excinfo.value.code == 0
