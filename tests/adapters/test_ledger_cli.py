"""Tests for the ledger command-line adapter."""

from unittest.mock import MagicMock

import pytest

from src.adapters import ledger_cli
from src.domain.exceptions import (
    ConcurrentModificationError,
    InvalidCurrencyError,
)


@pytest.fixture
def cli_ledger(monkeypatch, ledger):
    """Route the CLI to the SQLite-backed test ledger."""
    monkeypatch.setattr(ledger_cli, "build_cash_ledger", lambda: ledger)
    monkeypatch.setattr(ledger_cli, "get_app_logger", MagicMock)
    # Closing would dispose the shared test engine between commands.
    monkeypatch.setattr(ledger, "close", lambda: None)
    return ledger


def test_purchase_then_day(cli_ledger, capsys) -> None:
    assert ledger_cli.main(["purchase", "usd", "2024-03-01", "150"]) == 0
    assert ledger_cli.main(["deposit", "USD", "2024-03-01", "50"]) == 0
    assert ledger_cli.main(["day", "USD", "2024-03-01"]) == 0

    output = capsys.readouterr().out
    assert "USD 2024-03-01 closing=150.00 propagated=0" in output
    assert "closing:       100.00" in output


def test_day_without_row(cli_ledger, capsys) -> None:
    assert ledger_cli.main(["day", "EUR", "2024-03-01"]) == 0

    assert "No stored row for EUR on 2024-03-01." in capsys.readouterr().out


def test_statement_with_deposit_override(cli_ledger, capsys) -> None:
    ledger_cli.main(["purchase", "GBP", "2024-03-01", "80"])
    capsys.readouterr()

    status = ledger_cli.main(
        [
            "statement",
            "2024-03-01",
            "2024-03-31",
            "--deposit",
            "GBP=30",
            "--hide-empty",
        ]
    )

    lines = capsys.readouterr().out.splitlines()
    assert status == 0
    assert lines[0].split("\t") == list(ledger_cli.STATEMENT_COLUMNS)
    assert lines[1].split("\t") == [
        "GBP",
        "0.00",
        "80.00",
        "0.00",
        "0.00",
        "0.00",
        "30.00",
        "50.00",
    ]
    assert len(lines) == 2


def test_set_deposits_and_list(cli_ledger, capsys) -> None:
    ledger_cli.main(["deposit", "CHF", "2024-03-01", "10"])
    ledger_cli.main(["set-deposits", "CHF", "2024-03-01", "4"])
    capsys.readouterr()

    assert ledger_cli.main(["deposits", "CHF", "2024-03-01"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("-6.00 (adjustment)")
    assert lines[1].endswith("10.00")


def test_verify_and_rebuild(cli_ledger, capsys) -> None:
    ledger_cli.main(["purchase", "AUD", "2024-03-01", "1"])
    capsys.readouterr()

    assert ledger_cli.main(["verify"]) == 0
    assert ledger_cli.main(["rebuild", "--currency", "AUD"]) == 0

    output = capsys.readouterr().out
    assert "Ledger is consistent." in output
    assert "AUD: closing=1.00 rewritten=0" in output


def test_validation_error_exits_with_status_one(cli_ledger, capsys) -> None:
    status = ledger_cli.main(["purchase", "XYZ", "2024-03-01", "1"])

    assert status == 1
    assert "error: Unsupported currency code: 'XYZ'" in capsys.readouterr().err


def test_retryable_error_exits_with_status_two(monkeypatch, capsys) -> None:
    ledger = MagicMock()
    ledger.record_deposit.side_effect = ConcurrentModificationError(
        "USD",
        "lock not acquired within 30s",
    )
    monkeypatch.setattr(ledger_cli, "build_cash_ledger", lambda: ledger)
    monkeypatch.setattr(ledger_cli, "get_app_logger", MagicMock)

    status = ledger_cli.main(["deposit", "USD", "2024-03-01", "1"])

    err = capsys.readouterr().err
    assert status == 2
    assert "try again" in err
    ledger.close.assert_called_once()


def test_invalid_override_pair_is_a_usage_error(monkeypatch) -> None:
    monkeypatch.setattr(ledger_cli, "build_cash_ledger", MagicMock)

    with pytest.raises(SystemExit) as exc_info:
        ledger_cli.main(
            ["statement", "2024-03-01", "2024-03-02", "--deposit", "GBP"]
        )

    assert exc_info.value.code == 2


def test_errors_are_logged(monkeypatch) -> None:
    ledger = MagicMock()
    ledger.get_day.side_effect = InvalidCurrencyError("??")
    logger = MagicMock()
    monkeypatch.setattr(ledger_cli, "build_cash_ledger", lambda: ledger)
    monkeypatch.setattr(ledger_cli, "get_app_logger", lambda: logger)

    assert ledger_cli.main(["day", "??", "2024-03-01"]) == 1
    assert "INVALID_CURRENCY" in logger.error.call_args[0][0]
