"""Tests for recording customer receipts."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.record_receipt import RecordReceiptUseCase
from src.domain.constants import CurrencyCode
from src.domain.exceptions import (
    DuplicateSerialNumberError,
    InvalidCurrencyError,
    InvalidReceiptError,
)


def _receipt(**overrides):
    values = {
        "serial_number": "R-0001",
        "receipt_day": "2024-03-01",
        "customer_name": "A. Customer",
        "nic_passport": "N1234567",
        "sources": ["Salary", " ", "Savings"],
        "lines": [
            {
                "currency": "eur",
                "amount_received": "200",
                "rate": "330.5",
                "amount_issued": "66100",
            },
            {"currency": "", "amount_received": "", "rate": ""},
            {
                "currency": "USD",
                "amount_received": "1,000",
                "rate": "300.25",
                "amount_issued": "300250",
            },
        ],
        "remarks": "  ",
    }
    values.update(overrides)
    return values


def test_receipt_posts_one_purchase_per_line(ledger) -> None:
    result = ledger.record_receipt(**_receipt())

    assert result.serial_number == "R-0001"
    assert result.purchase_count == 2
    assert result.currencies == [CurrencyCode.USD, CurrencyCode.EUR]
    assert ledger.get_day("USD", "2024-03-01").purchases == Decimal("1000.00")
    assert ledger.get_day("EUR", "2024-03-01").closing_balance == Decimal(
        "200.00"
    )


def test_duplicate_serial_number_leaves_ledger_unchanged(ledger) -> None:
    """A rejected receipt writes neither the receipt nor its purchases."""
    ledger.record_receipt(**_receipt())

    with pytest.raises(DuplicateSerialNumberError) as exc_info:
        ledger.record_receipt(**_receipt(customer_name="Someone Else"))

    assert exc_info.value.serial_number == "R-0001"
    assert ledger.get_day("USD", "2024-03-01").purchases == Decimal("1000.00")
    assert ledger.verify().is_consistent


@pytest.mark.parametrize(
    "overrides",
    [
        {"serial_number": " "},
        {"customer_name": None},
        {"nic_passport": ""},
        {"sources": []},
        {"sources": ["", "  "]},
        {"lines": []},
        {"lines": [{"currency": "", "amount_received": "5"}]},
        {"lines": [None]},
        {"lines": ["USD 200 330.5"]},
        {"lines": [("USD", "200", "330.5")]},
    ],
)
def test_incomplete_receipt_is_rejected(ledger, overrides) -> None:
    with pytest.raises(InvalidReceiptError):
        ledger.record_receipt(**_receipt(**overrides))

    assert ledger.verify().rows_checked == 0


def test_none_lines_are_dropped_like_blank_lines(ledger) -> None:
    lines = [None, {"currency": "GBP", "amount_received": "40", "rate": "380"}]

    result = ledger.record_receipt(**_receipt(lines=lines))

    assert result.purchase_count == 1
    assert ledger.get_day("GBP", "2024-03-01").purchases == Decimal("40.00")


def test_unknown_line_currency_is_rejected_before_writing() -> None:
    engine = MagicMock()
    use_case = RecordReceiptUseCase(
        engine,
        transaction_log=MagicMock(),
        receipt_repository=MagicMock(),
        logger=MagicMock(),
        audit_logger=MagicMock(),
    )

    with pytest.raises(InvalidCurrencyError):
        use_case.execute(
            **_receipt(lines=[{"currency": "ZZZ", "amount_received": "1"}])
        )

    engine.run_unit.assert_not_called()


def test_receipt_unit_locks_every_line_currency() -> None:
    engine = MagicMock()
    engine.run_unit.return_value = (7, [11, 12])
    use_case = RecordReceiptUseCase(
        engine,
        transaction_log=MagicMock(),
        receipt_repository=MagicMock(),
        logger=MagicMock(),
        audit_logger=MagicMock(),
    )

    result = use_case.execute(**_receipt())

    currencies = engine.run_unit.call_args[0][0]
    assert currencies == [CurrencyCode.USD, CurrencyCode.EUR]
    assert result.receipt_id == 7
    assert result.purchase_count == 2
