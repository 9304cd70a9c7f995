"""Tests for deposit corrections and deposit listing."""

from decimal import Decimal

import pytest

from src.domain.constants import EntryKind
from src.domain.exceptions import InvalidAmountError


def test_override_appends_adjustment_for_the_difference(ledger) -> None:
    """The log keeps the original deposit plus a signed adjustment."""
    ledger.record_purchase("USD", "2024-03-01", "500")
    ledger.record_deposit("USD", "2024-03-01", "100")
    ledger.record_purchase("USD", "2024-03-02", "10")

    result = ledger.set_deposit_override("USD", "2024-03-01", "60")

    row = ledger.get_day("USD", "2024-03-01")
    assert row.deposits == Decimal("60.00")
    assert row.closing_balance == Decimal("440.00")
    assert result.propagated_days == 1
    assert ledger.get_day("USD", "2024-03-02").closing_balance == Decimal(
        "450.00"
    )

    entries = ledger.list_deposits("USD", "2024-03-01")
    assert [entry.amount for entry in entries] == [
        Decimal("-40.00"),
        Decimal("100.00"),
    ]
    assert entries[0].is_adjustment is True
    assert entries[1].is_adjustment is False
    assert all(entry.kind is EntryKind.DEPOSIT for entry in entries)


def test_override_to_current_total_writes_nothing(ledger, audit_logger):
    ledger.record_deposit("EUR", "2024-03-01", "25")
    audit_logger.reset_mock()

    result = ledger.set_deposit_override("EUR", "2024-03-01", "25.00")

    assert result.changed is False
    assert len(ledger.list_deposits("EUR", "2024-03-01")) == 1
    audit_logger.info.assert_not_called()


def test_override_on_day_without_row_creates_it(ledger) -> None:
    ledger.set_deposit_override("GBP", "2024-03-01", "15")

    row = ledger.get_day("GBP", "2024-03-01")
    assert row.deposits == Decimal("15.00")
    assert row.closing_balance == Decimal("-15.00")


def test_override_rejects_negative_total(ledger) -> None:
    with pytest.raises(InvalidAmountError):
        ledger.set_deposit_override("GBP", "2024-03-01", "-1")


def test_list_deposits_is_empty_for_quiet_day(ledger) -> None:
    assert ledger.list_deposits("CHF", "2024-03-01") == []
