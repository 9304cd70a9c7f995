"""Tests for currency, amount, and rate parsing."""

from decimal import Decimal

import pytest

from src.domain.constants import CurrencyCode
from src.domain.exceptions import InvalidAmountError, InvalidCurrencyError
from src.domain.services.normalization import (
    normalize_amount,
    normalize_currency,
    normalize_rate,
)


def test_normalize_currency_strips_and_uppercases() -> None:
    assert normalize_currency(" usd ") is CurrencyCode.USD
    assert normalize_currency(CurrencyCode.EUR) is CurrencyCode.EUR


@pytest.mark.parametrize("value", ["", "XYZ", "US", None, 840])
def test_normalize_currency_rejects_unknown_codes(value) -> None:
    """Codes outside the supported set should raise InvalidCurrencyError."""
    with pytest.raises(InvalidCurrencyError) as exc_info:
        normalize_currency(value)

    assert exc_info.value.value == value


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("100", Decimal("100.00")),
        ("1,250.5", Decimal("1250.50")),
        (12, Decimal("12.00")),
        (0.1, Decimal("0.10")),
        (Decimal("2.345"), Decimal("2.35")),
        ("2.344", Decimal("2.34")),
        ("0", Decimal("0.00")),
    ],
)
def test_normalize_amount_rounds_half_up(value, expected) -> None:
    """Amounts are parsed once into two-place Decimals."""
    assert normalize_amount(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", True])
def test_normalize_amount_rejects_non_numeric(value) -> None:
    with pytest.raises(InvalidAmountError):
        normalize_amount(value)


def test_normalize_amount_rejects_negative_unless_allowed() -> None:
    """Negative amounts are only accepted for adjustments."""
    with pytest.raises(InvalidAmountError) as exc_info:
        normalize_amount("-5")

    assert exc_info.value.code == "INVALID_AMOUNT"
    assert normalize_amount("-5", allow_negative=True) == Decimal("-5.00")


def test_normalize_rate_keeps_six_places() -> None:
    assert normalize_rate("301.1234567") == Decimal("301.123457")


def test_normalize_rate_rejects_negative() -> None:
    with pytest.raises(InvalidAmountError):
        normalize_rate("-1")


@pytest.mark.parametrize(
    "value",
    ["1e30", "100000000000000000000", Decimal("-1E+16"), 10**18],
)
def test_normalize_amount_rejects_values_out_of_range(value) -> None:
    """Oversized amounts fail as InvalidAmountError, never a raw decimal error."""
    with pytest.raises(InvalidAmountError) as exc_info:
        normalize_amount(value, allow_negative=True)

    assert exc_info.value.reason == "out of range"


def test_normalize_amount_accepts_the_largest_amount() -> None:
    assert normalize_amount("999,999,999,999,999.99") == Decimal(
        "999999999999999.99"
    )


def test_normalize_rate_rejects_values_out_of_range() -> None:
    with pytest.raises(InvalidAmountError):
        normalize_rate("1e30")
