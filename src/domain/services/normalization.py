"""Ingestion-boundary parsing for currencies, amounts, and rates.

Amounts arrive as strings, numbers, or None from forms and imports. They
are parsed here exactly once into two-place Decimals (half-up rounding)
and never re-parsed inside the ledger.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from src.domain.constants import CurrencyCode
from src.domain.exceptions import InvalidAmountError, InvalidCurrencyError
from src.utils.decimal_utils import MONEY_QUANTUM

RATE_QUANTUM = Decimal("0.000001")
# Keeps minor units, and sums of them, well inside a signed 64-bit column.
MAX_AMOUNT = Decimal("999999999999999.99")


def normalize_currency(currency) -> CurrencyCode:
    """Normalize a currency code to a supported CurrencyCode.

    Args:
        currency: Raw code such as ``" usd"`` or a CurrencyCode.

    Returns:
        CurrencyCode: Matching supported currency.

    Raises:
        InvalidCurrencyError: If the code is missing or unsupported.
    """
    if isinstance(currency, CurrencyCode):
        return currency
    if not isinstance(currency, str):
        raise InvalidCurrencyError(currency)
    cleaned = currency.strip().upper()
    try:
        return CurrencyCode(cleaned)
    except ValueError as exc:
        raise InvalidCurrencyError(currency) from exc


def normalize_amount(value, *, allow_negative: bool = False) -> Decimal:
    """Parse a loosely typed amount into a two-place Decimal.

    Args:
        value: Decimal, int, float, or numeric string. Thousands
            separators (``","``) are accepted in strings.
        allow_negative: Accept values below zero (adjustments only).

    Returns:
        Decimal: Amount rounded half-up to two places.

    Raises:
        InvalidAmountError: If the value is missing, non-numeric, not
            finite, out of range, or negative when negatives are not
            allowed.
    """
    amount = _quantize(_parse_decimal(value), MONEY_QUANTUM, value)
    if amount < 0 and not allow_negative:
        raise InvalidAmountError(value, "must be zero or positive")
    return amount


def normalize_rate(value) -> Decimal:
    """Parse an exchange rate, keeping six decimal places.

    Args:
        value: Rate as submitted by the caller.

    Returns:
        Decimal: Non-negative rate rounded half-up to six places.

    Raises:
        InvalidAmountError: If the rate is missing, non-numeric or negative.
    """
    rate = _quantize(_parse_decimal(value), RATE_QUANTUM, value)
    if rate < 0:
        raise InvalidAmountError(value, "rate must be zero or positive")
    return rate


def _parse_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(value, "missing or non-numeric")
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            raise InvalidAmountError(value, "empty")
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation as exc:
            raise InvalidAmountError(value, "not a number") from exc
    else:
        raise InvalidAmountError(value, "unsupported type")
    if not parsed.is_finite():
        raise InvalidAmountError(value, "not finite")
    if abs(parsed) > MAX_AMOUNT:
        raise InvalidAmountError(value, "out of range")
    return parsed


def _quantize(parsed: Decimal, quantum: Decimal, value) -> Decimal:
    try:
        return parsed.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmountError(value, "out of range") from exc


__all__ = [
    "MAX_AMOUNT",
    "normalize_currency", "normalize_amount", "normalize_rate"]
