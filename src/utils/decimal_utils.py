"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANTUM = Decimal("0.01")
MONEY_ROUNDING = ROUND_HALF_UP
_MINOR_UNITS = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
    """Round a Decimal to two places using half-up rounding."""
    return value.quantize(MONEY_QUANTUM, rounding=MONEY_ROUNDING)


def to_minor_units(value: Decimal) -> int:
    """Convert a money amount into integer hundredths.

    Args:
        value: Amount in major units.

    Returns:
        int: Amount in minor units, rounded half-up to the cent.
    """
    return int(quantize_money(value) * _MINOR_UNITS)


def from_minor_units(value) -> Decimal:
    """Convert stored hundredths back into a two-place Decimal.

    Args:
        value: Integer minor units as returned by the database, or None.

    Returns:
        Decimal: Amount in major units with exactly two places.
    """
    if value is None:
        return Decimal("0.00")
    return quantize_money(Decimal(int(value)) / _MINOR_UNITS)


__all__ = [
    "MONEY_QUANTUM",
    "MONEY_ROUNDING",
    "quantize_money",
    "to_minor_units",
    "from_minor_units",
]
