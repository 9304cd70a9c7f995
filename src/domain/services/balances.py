"""Closing-balance rules for daily currency rows.

These functions hold the arithmetic of the recalculation engine. They are
pure: storage access and ordering live in the recalculation use case.
"""

from datetime import date
from decimal import Decimal

from src.domain.constants import CurrencyCode
from src.domain.models.ledger import DailyBalance, Movements
from src.utils.decimal_utils import quantize_money


def compute_closing(opening: Decimal, movements: Movements) -> Decimal:
    """Return ``opening + purchases + exchange_buy - exchange_sell - sales - deposits``.

    Args:
        opening: Opening balance of the day.
        movements: Movement totals of the day.

    Returns:
        Decimal: Closing balance, two places.
    """
    return quantize_money(opening + movements.net)


def rebalance_day(
    currency: CurrencyCode,
    day: date,
    opening: Decimal,
    movements: Movements,
) -> DailyBalance:
    """Build the row for a day from its opening and fresh movement totals."""
    return DailyBalance(
        currency=currency,
        day=day,
        opening_balance=quantize_money(opening),
        purchases=movements.purchases,
        exchange_buy=movements.exchange_buy,
        exchange_sell=movements.exchange_sell,
        sales=movements.sales,
        deposits=movements.deposits,
        closing_balance=compute_closing(opening, movements),
    )


def carry_forward(row: DailyBalance, opening: Decimal) -> DailyBalance:
    """Apply a new opening balance to a stored row, keeping its movements.

    Args:
        row: Existing later row.
        opening: Closing balance carried from the previous row.

    Returns:
        DailyBalance: Row with updated opening and closing balances.
    """
    return rebalance_day(row.currency, row.day, opening, row.movements())


def same_balances(left: DailyBalance | None, right: DailyBalance) -> bool:
    """Return True when two rows hold the same figures."""
    if left is None:
        return False
    return (
        left.opening_balance == right.opening_balance
        and left.movements() == right.movements()
        and left.closing_balance == right.closing_balance
    )


__all__ = [
    "compute_closing",
    "rebalance_day",
    "carry_forward",
    "same_balances",
]
