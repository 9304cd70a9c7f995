"""Display policies for balance statements."""

from src.domain.models.ledger import StatementRow


def is_reportable_row(row: StatementRow) -> bool:
    """Return True when a statement row carries any balance or movement.

    Args:
        row: Computed statement row.

    Returns:
        bool: False for rows whose opening and movements are all zero.
    """
    figures = (
        row.opening_balance,
        row.purchases,
        row.exchange_buy,
        row.exchange_sell,
        row.sales,
        row.deposits,
    )
    return any(value != 0 for value in figures)
