"""Invariant checks for stored daily balance rows."""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.constants import EntryKind
from src.domain.models.ledger import ZERO, DailyBalance
from src.domain.models.ledger_report import LedgerIssue
from src.domain.services.balances import compute_closing

CHECK_CLOSING_FORMULA = "closing_formula"
CHECK_OPENING_CHAIN = "opening_chain"
CHECK_PURCHASES_MATCH_LOG = "purchases_match_log"
CHECK_DEPOSITS_MATCH_LOG = "deposits_match_log"
CHECK_ROW_PRESENT = "row_present"


def check_closing_formula(row: DailyBalance) -> LedgerIssue | None:
    """Return an issue when the stored closing ignores the formula."""
    expected = compute_closing(row.opening_balance, row.movements())
    if expected == row.closing_balance:
        return None
    return LedgerIssue(
        currency=row.currency,
        day=row.day,
        check=CHECK_CLOSING_FORMULA,
        expected=expected,
        actual=row.closing_balance,
    )


def check_opening_chain(
    rows: Iterable[DailyBalance],
) -> list[LedgerIssue]:
    """Check that each row opens with the closing of the row before it.

    Args:
        rows: Rows of a single currency in ascending day order.

    Returns:
        list[LedgerIssue]: One issue per broken link. The first row must
        open at zero.
    """
    issues = []
    carry = ZERO
    for row in rows:
        if row.opening_balance != carry:
            issues.append(
                LedgerIssue(
                    currency=row.currency,
                    day=row.day,
                    check=CHECK_OPENING_CHAIN,
                    expected=carry,
                    actual=row.opening_balance,
                )
            )
        carry = row.closing_balance
    return issues


def check_movements_match_log(
    row: DailyBalance,
    log_totals: Mapping[EntryKind, Decimal],
) -> list[LedgerIssue]:
    """Compare a row's movement totals with the transaction log sums."""
    issues = []
    pairs = (
        (CHECK_PURCHASES_MATCH_LOG, EntryKind.PURCHASE, row.purchases),
        (CHECK_DEPOSITS_MATCH_LOG, EntryKind.DEPOSIT, row.deposits),
    )
    for check, kind, actual in pairs:
        expected = log_totals.get(kind, ZERO)
        if expected != actual:
            issues.append(
                LedgerIssue(
                    currency=row.currency,
                    day=row.day,
                    check=check,
                    expected=expected,
                    actual=actual,
                )
            )
    return issues


def warn_negative_closing(row: DailyBalance, logger: Logger) -> None:
    """Warn when a day closes with less currency than zero.

    Args:
        row: Freshly computed row.
        logger: Logger used for warnings.
    """
    if row.closing_balance < 0:
        logger.warning(
            f"Negative closing balance for {row.currency.value} on "
            f"{row.day.isoformat()}: {row.closing_balance}"
        )


def find_unmaterialized_days(
    rows: Iterable[DailyBalance],
    logged_days: Iterable[date],
) -> list[date]:
    """Return logged days that have no stored row."""
    stored = {row.day for row in rows}
    return sorted(day for day in set(logged_days) if day not in stored)


__all__ = [
    "CHECK_CLOSING_FORMULA",
    "CHECK_OPENING_CHAIN",
    "CHECK_PURCHASES_MATCH_LOG",
    "CHECK_DEPOSITS_MATCH_LOG",
    "CHECK_ROW_PRESENT",
    "check_closing_formula",
    "check_opening_chain",
    "check_movements_match_log",
    "warn_negative_closing",
    "find_unmaterialized_days",
]
