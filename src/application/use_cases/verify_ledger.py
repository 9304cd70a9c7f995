"""Use case checking stored balance rows against the transaction log.

The checks mirror the ledger invariants: every row satisfies the closing
formula, every row opens with the closing of the row before it, every
row's movement totals equal the log sums for its day, and every logged day
has a row.
"""

from sqlalchemy.engine import Connection

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import LedgerStorePort
from src.application.ports.transaction_log import TransactionLogPort
from src.domain.constants import CurrencyCode, EntryKind
from src.domain.models import LedgerIssue, LedgerReport
from src.domain.services.normalization import normalize_currency
from src.domain.services.validation import (
    CHECK_ROW_PRESENT,
    check_closing_formula,
    check_movements_match_log,
    check_opening_chain,
    find_unmaterialized_days,
)
from src.infrastructure.logging.logger import get_app_logger


class VerifyLedgerUseCase:
    """Report invariant violations without modifying the ledger."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        ledger_store: LedgerStorePort,
        transaction_log: TransactionLogPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            db_port: Port providing read snapshots of the ledger.
            ledger_store: Store of daily balance rows.
            transaction_log: Source of truth for movement totals.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._ledger_store = ledger_store
        self._transaction_log = transaction_log
        self._logger = logger or get_app_logger()

    def execute(self, currency=None) -> LedgerReport:
        """Verify one currency, or all supported currencies.

        Args:
            currency: Optional currency code to restrict the check.

        Returns:
            LedgerReport: Number of rows checked and the issues found.
        """
        currencies = (
            [normalize_currency(currency)]
            if currency is not None
            else list(CurrencyCode)
        )
        rows_checked = 0
        issues: list[LedgerIssue] = []
        with self._db_port.snapshot() as conn:
            for code in currencies:
                checked, found = self._verify_currency(conn, code)
                rows_checked += checked
                issues.extend(found)

        if issues:
            self._logger.warning(
                f"Ledger verification found {len(issues)} issues "
                f"in {rows_checked} rows"
            )
        else:
            self._logger.info(
                f"Ledger verification passed for {rows_checked} rows"
            )
        return LedgerReport(rows_checked=rows_checked, issues=issues)

    def _verify_currency(
        self,
        conn: Connection,
        currency: CurrencyCode,
    ) -> tuple[int, list[LedgerIssue]]:
        rows = self._ledger_store.fetch_range(conn, currency, None, None)
        issues: list[LedgerIssue] = []
        for row in rows:
            formula_issue = check_closing_formula(row)
            if formula_issue is not None:
                issues.append(formula_issue)
            log_totals = {
                kind: self._transaction_log.sum_by_kind(
                    conn,
                    currency,
                    row.day,
                    kind,
                )
                for kind in EntryKind
            }
            issues.extend(check_movements_match_log(row, log_totals))
        issues.extend(check_opening_chain(rows))

        logged_days = self._transaction_log.logged_days(conn, currency)
        for day in find_unmaterialized_days(rows, logged_days):
            net = self._transaction_log.sum_by_kind(
                conn, currency, day, EntryKind.PURCHASE
            ) - self._transaction_log.sum_by_kind(
                conn, currency, day, EntryKind.DEPOSIT
            )
            if net == 0:
                continue
            issues.append(
                LedgerIssue(
                    currency=currency,
                    day=day,
                    check=CHECK_ROW_PRESENT,
                    expected=None,
                    actual=None,
                )
            )
        return len(rows), sorted(issues, key=lambda issue: issue.day)


__all__ = ["VerifyLedgerUseCase"]
