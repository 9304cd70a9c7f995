"""Use case re-deriving every stored row from the transaction log."""

from sqlalchemy.engine import Connection

from src.application.ports.ledger_store import LedgerStorePort
from src.application.ports.transaction_log import TransactionLogPort
from src.application.use_cases.recalculate_balances import (
    BalanceRecalculationEngine,
)
from src.domain.constants import CurrencyCode
from src.domain.models import RecalculationResult
from src.domain.services.normalization import normalize_currency
from src.infrastructure.logging.logger import get_app_logger


class RebuildLedgerUseCase:
    """Recompute each currency's rows in ascending day order.

    Each currency is rebuilt in its own unit of work. Days are processed
    oldest first without forward propagation, since every later day is
    visited anyway.
    """

    def __init__(
        self,
        engine: BalanceRecalculationEngine,
        ledger_store: LedgerStorePort,
        transaction_log: TransactionLogPort,
        logger=None,
    ) -> None:
        self._engine = engine
        self._ledger_store = ledger_store
        self._transaction_log = transaction_log
        self._logger = logger or get_app_logger()

    def execute(self, currency=None) -> list[RecalculationResult]:
        """Rebuild one currency, or all supported currencies.

        Args:
            currency: Optional currency code to restrict the rebuild.

        Returns:
            list[RecalculationResult]: One summary per currency with any
            stored or logged day; ``propagated_days`` counts rewritten rows.
        """
        currencies = (
            [normalize_currency(currency)]
            if currency is not None
            else list(CurrencyCode)
        )
        results = []
        for code in currencies:
            result = self._engine.run_unit(
                [code],
                lambda conn, code=code: self._rebuild_currency(conn, code),
            )
            if result is not None:
                results.append(result)
        return results

    def _rebuild_currency(
        self,
        conn: Connection,
        currency: CurrencyCode,
    ) -> RecalculationResult | None:
        stored_days = [
            row.day
            for row in self._ledger_store.fetch_range(
                conn,
                currency,
                None,
                None,
            )
        ]
        days = sorted(
            set(stored_days)
            | set(self._transaction_log.logged_days(conn, currency))
        )
        if not days:
            return None
        rewritten = 0
        last = None
        for day in days:
            last = self._engine.recalculate(
                conn,
                currency,
                day,
                propagate=False,
            )
            if last.changed:
                rewritten += 1
        self._logger.info(
            f"Rebuilt {currency.value}: {len(days)} days, "
            f"{rewritten} rows rewritten"
        )
        return RecalculationResult(
            currency=currency,
            day=days[0],
            closing_balance=last.closing_balance,
            propagated_days=rewritten,
            changed=rewritten > 0,
        )


__all__ = ["RebuildLedgerUseCase"]
