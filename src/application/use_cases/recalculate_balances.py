"""Balance recalculation engine for daily currency rows.

A recalculation re-derives one day's row from the nearest earlier row and
the transaction log, then walks forward through every later stored row of
the same currency, carrying the new closing balance into each opening.

All writes happen inside a unit of work: the per-currency locks are held,
one database transaction is opened, the caller's mutation (appending an
entry, storing a receipt) runs, and the affected chains are recalculated.
Any failure rolls the whole unit back. Transient database failures retry
the unit from the beginning, which is safe because every step re-reads the
current state and movements are never incremented in place.
"""

from collections.abc import Callable, Iterable
from datetime import date
from typing import TypeVar

from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, OperationalError

from src.application.ports.currency_lock import CurrencyLockPort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import LedgerStorePort
from src.application.ports.transaction_log import TransactionLogPort
from src.domain.constants import CurrencyCode, EntryKind
from src.domain.exceptions import ConcurrentModificationError
from src.domain.models import (
    ZERO,
    DailyBalance,
    Movements,
    RecalculationResult,
)
from src.domain.services.balances import (
    carry_forward,
    rebalance_day,
    same_balances,
)
from src.domain.services.day_key import normalize_day
from src.domain.services.normalization import normalize_currency
from src.domain.services.validation import warn_negative_closing
from src.infrastructure.logging.logger import get_app_logger

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


def lock_order(currencies: Iterable[CurrencyCode]) -> list[CurrencyCode]:
    """Return distinct currencies in declaration order of CurrencyCode."""
    wanted = set(currencies)
    return [currency for currency in CurrencyCode if currency in wanted]


class BalanceRecalculationEngine:
    """Recompute and propagate daily balances under a unit of work."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        ledger_store: LedgerStorePort,
        transaction_log: TransactionLogPort,
        currency_lock: CurrencyLockPort,
        logger=None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the engine.

        Args:
            db_port: Port providing the ledger engine.
            ledger_store: Store of daily balance rows.
            transaction_log: Source of movement totals.
            currency_lock: Per-currency serialization of writers.
            logger: Optional logger compatible with logging.Logger-like API.
            max_attempts: Attempts per unit before giving up.
        """
        self._db_port = db_port
        self._ledger_store = ledger_store
        self._transaction_log = transaction_log
        self._currency_lock = currency_lock
        self._logger = logger or get_app_logger()
        self._max_attempts = max(1, max_attempts)

    def execute(self, currency, day) -> RecalculationResult:
        """Recalculate ``day`` for ``currency`` and propagate forward.

        Args:
            currency: Currency code to recalculate.
            day: Day whose movements changed.

        Returns:
            RecalculationResult: New closing and the number of rewritten
            later rows.
        """
        resolved_currency = normalize_currency(currency)
        resolved_day = normalize_day(day)
        return self.run_unit(
            [resolved_currency],
            lambda conn: self.recalculate(
                conn,
                resolved_currency,
                resolved_day,
            ),
        )

    def run_unit(
        self,
        currencies: Iterable[CurrencyCode],
        work: Callable[[Connection], T],
    ) -> T:
        """Run ``work`` atomically while holding the currencies' locks.

        Args:
            currencies: Currencies whose rows ``work`` may touch.
            work: Callable receiving the open transaction connection.

        Returns:
            T: Whatever ``work`` returns.

        Raises:
            ConcurrentModificationError: If every attempt hit a transient
                database failure or a lock could not be obtained.
        """
        ordered = lock_order(currencies)
        label = ",".join(currency.value for currency in ordered)
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._currency_lock.hold(ordered):
                    engine = self._db_port.get_ledger_engine()
                    with engine.begin() as conn:
                        self._currency_lock.acquire_rows(conn, ordered)
                        return work(conn)
            except OperationalError as exc:
                last_error = exc
            except DBAPIError as exc:
                if not exc.connection_invalidated:
                    raise
                last_error = exc
            self._logger.warning(
                f"Ledger unit for {label} failed on attempt "
                f"{attempt}/{self._max_attempts}: {last_error}"
            )
        raise ConcurrentModificationError(
            label or None,
            f"gave up after {self._max_attempts} attempts",
        ) from last_error

    def recalculate(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        propagate: bool = True,
    ) -> RecalculationResult:
        """Recalculate one day inside an open unit of work.

        Args:
            conn: Connection of the running unit of work.
            currency: Currency to recalculate.
            day: Day whose row is re-derived.
            propagate: Walk forward through later rows when True.

        Returns:
            RecalculationResult: Outcome for the day and its chain.
        """
        previous = self._ledger_store.fetch_previous(conn, currency, day)
        opening = previous.closing_balance if previous else ZERO
        movements = self._load_movements(conn, currency, day)
        current = self._ledger_store.fetch_day(conn, currency, day)
        row = rebalance_day(currency, day, opening, movements)

        changed = False
        if current is None and movements == Movements():
            self._logger.debug(
                f"No activity for {currency.value} on {day.isoformat()}, "
                "row not materialized"
            )
        elif not same_balances(current, row):
            self._ledger_store.upsert(conn, row)
            warn_negative_closing(row, self._logger)
            changed = True

        propagated = 0
        if propagate:
            propagated = self._propagate(conn, row)
        if changed or propagated:
            self._logger.info(
                f"Recalculated {currency.value} {day.isoformat()}: "
                f"closing={row.closing_balance}, propagated={propagated}"
            )
        return RecalculationResult(
            currency=currency,
            day=day,
            closing_balance=row.closing_balance,
            propagated_days=propagated,
            changed=changed or propagated > 0,
        )

    def _load_movements(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> Movements:
        # exchange_buy, exchange_sell and sales have no source yet.
        return Movements(
            purchases=self._transaction_log.sum_by_kind(
                conn, currency, day, EntryKind.PURCHASE
            ),
            deposits=self._transaction_log.sum_by_kind(
                conn, currency, day, EntryKind.DEPOSIT
            ),
        )

    def _propagate(self, conn: Connection, start: DailyBalance) -> int:
        """Carry ``start``'s closing through every later stored row.

        Returns:
            int: Number of rows rewritten.
        """
        cursor = start.day
        carry = start.closing_balance
        rewritten = 0
        while True:
            following = self._ledger_store.fetch_next(
                conn,
                start.currency,
                cursor,
            )
            if following is None:
                break
            updated = carry_forward(following, carry)
            if not same_balances(following, updated):
                self._ledger_store.upsert(conn, updated)
                warn_negative_closing(updated, self._logger)
                rewritten += 1
            cursor = following.day
            carry = updated.closing_balance
        return rewritten


__all__ = [
    "BalanceRecalculationEngine",
    "DEFAULT_MAX_ATTEMPTS",
    "lock_order",
]
