"""Per-currency locks serializing ledger writes.

Two layers are held for a unit of work: a ``threading.Lock`` per currency
for writers in this process, and an update of the currency's row in
``currency_lock`` inside the transaction for writers in other processes
(a row lock on PostgreSQL, the database write lock on SQLite).
"""

from contextlib import contextmanager
import threading
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.engine import Connection

from src.application.ports.currency_lock import CurrencyLockPort
from src.domain.constants import CurrencyCode
from src.domain.exceptions import ConcurrentModificationError

DEFAULT_LOCK_TIMEOUT_SECONDS = 30.0

BUMP_LOCK_SQL = text(
    """
    UPDATE currency_lock
    SET version = version + 1
    WHERE currency = :currency
    """
)

INSERT_LOCK_SQL = text(
    """
    INSERT INTO currency_lock (currency, version)
    VALUES (:currency, 1)
    """
)


class SqlAlchemyCurrencyLock(CurrencyLockPort):
    """Currency lock combining process-local and database locks."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the lock registry.

        Args:
            timeout_seconds: Maximum wait for each process-local lock.
        """
        self._timeout_seconds = timeout_seconds
        self._locks = {currency: threading.Lock() for currency in CurrencyCode}

    @contextmanager
    def hold(self, currencies: list[CurrencyCode]) -> Iterator[None]:
        """Hold the process-local locks of ``currencies``.

        Locks are taken in CurrencyCode declaration order and released in
        reverse.

        Raises:
            ConcurrentModificationError: If a lock is not obtained in time.
        """
        acquired: list[threading.Lock] = []
        try:
            for currency in CurrencyCode:
                if currency not in currencies:
                    continue
                lock = self._locks[currency]
                if not lock.acquire(timeout=self._timeout_seconds):
                    raise ConcurrentModificationError(
                        currency.value,
                        f"lock not acquired within {self._timeout_seconds}s",
                    )
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def acquire_rows(
        self,
        conn: Connection,
        currencies: list[CurrencyCode],
    ) -> None:
        """Lock the currencies' rows for the rest of the transaction."""
        for currency in CurrencyCode:
            if currency not in currencies:
                continue
            params = {"currency": currency.value}
            result = conn.execute(BUMP_LOCK_SQL, params)
            if result.rowcount == 0:
                conn.execute(INSERT_LOCK_SQL, params)


__all__ = ["SqlAlchemyCurrencyLock", "DEFAULT_LOCK_TIMEOUT_SECONDS"]
