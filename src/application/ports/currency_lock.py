"""Port for serializing ledger writes per currency."""

from contextlib import AbstractContextManager
from typing import Protocol

from sqlalchemy.engine import Connection

from src.domain.constants import CurrencyCode


class CurrencyLockPort(Protocol):
    """Exclusive per-currency lock held for a whole unit of work."""

    def hold(
        self,
        currencies: list[CurrencyCode],
    ) -> AbstractContextManager[None]:
        """Hold the in-process locks of ``currencies`` in a fixed order.

        Raises:
            ConcurrentModificationError: If a lock is not obtained in time.
        """

    def acquire_rows(
        self,
        conn: Connection,
        currencies: list[CurrencyCode],
    ) -> None:
        """Take the database-level locks inside the open transaction."""


__all__ = ["CurrencyLockPort"]
