"""Port for the per-currency daily balance store."""

from datetime import date
from typing import Protocol

from sqlalchemy.engine import Connection

from src.domain.constants import CurrencyCode
from src.domain.models import DailyBalance


class LedgerStorePort(Protocol):
    """Keyed storage of one DailyBalance per (currency, day).

    Every method runs on the connection of the caller's unit of work so
    reads and writes share one transaction.
    """

    def fetch_day(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        """Return the row for exactly ``day``."""

    def fetch_previous(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        """Return the nearest row strictly before ``day``."""

    def fetch_next(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        """Return the nearest row strictly after ``day``."""

    def fetch_range(
        self,
        conn: Connection,
        currency: CurrencyCode,
        from_day: date | None,
        to_day: date | None,
    ) -> list[DailyBalance]:
        """Return rows within the inclusive range in ascending day order."""

    def upsert(self, conn: Connection, balance: DailyBalance) -> None:
        """Insert the row or replace the figures of the existing one."""


__all__ = ["LedgerStorePort"]
