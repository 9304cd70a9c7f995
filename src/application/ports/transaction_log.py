"""Port for the append-only transaction log."""

from datetime import date
from decimal import Decimal
from typing import Protocol

from sqlalchemy.engine import Connection

from src.domain.constants import CurrencyCode, EntryKind
from src.domain.models import LedgerEntry


class TransactionLogPort(Protocol):
    """Append-only record of purchases and deposits.

    The log is the source of truth for movement totals; ledger rows are a
    cache derived from it.
    """

    def append(self, conn: Connection, entry: LedgerEntry) -> int:
        """Store an entry and return its identifier."""

    def sum_by_kind(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind,
    ) -> Decimal:
        """Return the total of entries of ``kind`` on exactly ``day``."""

    def sum_before_day(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind,
    ) -> Decimal:
        """Return the total of entries of ``kind`` strictly before ``day``."""

    def list_entries(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind | None = None,
    ) -> list[LedgerEntry]:
        """Return the entries of a day, newest first."""

    def logged_days(
        self,
        conn: Connection,
        currency: CurrencyCode,
    ) -> list[date]:
        """Return every distinct day with an entry, ascending."""


__all__ = ["TransactionLogPort"]
