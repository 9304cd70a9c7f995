"""SQLAlchemy-backed append-only transaction log."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, insert, text
from sqlalchemy.engine import Connection

from src.application.ports.transaction_log import TransactionLogPort
from src.domain.constants import CurrencyCode, EntryKind
from src.domain.models import LedgerEntry
from src.infrastructure.schema import ledger_entry
from src.utils.decimal_utils import from_minor_units, to_minor_units

SUM_BY_DAY_SQL = text(
    """
    SELECT COALESCE(SUM(amount), 0) AS total
    FROM ledger_entry
    WHERE currency = :currency AND kind = :kind AND day = :day
    """
)

SUM_BEFORE_DAY_SQL = text(
    """
    SELECT COALESCE(SUM(amount), 0) AS total
    FROM ledger_entry
    WHERE currency = :currency AND kind = :kind AND day < :day
    """
)

LOGGED_DAYS_SQL = text(
    """
    SELECT DISTINCT day
    FROM ledger_entry
    WHERE currency = :currency
    ORDER BY day ASC
    """
)


class SqlAlchemyTransactionLog(TransactionLogPort):
    """Transaction log stored in the ``ledger_entry`` table.

    Entries are only ever inserted; there is no update or delete path.
    """

    def append(self, conn: Connection, entry: LedgerEntry) -> int:
        result = conn.execute(
            insert(ledger_entry).values(
                kind=entry.kind.value,
                currency=entry.currency.value,
                day=entry.day.isoformat(),
                amount=to_minor_units(entry.amount),
                receipt_id=entry.receipt_id,
                is_adjustment=entry.is_adjustment,
            )
        )
        return int(result.inserted_primary_key[0])

    def sum_by_kind(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind,
    ) -> Decimal:
        return self._sum(conn, SUM_BY_DAY_SQL, currency, day, kind)

    def sum_before_day(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind,
    ) -> Decimal:
        return self._sum(conn, SUM_BEFORE_DAY_SQL, currency, day, kind)

    def list_entries(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind | None = None,
    ) -> list[LedgerEntry]:
        base_sql = """
        SELECT id, kind, currency, day, amount, receipt_id,
               is_adjustment, created_at
        FROM ledger_entry
        WHERE currency = :currency AND day = :day
        """
        params = {"currency": currency.value, "day": day.isoformat()}
        if kind is not None:
            base_sql += " AND kind = :kind"
            params["kind"] = kind.value
        base_sql += " ORDER BY id DESC"
        query = text(base_sql).columns(
            created_at=DateTime(timezone=True),
            is_adjustment=Boolean,
        )
        rows = conn.execute(query, params).all()
        return [
            LedgerEntry(
                kind=EntryKind(row.kind),
                currency=CurrencyCode(row.currency),
                day=date.fromisoformat(row.day),
                amount=from_minor_units(row.amount),
                entry_id=row.id,
                receipt_id=row.receipt_id,
                is_adjustment=bool(row.is_adjustment),
                created_at=row.created_at,
            )
            for row in rows
        ]

    def logged_days(
        self,
        conn: Connection,
        currency: CurrencyCode,
    ) -> list[date]:
        rows = conn.execute(
            LOGGED_DAYS_SQL,
            {"currency": currency.value},
        ).all()
        return [date.fromisoformat(row.day) for row in rows]

    @staticmethod
    def _sum(
        conn: Connection,
        query,
        currency: CurrencyCode,
        day: date,
        kind: EntryKind,
    ) -> Decimal:
        total = conn.execute(
            query,
            {
                "currency": currency.value,
                "kind": kind.value,
                "day": day.isoformat(),
            },
        ).scalar_one()
        return from_minor_units(total)


__all__ = ["SqlAlchemyTransactionLog"]
