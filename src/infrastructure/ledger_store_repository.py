"""SQLAlchemy-backed store of daily currency balance rows."""

from datetime import date

from sqlalchemy import text
from sqlalchemy.engine import Connection

from src.application.ports.ledger_store import LedgerStorePort
from src.domain.constants import CurrencyCode
from src.domain.models import DailyBalance
from src.utils.decimal_utils import from_minor_units, to_minor_units

_COLUMNS = """
    currency, day, opening_balance, purchases, exchange_buy,
    exchange_sell, sales, deposits, closing_balance
"""

SELECT_DAY_SQL = text(
    f"""
    SELECT {_COLUMNS}
    FROM daily_currency_balance
    WHERE currency = :currency AND day = :day
    """
)

SELECT_PREVIOUS_SQL = text(
    f"""
    SELECT {_COLUMNS}
    FROM daily_currency_balance
    WHERE currency = :currency AND day < :day
    ORDER BY day DESC
    LIMIT 1
    """
)

SELECT_NEXT_SQL = text(
    f"""
    SELECT {_COLUMNS}
    FROM daily_currency_balance
    WHERE currency = :currency AND day > :day
    ORDER BY day ASC
    LIMIT 1
    """
)

UPSERT_SQL = text(
    """
    INSERT INTO daily_currency_balance (
        currency, day, opening_balance, purchases, exchange_buy,
        exchange_sell, sales, deposits, closing_balance, updated_at
    )
    VALUES (
        :currency, :day, :opening_balance, :purchases, :exchange_buy,
        :exchange_sell, :sales, :deposits, :closing_balance, CURRENT_TIMESTAMP
    )
    ON CONFLICT (currency, day) DO UPDATE SET
        opening_balance = excluded.opening_balance,
        purchases = excluded.purchases,
        exchange_buy = excluded.exchange_buy,
        exchange_sell = excluded.exchange_sell,
        sales = excluded.sales,
        deposits = excluded.deposits,
        closing_balance = excluded.closing_balance,
        updated_at = CURRENT_TIMESTAMP
    """
)


class SqlAlchemyLedgerStore(LedgerStorePort):
    """Ledger store using plain SQL on the unit-of-work connection."""

    def fetch_day(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        return self._fetch_one(conn, SELECT_DAY_SQL, currency, day)

    def fetch_previous(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        return self._fetch_one(conn, SELECT_PREVIOUS_SQL, currency, day)

    def fetch_next(
        self,
        conn: Connection,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        return self._fetch_one(conn, SELECT_NEXT_SQL, currency, day)

    def fetch_range(
        self,
        conn: Connection,
        currency: CurrencyCode,
        from_day: date | None,
        to_day: date | None,
    ) -> list[DailyBalance]:
        query, params = self._build_range_query(currency, from_day, to_day)
        rows = conn.execute(query, params).all()
        return [self._to_balance(row) for row in rows]

    def upsert(self, conn: Connection, balance: DailyBalance) -> None:
        conn.execute(
            UPSERT_SQL,
            {
                "currency": balance.currency.value,
                "day": balance.day.isoformat(),
                "opening_balance": to_minor_units(balance.opening_balance),
                "purchases": to_minor_units(balance.purchases),
                "exchange_buy": to_minor_units(balance.exchange_buy),
                "exchange_sell": to_minor_units(balance.exchange_sell),
                "sales": to_minor_units(balance.sales),
                "deposits": to_minor_units(balance.deposits),
                "closing_balance": to_minor_units(balance.closing_balance),
            },
        )

    def _fetch_one(
        self,
        conn: Connection,
        query,
        currency: CurrencyCode,
        day: date,
    ) -> DailyBalance | None:
        row = conn.execute(
            query,
            {"currency": currency.value, "day": day.isoformat()},
        ).first()
        return self._to_balance(row) if row else None

    @staticmethod
    def _build_range_query(
        currency: CurrencyCode,
        from_day: date | None,
        to_day: date | None,
    ):
        base_sql = f"""
        SELECT {_COLUMNS}
        FROM daily_currency_balance
        WHERE currency = :currency
        """
        params = {"currency": currency.value}
        if from_day:
            base_sql += " AND day >= :from_day"
            params["from_day"] = from_day.isoformat()
        if to_day:
            base_sql += " AND day <= :to_day"
            params["to_day"] = to_day.isoformat()
        base_sql += " ORDER BY day ASC"
        return text(base_sql), params

    @staticmethod
    def _to_balance(row) -> DailyBalance:
        return DailyBalance(
            currency=CurrencyCode(row.currency),
            day=date.fromisoformat(row.day),
            opening_balance=from_minor_units(row.opening_balance),
            purchases=from_minor_units(row.purchases),
            exchange_buy=from_minor_units(row.exchange_buy),
            exchange_sell=from_minor_units(row.exchange_sell),
            sales=from_minor_units(row.sales),
            deposits=from_minor_units(row.deposits),
            closing_balance=from_minor_units(row.closing_balance),
        )


__all__ = ["SqlAlchemyLedgerStore"]
