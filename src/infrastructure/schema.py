"""Table definitions for the ledger database.

Amounts are stored as integer minor units (hundredths) so sums are exact
on every backend. Days are stored as ``YYYY-MM-DD`` strings, whose lexical
order is chronological order.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine

from src.domain.constants import CurrencyCode

metadata = MetaData()

daily_currency_balance = Table(
    "daily_currency_balance",
    metadata,
    Column("currency", String(3), primary_key=True),
    Column("day", String(10), primary_key=True),
    Column("opening_balance", BigInteger, nullable=False, default=0),
    Column("purchases", BigInteger, nullable=False, default=0),
    Column("exchange_buy", BigInteger, nullable=False, default=0),
    Column("exchange_sell", BigInteger, nullable=False, default=0),
    Column("sales", BigInteger, nullable=False, default=0),
    Column("deposits", BigInteger, nullable=False, default=0),
    Column("closing_balance", BigInteger, nullable=False, default=0),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
)

customer_receipt = Table(
    "customer_receipt",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("serial_number", String(64), nullable=False, unique=True),
    Column("receipt_day", String(10), nullable=False),
    Column("customer_name", String(255), nullable=False),
    Column("nic_passport", String(64), nullable=False),
    Column("sources", Text, nullable=False),
    Column("remarks", Text, nullable=True),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
)

customer_receipt_line = Table(
    "customer_receipt_line",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "receipt_id",
        Integer,
        ForeignKey("customer_receipt.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("currency", String(3), nullable=False),
    Column("amount_received", BigInteger, nullable=False),
    Column("rate", String(32), nullable=False),
    Column("amount_issued", BigInteger, nullable=False),
)

ledger_entry = Table(
    "ledger_entry",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", String(16), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("day", String(10), nullable=False),
    Column("amount", BigInteger, nullable=False),
    Column(
        "receipt_id",
        Integer,
        ForeignKey("customer_receipt.id"),
        nullable=True,
    ),
    Column("is_adjustment", Boolean, nullable=False, default=False),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    Index("ix_ledger_entry_currency_day_kind", "currency", "day", "kind"),
)

currency_lock = Table(
    "currency_lock",
    metadata,
    Column("currency", String(3), primary_key=True),
    Column("version", BigInteger, nullable=False, default=0),
)


def create_schema(engine: Engine) -> int:
    """Create missing tables and seed one lock row per currency.

    Args:
        engine: Engine connected to the ledger database.

    Returns:
        int: Number of lock rows inserted.
    """
    metadata.create_all(engine)
    with engine.begin() as conn:
        existing = set(conn.execute(select(currency_lock.c.currency)).scalars())
        missing = [
            {"currency": currency.value, "version": 0}
            for currency in CurrencyCode
            if currency.value not in existing
        ]
        if missing:
            conn.execute(insert(currency_lock), missing)
    return len(missing)


__all__ = [
    "metadata",
    "daily_currency_balance",
    "customer_receipt",
    "customer_receipt_line",
    "ledger_entry",
    "currency_lock",
    "create_schema",
]
