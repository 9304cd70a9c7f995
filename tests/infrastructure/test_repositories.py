"""Tests for the SQLAlchemy repositories against SQLite."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import text

from src.domain.constants import CurrencyCode, EntryKind
from src.domain.exceptions import DuplicateSerialNumberError
from src.domain.models import DailyBalance, LedgerEntry, Receipt, ReceiptLine
from src.infrastructure.ledger_store_repository import SqlAlchemyLedgerStore
from src.infrastructure.receipt_repository import SqlAlchemyReceiptRepository
from src.infrastructure.schema import create_schema
from src.infrastructure.transaction_log_repository import (
    SqlAlchemyTransactionLog,
)

USD = CurrencyCode.USD


def _balance(day: int, closing: str) -> DailyBalance:
    return DailyBalance(
        currency=USD,
        day=date(2024, 3, day),
        purchases=Decimal(closing),
        closing_balance=Decimal(closing),
    )


def test_ledger_store_navigates_rows(db_adapter) -> None:
    store = SqlAlchemyLedgerStore()
    with db_adapter.get_ledger_engine().begin() as conn:
        for day, closing in ((1, "10.10"), (5, "20.25"), (9, "30.00")):
            store.upsert(conn, _balance(day, closing))

        assert store.fetch_day(conn, USD, date(2024, 3, 5)).closing_balance == (
            Decimal("20.25")
        )
        assert store.fetch_day(conn, USD, date(2024, 3, 4)) is None
        assert store.fetch_previous(conn, USD, date(2024, 3, 5)).day == date(
            2024, 3, 1
        )
        assert store.fetch_previous(conn, USD, date(2024, 3, 1)) is None
        assert store.fetch_next(conn, USD, date(2024, 3, 5)).day == date(
            2024, 3, 9
        )
        assert store.fetch_next(conn, USD, date(2024, 3, 9)) is None
        in_range = store.fetch_range(
            conn, USD, date(2024, 3, 2), date(2024, 3, 9)
        )
        everything = store.fetch_range(conn, USD, None, None)
        other = store.fetch_range(conn, CurrencyCode.EUR, None, None)

    assert [row.day.day for row in in_range] == [5, 9]
    assert [row.day.day for row in everything] == [1, 5, 9]
    assert other == []


def test_ledger_store_upsert_replaces_row(db_adapter) -> None:
    store = SqlAlchemyLedgerStore()
    with db_adapter.get_ledger_engine().begin() as conn:
        store.upsert(conn, _balance(1, "10.00"))
        store.upsert(conn, _balance(1, "12.34"))
        rows = store.fetch_range(conn, USD, None, None)

    assert len(rows) == 1
    assert rows[0].closing_balance == Decimal("12.34")


def test_amounts_are_stored_as_minor_units(db_adapter) -> None:
    store = SqlAlchemyLedgerStore()
    with db_adapter.get_ledger_engine().begin() as conn:
        store.upsert(conn, _balance(1, "0.10"))
        raw = conn.execute(
            text("SELECT closing_balance FROM daily_currency_balance")
        ).scalar_one()

    assert raw == 10


def test_transaction_log_sums_per_kind_and_day(db_adapter) -> None:
    log = SqlAlchemyTransactionLog()
    day = date(2024, 3, 2)
    with db_adapter.get_ledger_engine().begin() as conn:
        for kind, entry_day, amount in (
            (EntryKind.PURCHASE, day, "0.10"),
            (EntryKind.PURCHASE, day, "0.20"),
            (EntryKind.DEPOSIT, day, "0.05"),
            (EntryKind.PURCHASE, date(2024, 3, 1), "1.00"),
        ):
            log.append(
                conn,
                LedgerEntry(
                    kind=kind,
                    currency=USD,
                    day=entry_day,
                    amount=Decimal(amount),
                ),
            )

        purchases = log.sum_by_kind(conn, USD, day, EntryKind.PURCHASE)
        deposits = log.sum_by_kind(conn, USD, day, EntryKind.DEPOSIT)
        before = log.sum_before_day(conn, USD, day, EntryKind.PURCHASE)
        none = log.sum_by_kind(conn, CurrencyCode.EUR, day, EntryKind.DEPOSIT)
        logged = log.logged_days(conn, USD)

    assert purchases == Decimal("0.30")
    assert deposits == Decimal("0.05")
    assert before == Decimal("1.00")
    assert none == Decimal("0.00")
    assert logged == [date(2024, 3, 1), day]


def test_transaction_log_lists_entries_newest_first(db_adapter) -> None:
    log = SqlAlchemyTransactionLog()
    day = date(2024, 3, 1)
    with db_adapter.get_ledger_engine().begin() as conn:
        first = log.append(
            conn,
            LedgerEntry(EntryKind.DEPOSIT, USD, day, Decimal("5.00")),
        )
        second = log.append(
            conn,
            LedgerEntry(
                EntryKind.DEPOSIT,
                USD,
                day,
                Decimal("-2.00"),
                is_adjustment=True,
            ),
        )
        log.append(
            conn,
            LedgerEntry(EntryKind.PURCHASE, USD, day, Decimal("9.00")),
        )
        deposits = log.list_entries(conn, USD, day, EntryKind.DEPOSIT)
        everything = log.list_entries(conn, USD, day)

    assert [entry.entry_id for entry in deposits] == [second, first]
    assert deposits[0].amount == Decimal("-2.00")
    assert deposits[0].is_adjustment is True
    assert deposits[0].created_at is not None
    assert len(everything) == 3


def _receipt(serial: str) -> Receipt:
    return Receipt(
        serial_number=serial,
        receipt_day=date(2024, 3, 1),
        customer_name="A. Customer",
        nic_passport="N1",
        sources=("Salary", "Gift"),
        lines=(
            ReceiptLine(
                currency=USD,
                amount_received=Decimal("100.00"),
                rate=Decimal("300.125000"),
                amount_issued=Decimal("30012.50"),
            ),
        ),
    )


def test_receipt_repository_stores_header_and_lines(db_adapter) -> None:
    repository = SqlAlchemyReceiptRepository()
    with db_adapter.get_ledger_engine().begin() as conn:
        receipt_id = repository.insert(conn, _receipt("S-1"))
        header = conn.execute(
            text("SELECT serial_number, sources FROM customer_receipt")
        ).one()
        line = conn.execute(
            text(
                "SELECT receipt_id, currency, amount_received, rate, "
                "amount_issued FROM customer_receipt_line"
            )
        ).one()

    assert tuple(header) == ("S-1", "Salary, Gift")
    assert tuple(line) == (receipt_id, "USD", 10000, "300.125000", 3001250)


def test_receipt_repository_rejects_duplicate_serial(db_adapter) -> None:
    repository = SqlAlchemyReceiptRepository()
    engine = db_adapter.get_ledger_engine()
    with engine.begin() as conn:
        repository.insert(conn, _receipt("S-1"))

    with pytest.raises(DuplicateSerialNumberError):
        with engine.begin() as conn:
            repository.insert(conn, _receipt("S-1"))

    with engine.connect() as conn:
        count = conn.execute(
            text("SELECT COUNT(*) FROM customer_receipt")
        ).scalar_one()
    assert count == 1


def test_create_schema_is_idempotent(db_adapter) -> None:
    """Running the schema setup again seeds nothing new."""
    assert create_schema(db_adapter.get_ledger_engine()) == 0
    with db_adapter.get_ledger_engine().connect() as conn:
        count = conn.execute(
            text("SELECT COUNT(*) FROM currency_lock")
        ).scalar_one()
    assert count == len(CurrencyCode)
