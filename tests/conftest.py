"""Shared fixtures building SQLite-backed ledgers in temporary directories."""

from unittest.mock import MagicMock

import pytest

from src.application.cash_ledger import CashLedger
from src.infrastructure.currency_locks import SqlAlchemyCurrencyLock
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.ledger_store_repository import SqlAlchemyLedgerStore
from src.infrastructure.receipt_repository import SqlAlchemyReceiptRepository
from src.infrastructure.schema import create_schema
from src.infrastructure.transaction_log_repository import (
    SqlAlchemyTransactionLog,
)


def _sqlite_adapter(directory) -> SqlAlchemyDatabaseEngineAdapter:
    directory.mkdir(parents=True, exist_ok=True)
    adapter = SqlAlchemyDatabaseEngineAdapter(
        f"sqlite:///{directory / 'ledger.db'}"
    )
    create_schema(adapter.get_ledger_engine())
    return adapter


@pytest.fixture
def app_logger():
    return MagicMock()


@pytest.fixture
def audit_logger():
    return MagicMock()


@pytest.fixture
def ledger_factory(app_logger, audit_logger):
    """Return a callable building a CashLedger on a new SQLite file."""
    created = []

    def _build(directory) -> CashLedger:
        adapter = _sqlite_adapter(directory)
        created.append(adapter)
        return CashLedger(
            db_port=adapter,
            ledger_store=SqlAlchemyLedgerStore(),
            transaction_log=SqlAlchemyTransactionLog(),
            receipt_repository=SqlAlchemyReceiptRepository(),
            currency_lock=SqlAlchemyCurrencyLock(timeout_seconds=5),
            logger=app_logger,
            audit_logger=audit_logger,
        )

    yield _build
    for adapter in created:
        adapter.dispose()


@pytest.fixture
def db_adapter(tmp_path):
    """Database adapter on a fresh SQLite file with the ledger schema."""
    adapter = _sqlite_adapter(tmp_path / "shared")
    yield adapter
    adapter.dispose()


@pytest.fixture
def ledger(db_adapter, app_logger, audit_logger):
    """CashLedger wired to real repositories on SQLite."""
    return CashLedger(
        db_port=db_adapter,
        ledger_store=SqlAlchemyLedgerStore(),
        transaction_log=SqlAlchemyTransactionLog(),
        receipt_repository=SqlAlchemyReceiptRepository(),
        currency_lock=SqlAlchemyCurrencyLock(timeout_seconds=5),
        logger=app_logger,
        audit_logger=audit_logger,
    )
