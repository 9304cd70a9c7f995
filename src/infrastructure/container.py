"""Composition root for wiring infrastructure adapters."""

from src.application.cash_ledger import CashLedger
from src.application.ports.currency_lock import CurrencyLockPort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import LedgerStorePort
from src.application.ports.receipt_repository import ReceiptRepositoryPort
from src.application.ports.transaction_log import TransactionLogPort
from src.application.use_cases.recalculate_balances import (
    BalanceRecalculationEngine,
)
from src.infrastructure.currency_locks import SqlAlchemyCurrencyLock
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.ledger_store_repository import SqlAlchemyLedgerStore
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.receipt_repository import SqlAlchemyReceiptRepository
from src.infrastructure.settings import LedgerSettings
from src.infrastructure.transaction_log_repository import (
    SqlAlchemyTransactionLog,
)


def build_database_adapter(
    settings: LedgerSettings | None = None,
) -> DatabaseEnginePort:
    """Return a database adapter for the configured ledger URL."""
    resolved = settings or LedgerSettings.from_env()
    return SqlAlchemyDatabaseEngineAdapter(resolved.db_url)


def build_ledger_store() -> LedgerStorePort:
    """Return the daily balance store."""
    return SqlAlchemyLedgerStore()


def build_transaction_log() -> TransactionLogPort:
    """Return the transaction log repository."""
    return SqlAlchemyTransactionLog()


def build_receipt_repository() -> ReceiptRepositoryPort:
    """Return the receipt repository."""
    return SqlAlchemyReceiptRepository()


def build_currency_lock(
    settings: LedgerSettings | None = None,
) -> CurrencyLockPort:
    """Return the per-currency lock with the configured timeout."""
    resolved = settings or LedgerSettings.from_env()
    return SqlAlchemyCurrencyLock(resolved.lock_timeout_seconds)


def build_recalculation_engine(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> BalanceRecalculationEngine:
    """Return a recalculation engine sharing ``db_port``."""
    resolved = settings or LedgerSettings.from_env()
    resolved_db = db_port or build_database_adapter(resolved)
    return BalanceRecalculationEngine(
        resolved_db,
        build_ledger_store(),
        build_transaction_log(),
        build_currency_lock(resolved),
        logger=get_app_logger(),
        max_attempts=resolved.max_attempts,
    )


def build_cash_ledger(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> CashLedger:
    """Return the ledger facade wired to one shared database adapter.

    Args:
        db_port: Optional adapter; built from settings when omitted.
        settings: Optional settings; read from the environment when omitted.

    Returns:
        CashLedger: Facade exposing every ledger operation.
    """
    resolved = settings or LedgerSettings.from_env()
    resolved_db = db_port or build_database_adapter(resolved)
    return CashLedger(
        db_port=resolved_db,
        ledger_store=build_ledger_store(),
        transaction_log=build_transaction_log(),
        receipt_repository=build_receipt_repository(),
        currency_lock=build_currency_lock(resolved),
        max_attempts=resolved.max_attempts,
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_store",
    "build_transaction_log",
    "build_receipt_repository",
    "build_currency_lock",
    "build_recalculation_engine",
    "build_cash_ledger",
]
