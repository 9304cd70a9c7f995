"""Application ports package."""

from .currency_lock import CurrencyLockPort
from .database import DatabaseEnginePort
from .ledger_store import LedgerStorePort
from .receipt_repository import ReceiptRepositoryPort
from .transaction_log import TransactionLogPort

__all__ = [
    "CurrencyLockPort",
    "DatabaseEnginePort",
    "LedgerStorePort",
    "ReceiptRepositoryPort",
    "TransactionLogPort",
]
