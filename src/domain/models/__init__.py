"""Domain models package."""

from .ledger import (
    ZERO,
    DailyBalance,
    LedgerEntry,
    Movements,
    RecalculationResult,
    StatementRow,
)
from .ledger_report import LedgerIssue, LedgerReport
from .receipts import Receipt, ReceiptLine, ReceiptResult

__all__ = [
    "ZERO",
    "DailyBalance",
    "LedgerEntry",
    "Movements",
    "RecalculationResult",
    "StatementRow",
    "LedgerIssue",
    "LedgerReport",
    "Receipt",
    "ReceiptLine",
    "ReceiptResult",
]
