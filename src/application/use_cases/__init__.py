"""Application use cases package."""

from .get_daily_balance import GetDailyBalanceUseCase
from .get_statement import GetStatementUseCase
from .list_deposits import ListDepositsUseCase
from .rebuild_ledger import RebuildLedgerUseCase
from .recalculate_balances import BalanceRecalculationEngine, lock_order
from .record_movements import RecordDepositUseCase, RecordPurchaseUseCase
from .record_receipt import RecordReceiptUseCase
from .set_deposit_override import SetDepositOverrideUseCase
from .verify_ledger import VerifyLedgerUseCase

__all__ = [
    "BalanceRecalculationEngine",
    "lock_order",
    "RecordPurchaseUseCase",
    "RecordDepositUseCase",
    "SetDepositOverrideUseCase",
    "RecordReceiptUseCase",
    "GetStatementUseCase",
    "GetDailyBalanceUseCase",
    "ListDepositsUseCase",
    "VerifyLedgerUseCase",
    "RebuildLedgerUseCase",
]
