"""Facade exposing the cash ledger operations to external callers."""

from collections.abc import Iterable, Mapping
from typing import Any

from src.application.ports.currency_lock import CurrencyLockPort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import LedgerStorePort
from src.application.ports.receipt_repository import ReceiptRepositoryPort
from src.application.ports.transaction_log import TransactionLogPort
from src.application.use_cases.get_daily_balance import GetDailyBalanceUseCase
from src.application.use_cases.get_statement import GetStatementUseCase
from src.application.use_cases.list_deposits import ListDepositsUseCase
from src.application.use_cases.rebuild_ledger import RebuildLedgerUseCase
from src.application.use_cases.recalculate_balances import (
    DEFAULT_MAX_ATTEMPTS,
    BalanceRecalculationEngine,
)
from src.application.use_cases.record_movements import (
    RecordDepositUseCase,
    RecordPurchaseUseCase,
)
from src.application.use_cases.record_receipt import RecordReceiptUseCase
from src.application.use_cases.set_deposit_override import (
    SetDepositOverrideUseCase,
)
from src.application.use_cases.verify_ledger import VerifyLedgerUseCase
from src.domain.models import (
    DailyBalance,
    LedgerEntry,
    LedgerReport,
    RecalculationResult,
    ReceiptResult,
    StatementRow,
)
from src.infrastructure.logging.logger import get_app_logger, get_audit_logger


class CashLedger:
    """Single entry point for route handlers, scripts, and the CLI.

    Every use case shares the same database adapter and recalculation
    engine, so all writers go through one set of currency locks.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        ledger_store: LedgerStorePort,
        transaction_log: TransactionLogPort,
        receipt_repository: ReceiptRepositoryPort,
        currency_lock: CurrencyLockPort,
        logger=None,
        audit_logger=None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Wire the use cases.

        Args:
            db_port: Port owning the ledger engine.
            ledger_store: Store of daily balance rows.
            transaction_log: Log of purchases and deposits.
            receipt_repository: Storage for customer receipts.
            currency_lock: Per-currency serialization of writers.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger for posted movements.
            max_attempts: Attempts per unit of work on transient failures.
        """
        self._db_port = db_port
        resolved_logger = logger or get_app_logger()
        resolved_audit = audit_logger or get_audit_logger()
        self._engine = BalanceRecalculationEngine(
            db_port,
            ledger_store,
            transaction_log,
            currency_lock,
            logger=resolved_logger,
            max_attempts=max_attempts,
        )
        self._record_purchase = RecordPurchaseUseCase(
            self._engine, transaction_log, audit_logger=resolved_audit
        )
        self._record_deposit = RecordDepositUseCase(
            self._engine, transaction_log, audit_logger=resolved_audit
        )
        self._set_deposit_override = SetDepositOverrideUseCase(
            self._engine, transaction_log, audit_logger=resolved_audit
        )
        self._record_receipt = RecordReceiptUseCase(
            self._engine,
            transaction_log,
            receipt_repository,
            logger=resolved_logger,
            audit_logger=resolved_audit,
        )
        self._get_statement = GetStatementUseCase(
            db_port, ledger_store, logger=resolved_logger
        )
        self._get_day = GetDailyBalanceUseCase(db_port, ledger_store)
        self._list_deposits = ListDepositsUseCase(db_port, transaction_log)
        self._verify = VerifyLedgerUseCase(
            db_port, ledger_store, transaction_log, logger=resolved_logger
        )
        self._rebuild = RebuildLedgerUseCase(
            self._engine,
            ledger_store,
            transaction_log,
            logger=resolved_logger,
        )

    def record_purchase(self, currency, day, amount) -> RecalculationResult:
        return self._record_purchase.execute(currency, day, amount)

    def record_deposit(self, currency, day, amount) -> RecalculationResult:
        return self._record_deposit.execute(currency, day, amount)

    def set_deposit_override(
        self,
        currency,
        day,
        total_deposits,
    ) -> RecalculationResult:
        return self._set_deposit_override.execute(
            currency,
            day,
            total_deposits,
        )

    def get_statement(
        self,
        from_day,
        to_day,
        currency=None,
        deposit_overrides: Mapping | None = None,
        include_empty: bool = True,
    ) -> list[StatementRow]:
        return self._get_statement.execute(
            from_day,
            to_day,
            currency=currency,
            deposit_overrides=deposit_overrides,
            include_empty=include_empty,
        )

    def get_day(self, currency, day) -> DailyBalance | None:
        return self._get_day.execute(currency, day)

    def record_receipt(
        self,
        serial_number: str,
        receipt_day,
        customer_name: str,
        nic_passport: str,
        sources: Iterable[str],
        lines: Iterable[Mapping[str, Any]],
        remarks: str | None = None,
    ) -> ReceiptResult:
        return self._record_receipt.execute(
            serial_number,
            receipt_day,
            customer_name,
            nic_passport,
            sources,
            lines,
            remarks=remarks,
        )

    def list_deposits(self, currency, day) -> list[LedgerEntry]:
        return self._list_deposits.execute(currency, day)

    def verify(self, currency=None) -> LedgerReport:
        return self._verify.execute(currency)

    def rebuild(self, currency=None) -> list[RecalculationResult]:
        return self._rebuild.execute(currency)

    def close(self) -> None:
        """Release the database engine."""
        self._db_port.dispose()

    def __enter__(self) -> "CashLedger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["CashLedger"]
