"""Use cases recording purchases and deposits in the transaction log."""

from src.application.ports.transaction_log import TransactionLogPort
from src.application.use_cases.recalculate_balances import (
    BalanceRecalculationEngine,
)
from src.domain.constants import EntryKind
from src.domain.models import LedgerEntry, RecalculationResult
from src.domain.services.day_key import normalize_day
from src.domain.services.normalization import (
    normalize_amount,
    normalize_currency,
)
from src.infrastructure.logging.logger import get_audit_logger


class _RecordMovementUseCase:
    """Append one movement and recalculate its day in a single unit."""

    kind: EntryKind

    def __init__(
        self,
        engine: BalanceRecalculationEngine,
        transaction_log: TransactionLogPort,
        audit_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            engine: Recalculation engine running the unit of work.
            transaction_log: Log receiving the new entry.
            audit_logger: Optional logger for posted movements.
        """
        self._engine = engine
        self._transaction_log = transaction_log
        self._audit_logger = audit_logger or get_audit_logger()

    def execute(self, currency, day, amount) -> RecalculationResult:
        """Record the movement and return the recalculation outcome.

        Args:
            currency: Currency code of the movement.
            day: Day the movement belongs to.
            amount: Non-negative amount in major units.

        Returns:
            RecalculationResult: Balances after the movement.

        Raises:
            InvalidCurrencyError: If the currency is unsupported.
            InvalidDateError: If the day cannot be parsed.
            InvalidAmountError: If the amount is negative or non-numeric.
            ConcurrentModificationError: If the unit could not complete.
        """
        entry = LedgerEntry(
            kind=self.kind,
            currency=normalize_currency(currency),
            day=normalize_day(day),
            amount=normalize_amount(amount),
        )

        def _work(conn):
            entry_id = self._transaction_log.append(conn, entry)
            result = self._engine.recalculate(conn, entry.currency, entry.day)
            return entry_id, result

        entry_id, result = self._engine.run_unit([entry.currency], _work)
        self._audit_logger.info(
            f"{self.kind.value} entry={entry_id} currency="
            f"{entry.currency.value} day={entry.day.isoformat()} "
            f"amount={entry.amount}"
        )
        return result


class RecordPurchaseUseCase(_RecordMovementUseCase):
    """Record currency bought from a customer."""

    kind = EntryKind.PURCHASE


class RecordDepositUseCase(_RecordMovementUseCase):
    """Record currency handed to the custodian."""

    kind = EntryKind.DEPOSIT


__all__ = ["RecordPurchaseUseCase", "RecordDepositUseCase"]
