"""Use case correcting a day's deposit total."""

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


class SetDepositOverrideUseCase:
    """Set the deposits of a day to an exact total.

    The difference between the requested total and the logged deposits is
    appended as a signed adjustment entry, so the log keeps explaining every
    figure in the ledger.
    """

    def __init__(
        self,
        engine: BalanceRecalculationEngine,
        transaction_log: TransactionLogPort,
        audit_logger=None,
    ) -> None:
        self._engine = engine
        self._transaction_log = transaction_log
        self._audit_logger = audit_logger or get_audit_logger()

    def execute(self, currency, day, total_deposits) -> RecalculationResult:
        """Correct the deposits of ``day`` to ``total_deposits``.

        Args:
            currency: Currency code of the row.
            day: Day to correct.
            total_deposits: Non-negative deposit total for the day.

        Returns:
            RecalculationResult: Balances after the correction.
        """
        resolved_currency = normalize_currency(currency)
        resolved_day = normalize_day(day)
        target = normalize_amount(total_deposits)

        def _work(conn):
            logged = self._transaction_log.sum_by_kind(
                conn,
                resolved_currency,
                resolved_day,
                EntryKind.DEPOSIT,
            )
            delta = target - logged
            entry_id = None
            if delta != 0:
                entry_id = self._transaction_log.append(
                    conn,
                    LedgerEntry(
                        kind=EntryKind.DEPOSIT,
                        currency=resolved_currency,
                        day=resolved_day,
                        amount=delta,
                        is_adjustment=True,
                    ),
                )
            result = self._engine.recalculate(
                conn,
                resolved_currency,
                resolved_day,
            )
            return entry_id, delta, result

        entry_id, delta, result = self._engine.run_unit(
            [resolved_currency],
            _work,
        )
        if entry_id is not None:
            self._audit_logger.info(
                f"deposit adjustment entry={entry_id} currency="
                f"{resolved_currency.value} day={resolved_day.isoformat()} "
                f"delta={delta} total={target}"
            )
        return result


__all__ = ["SetDepositOverrideUseCase"]
