"""Use case listing the deposit entries recorded for a day."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.transaction_log import TransactionLogPort
from src.domain.constants import EntryKind
from src.domain.models import LedgerEntry
from src.domain.services.day_key import normalize_day
from src.domain.services.normalization import normalize_currency


class ListDepositsUseCase:
    """Return deposit and adjustment entries of a day, newest first."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        transaction_log: TransactionLogPort,
    ) -> None:
        self._db_port = db_port
        self._transaction_log = transaction_log

    def execute(self, currency, day) -> list[LedgerEntry]:
        resolved_currency = normalize_currency(currency)
        resolved_day = normalize_day(day)
        with self._db_port.snapshot() as conn:
            return self._transaction_log.list_entries(
                conn,
                resolved_currency,
                resolved_day,
                EntryKind.DEPOSIT,
            )


__all__ = ["ListDepositsUseCase"]
