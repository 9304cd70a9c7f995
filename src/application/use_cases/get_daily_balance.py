"""Use case to read the stored balance row of one day."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import LedgerStorePort
from src.domain.models import DailyBalance
from src.domain.services.day_key import normalize_day
from src.domain.services.normalization import normalize_currency


class GetDailyBalanceUseCase:
    """Return the DailyBalance of a (currency, day), if materialized."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        ledger_store: LedgerStorePort,
    ) -> None:
        self._db_port = db_port
        self._ledger_store = ledger_store

    def execute(self, currency, day) -> DailyBalance | None:
        """Return the stored row or None when the day has no row."""
        resolved_currency = normalize_currency(currency)
        resolved_day = normalize_day(day)
        with self._db_port.snapshot() as conn:
            return self._ledger_store.fetch_day(
                conn,
                resolved_currency,
                resolved_day,
            )


__all__ = ["GetDailyBalanceUseCase"]
