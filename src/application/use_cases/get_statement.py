"""Use case to compute per-currency balance statements for a day range."""

from collections.abc import Mapping
from datetime import date
from decimal import Decimal

from sqlalchemy.engine import Connection

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import LedgerStorePort
from src.domain.constants import CurrencyCode
from src.domain.exceptions import InvalidDateError
from src.domain.models import ZERO, Movements, StatementRow
from src.domain.policies import is_reportable_row
from src.domain.services.balances import compute_closing
from src.domain.services.day_key import normalize_day
from src.domain.services.normalization import (
    normalize_amount,
    normalize_currency,
)
from src.infrastructure.logging.logger import get_app_logger


class GetStatementUseCase:
    """Compute opening, movements, and closing per currency over a range.

    Opening balances come from the closing of the nearest stored row before
    the range. Movement totals are summed from the stored rows inside the
    range. Both read the same ledger cache, so a statement always agrees
    with the daily rows it summarises.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        ledger_store: LedgerStorePort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            db_port: Port providing read snapshots of the ledger.
            ledger_store: Store of daily balance rows.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._ledger_store = ledger_store
        self._logger = logger or get_app_logger()

    def execute(
        self,
        from_day,
        to_day,
        currency=None,
        deposit_overrides: Mapping | None = None,
        include_empty: bool = True,
    ) -> list[StatementRow]:
        """Return statement rows for the inclusive day range.

        Args:
            from_day: First day of the range.
            to_day: Last day of the range.
            currency: Optional single currency; every supported currency
                otherwise.
            deposit_overrides: Optional currency to deposit total mapping
                replacing the stored deposits (interactive editing).
            include_empty: Keep rows whose figures are all zero.

        Returns:
            list[StatementRow]: Rows in CurrencyCode order.

        Raises:
            InvalidDateError: If a bound is invalid or the range is reversed.
            InvalidCurrencyError: If a currency is unsupported.
            InvalidAmountError: If an override is not a valid amount.
        """
        start = normalize_day(from_day)
        end = normalize_day(to_day)
        if start > end:
            raise InvalidDateError(
                f"{start.isoformat()}..{end.isoformat()}",
                "range start is after range end",
            )
        currencies = (
            [normalize_currency(currency)]
            if currency is not None
            else list(CurrencyCode)
        )
        overrides = {
            normalize_currency(code): normalize_amount(amount)
            for code, amount in (deposit_overrides or {}).items()
        }

        with self._db_port.snapshot() as conn:
            rows = [
                self._build_row(conn, code, start, end, overrides.get(code))
                for code in currencies
            ]

        if not include_empty:
            rows = [row for row in rows if is_reportable_row(row)]
        self._logger.info(
            f"Statement computed for {start.isoformat()}..{end.isoformat()}: "
            f"{len(rows)} currencies"
        )
        return rows

    def _build_row(
        self,
        conn: Connection,
        currency: CurrencyCode,
        start: date,
        end: date,
        deposit_override: Decimal | None,
    ) -> StatementRow:
        previous = self._ledger_store.fetch_previous(conn, currency, start)
        opening = previous.closing_balance if previous else ZERO
        in_range = self._ledger_store.fetch_range(conn, currency, start, end)
        movements = Movements(
            purchases=sum((row.purchases for row in in_range), ZERO),
            exchange_buy=sum((row.exchange_buy for row in in_range), ZERO),
            exchange_sell=sum((row.exchange_sell for row in in_range), ZERO),
            sales=sum((row.sales for row in in_range), ZERO),
            deposits=(
                deposit_override
                if deposit_override is not None
                else sum((row.deposits for row in in_range), ZERO)
            ),
        )
        return StatementRow(
            currency=currency,
            opening_balance=opening,
            purchases=movements.purchases,
            exchange_buy=movements.exchange_buy,
            exchange_sell=movements.exchange_sell,
            sales=movements.sales,
            deposits=movements.deposits,
            closing_balance=compute_closing(opening, movements),
        )


__all__ = ["GetStatementUseCase"]
