"""Domain models for daily currency balances and ledger entries."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from src.domain.constants import CurrencyCode, EntryKind

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class DailyBalance:
    """Balance row for one currency on one calendar day.

    Attributes:
        currency: Currency of the row.
        day: Calendar day of the row.
        opening_balance: Closing of the nearest earlier row, or zero.
        purchases: Total bought from customers that day.
        exchange_buy: Total bought through exchange that day.
        exchange_sell: Total sold through exchange that day.
        sales: Total sold that day.
        deposits: Total deposited with the custodian that day.
        closing_balance: Opening plus inflows minus outflows.
    """

    currency: CurrencyCode
    day: date
    opening_balance: Decimal = ZERO
    purchases: Decimal = ZERO
    exchange_buy: Decimal = ZERO
    exchange_sell: Decimal = ZERO
    sales: Decimal = ZERO
    deposits: Decimal = ZERO
    closing_balance: Decimal = ZERO

    def movements(self) -> "Movements":
        """Return the movement totals of the row."""
        return Movements(
            purchases=self.purchases,
            exchange_buy=self.exchange_buy,
            exchange_sell=self.exchange_sell,
            sales=self.sales,
            deposits=self.deposits,
        )


@dataclass(frozen=True)
class Movements:
    """Movement totals feeding the closing-balance formula."""

    purchases: Decimal = ZERO
    exchange_buy: Decimal = ZERO
    exchange_sell: Decimal = ZERO
    sales: Decimal = ZERO
    deposits: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        """Return inflows minus outflows."""
        return (
            self.purchases
            + self.exchange_buy
            - self.exchange_sell
            - self.sales
            - self.deposits
        )


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable transaction log record.

    Attributes:
        kind: Purchase or deposit.
        currency: Currency of the movement.
        day: Day the movement belongs to.
        amount: Amount in major units. Only adjustment entries may be negative.
        entry_id: Database identifier, None until stored.
        receipt_id: Receipt that produced a purchase, if any.
        is_adjustment: True for entries written by a deposit correction.
        created_at: Storage timestamp, None until stored.
    """

    kind: EntryKind
    currency: CurrencyCode
    day: date
    amount: Decimal
    entry_id: int | None = None
    receipt_id: int | None = None
    is_adjustment: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class RecalculationResult:
    """Outcome of one recalculation of a (currency, day) chain.

    Attributes:
        currency: Currency that was recalculated.
        day: Day the recalculation started from.
        closing_balance: New closing balance of that day.
        propagated_days: Later rows whose balances were rewritten.
        changed: False when the ledger already matched the log.
    """

    currency: CurrencyCode
    day: date
    closing_balance: Decimal
    propagated_days: int
    changed: bool


@dataclass(frozen=True)
class StatementRow:
    """Balance statement for one currency over a day range."""

    currency: CurrencyCode
    opening_balance: Decimal
    purchases: Decimal
    exchange_buy: Decimal
    exchange_sell: Decimal
    sales: Decimal
    deposits: Decimal
    closing_balance: Decimal


__all__ = [
    "ZERO",
    "DailyBalance",
    "Movements",
    "LedgerEntry",
    "RecalculationResult",
    "StatementRow",
]
