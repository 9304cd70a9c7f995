"""Domain models for customer currency receipts."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from src.domain.constants import CurrencyCode


@dataclass(frozen=True)
class ReceiptLine:
    """One currency bought from the customer on a receipt.

    Attributes:
        currency: Foreign currency received.
        amount_received: Foreign amount received, posted as a purchase.
        rate: Rate offered to the customer.
        amount_issued: Local currency paid out.
    """

    currency: CurrencyCode
    amount_received: Decimal
    rate: Decimal
    amount_issued: Decimal


@dataclass(frozen=True)
class Receipt:
    """Customer receipt with its currency lines."""

    serial_number: str
    receipt_day: date
    customer_name: str
    nic_passport: str
    sources: tuple[str, ...]
    lines: tuple[ReceiptLine, ...]
    remarks: str | None = None
    receipt_id: int | None = None


@dataclass(frozen=True)
class ReceiptResult:
    """Outcome of recording a receipt."""

    receipt_id: int
    serial_number: str
    purchase_count: int
    currencies: list[CurrencyCode] = field(default_factory=list)


__all__ = ["ReceiptLine", "Receipt", "ReceiptResult"]
