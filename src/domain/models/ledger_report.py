"""Domain models for ledger verification reports."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from src.domain.constants import CurrencyCode


@dataclass(frozen=True)
class LedgerIssue:
    """Single invariant violation found on a stored row.

    Attributes:
        currency: Currency of the offending row.
        day: Day of the offending row.
        check: Name of the failed check.
        expected: Value the invariant requires, None for a missing row.
        actual: Value found in the ledger, None for a missing row.
    """

    currency: CurrencyCode
    day: date
    check: str
    expected: Decimal | None
    actual: Decimal | None


@dataclass(frozen=True)
class LedgerReport:
    """Verification result across one or more currencies."""

    rows_checked: int
    issues: list[LedgerIssue] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        """Return True when no issue was found."""
        return not self.issues


__all__ = ["LedgerIssue", "LedgerReport"]
