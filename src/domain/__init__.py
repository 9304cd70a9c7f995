"""Domain package for business rules and core models."""

from .constants import CurrencyCode, EntryKind
from .models import (
    DailyBalance,
    LedgerEntry,
    Movements,
    RecalculationResult,
    StatementRow,
)
from .policies import is_reportable_row
