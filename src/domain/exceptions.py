"""Typed exceptions raised by the cash ledger.

Every error carries a machine-readable ``code`` so callers (route handlers,
the CLI) can react by type instead of parsing messages. ``retryable`` tells
the caller whether repeating the same call may succeed.
"""

from typing import Any


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code = "LEDGER_ERROR"
    retryable = False


class ValidationError(LedgerError):
    """Input rejected at the ingestion boundary, nothing was written."""

    code = "VALIDATION_ERROR"


class InvalidCurrencyError(ValidationError):
    """Currency code outside the supported set."""

    code = "INVALID_CURRENCY"

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Unsupported currency code: {value!r}")


class InvalidDateError(ValidationError):
    """Unparsable or out-of-range day."""

    code = "INVALID_DATE"

    def __init__(self, value: Any, reason: str | None = None) -> None:
        self.value = value
        self.reason = reason
        message = f"Invalid date: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidAmountError(ValidationError):
    """Negative, missing, or non-numeric amount."""

    code = "INVALID_AMOUNT"

    def __init__(self, value: Any, reason: str | None = None) -> None:
        self.value = value
        self.reason = reason
        message = f"Invalid amount: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidReceiptError(ValidationError):
    """Receipt missing required fields or currency lines."""

    code = "INVALID_RECEIPT"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class DuplicateSerialNumberError(LedgerError):
    """A receipt with the same serial number already exists."""

    code = "DUPLICATE_SERIAL"

    def __init__(self, serial_number: str) -> None:
        self.serial_number = serial_number
        super().__init__(f"Serial number already exists: {serial_number}")


class ConcurrentModificationError(LedgerError):
    """The unit of work lost a lock or transaction conflict.

    The whole triggering call can be repeated safely.
    """

    code = "CONCURRENT_MODIFICATION"
    retryable = True

    def __init__(self, currency: str | None, reason: str) -> None:
        self.currency = currency
        self.reason = reason
        target = f" for {currency}" if currency else ""
        super().__init__(f"Concurrent ledger update{target}: {reason}")


__all__ = [
    "LedgerError",
    "ValidationError",
    "InvalidCurrencyError",
    "InvalidDateError",
    "InvalidAmountError",
    "InvalidReceiptError",
    "DuplicateSerialNumberError",
    "ConcurrentModificationError",
]
