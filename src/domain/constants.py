"""Domain constants for the foreign-currency cash ledger."""

from enum import Enum


class CurrencyCode(str, Enum):
    """Foreign currencies bought and held by the exchange desk.

    Declaration order is the display order of statements and the order in
    which multi-currency operations take currency locks.
    """

    USD = "USD"
    GBP = "GBP"
    EUR = "EUR"
    CHF = "CHF"
    AUD = "AUD"
    NZD = "NZD"
    SGD = "SGD"
    INR = "INR"
    CAD = "CAD"


class EntryKind(str, Enum):
    """Kinds of movements recorded in the transaction log."""

    PURCHASE = "purchase"
    DEPOSIT = "deposit"


__all__ = ["CurrencyCode", "EntryKind"]
