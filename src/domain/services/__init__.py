"""Domain services package."""

from .balances import (
    carry_forward,
    compute_closing,
    rebalance_day,
    same_balances,
)
from .day_key import day_key, normalize_day
from .normalization import (
    normalize_amount,
    normalize_currency,
    normalize_rate,
)

__all__ = [
    "carry_forward",
    "compute_closing",
    "rebalance_day",
    "same_balances",
    "day_key",
    "normalize_day",
    "normalize_amount",
    "normalize_currency",
    "normalize_rate",
]
