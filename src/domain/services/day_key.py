"""Canonical calendar-day keys.

A day key identifies a calendar day independently of the time of day or
the offset the caller used to express it. Timestamps are reduced to the
wall-clock date they carry, so ``2025-11-06T00:30:00+05:30`` and
``2025-11-06`` share the key ``2025-11-06``.
"""

from datetime import date, datetime, timezone

from src.domain.exceptions import InvalidDateError

# 2000-01-01T00:00:00Z. Smaller numbers are most likely YYYYMMDD integers.
MIN_EPOCH_SECONDS = 946_684_800


def normalize_day(value) -> date:
    """Map a date, datetime, ISO string, or epoch timestamp to a day.

    Numbers are UTC epoch seconds and must not precede 2000-01-01, so an
    integer such as ``20251106`` is rejected instead of read as a 1970 day.

    Args:
        value: Raw day input from a caller.

    Returns:
        date: Calendar day the input denotes.

    Raises:
        InvalidDateError: If the input cannot be interpreted as a day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool) or value is None:
        raise InvalidDateError(value)
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if isinstance(value, str):
        return _from_text(value)
    raise InvalidDateError(value, "unsupported type")


def day_key(value) -> str:
    """Return the ISO ``YYYY-MM-DD`` storage key for a day input."""
    return normalize_day(value).isoformat()


def _from_epoch(value: int | float) -> date:
    if value < MIN_EPOCH_SECONDS:
        raise InvalidDateError(value, "not an epoch timestamp")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidDateError(value, "timestamp out of range") from exc


def _from_text(value: str) -> date:
    candidate = value.strip()
    if not candidate:
        raise InvalidDateError(value, "empty")
    if len(candidate) == 10:
        try:
            return date.fromisoformat(candidate)
        except ValueError as exc:
            raise InvalidDateError(value, str(exc)) from exc
    if candidate.endswith(("Z", "z")):
        candidate = f"{candidate[:-1]}+00:00"
    try:
        return datetime.fromisoformat(candidate).date()
    except ValueError as exc:
        raise InvalidDateError(value, str(exc)) from exc


__all__ = ["MIN_EPOCH_SECONDS", "normalize_day", "day_key"]
