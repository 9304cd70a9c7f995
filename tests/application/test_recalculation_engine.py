"""Tests for the unit-of-work handling of BalanceRecalculationEngine."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from src.application.use_cases.recalculate_balances import (
    BalanceRecalculationEngine,
    lock_order,
)
from src.domain.constants import CurrencyCode
from src.domain.exceptions import ConcurrentModificationError


def _build_engine(max_attempts: int = 3):
    """Create an engine whose database port yields a mock connection."""
    conn = MagicMock()
    begin_ctx = MagicMock()
    begin_ctx.__enter__.return_value = conn
    sql_engine = MagicMock()
    sql_engine.begin.return_value = begin_ctx

    db_port = MagicMock()
    db_port.get_ledger_engine.return_value = sql_engine
    currency_lock = MagicMock()
    logger = MagicMock()

    engine = BalanceRecalculationEngine(
        db_port,
        ledger_store=MagicMock(),
        transaction_log=MagicMock(),
        currency_lock=currency_lock,
        logger=logger,
        max_attempts=max_attempts,
    )
    return engine, sql_engine, conn, currency_lock, logger


def test_lock_order_follows_currency_declaration() -> None:
    """Locks are always taken in one global order."""
    ordered = lock_order(
        [CurrencyCode.EUR, CurrencyCode.USD, CurrencyCode.EUR]
    )

    assert ordered == [CurrencyCode.USD, CurrencyCode.EUR]


def test_run_unit_takes_locks_and_returns_work_result() -> None:
    engine, _, conn, currency_lock, _ = _build_engine()
    work = MagicMock(return_value="done")

    result = engine.run_unit([CurrencyCode.GBP, CurrencyCode.USD], work)

    assert result == "done"
    work.assert_called_once_with(conn)
    currency_lock.hold.assert_called_once_with(
        [CurrencyCode.USD, CurrencyCode.GBP]
    )
    currency_lock.acquire_rows.assert_called_once_with(
        conn,
        [CurrencyCode.USD, CurrencyCode.GBP],
    )


def test_run_unit_retries_transient_failures() -> None:
    """Operational errors retry the whole unit from the beginning."""
    engine, sql_engine, _, _, logger = _build_engine(max_attempts=3)
    calls = []

    def _work(conn):
        calls.append(conn)
        if len(calls) < 3:
            raise OperationalError("UPDATE", {}, Exception("locked"))
        return "ok"

    assert engine.run_unit([CurrencyCode.USD], _work) == "ok"
    assert len(calls) == 3
    assert sql_engine.begin.call_count == 3
    assert logger.warning.call_count == 2


def test_run_unit_gives_up_with_concurrent_modification() -> None:
    engine, _, _, _, logger = _build_engine(max_attempts=2)
    work = MagicMock(
        side_effect=OperationalError("UPDATE", {}, Exception("locked"))
    )

    with pytest.raises(ConcurrentModificationError) as exc_info:
        engine.run_unit([CurrencyCode.CHF], work)

    assert exc_info.value.retryable is True
    assert exc_info.value.currency == "CHF"
    assert work.call_count == 2
    assert logger.warning.call_count == 2


def test_run_unit_retries_invalidated_connections() -> None:
    engine, _, _, _, _ = _build_engine(max_attempts=2)
    dropped = DBAPIError(
        "SELECT",
        {},
        Exception("gone"),
        connection_invalidated=True,
    )
    work = MagicMock(side_effect=[dropped, "ok"])

    assert engine.run_unit([CurrencyCode.USD], work) == "ok"


def test_run_unit_propagates_persistent_errors() -> None:
    """Constraint violations are not retried and surface unchanged."""
    engine, _, _, _, _ = _build_engine(max_attempts=3)
    failure = IntegrityError("INSERT", {}, Exception("constraint"))
    work = MagicMock(side_effect=failure)

    with pytest.raises(IntegrityError) as exc_info:
        engine.run_unit([CurrencyCode.USD], work)

    assert exc_info.value is failure
    work.assert_called_once()
