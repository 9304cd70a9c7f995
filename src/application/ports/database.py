"""Database ports for the cash ledger.

This module defines the application-layer protocol for reaching the ledger
database. Infrastructure implementations own the engine lifecycle; use
cases receive the port explicitly instead of reaching for a global client.
"""

from contextlib import AbstractContextManager
from typing import Protocol

from sqlalchemy.engine import Connection, Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the ledger database engine.

    Application use cases can depend on this protocol instead of concrete
    database drivers or configuration details.
    """

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger backend.
        """

    def snapshot(self) -> AbstractContextManager[Connection]:
        """Open a read-only transaction seeing one consistent snapshot.

        Returns:
            AbstractContextManager[Connection]: Context yielding a
            connection inside a transaction that is rolled back on exit.
        """

    def dispose(self) -> None:
        """Release pooled connections held by the engine."""


__all__ = ["DatabaseEnginePort"]
