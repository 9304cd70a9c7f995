"""Database infrastructure for the cash ledger.

This module builds the SQLAlchemy engine behind the ledger store. The
engine is owned by an explicitly constructed adapter: it is created on
first use, shared by every repository that receives the adapter, and
released with ``dispose()`` at shutdown.
"""

from contextlib import contextmanager
import os
from pathlib import Path
from typing import Iterator

import dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the ledger database.

    PostgreSQL gets a small connection pool with health checks. SQLite
    files get a busy timeout so concurrent writers wait instead of failing
    at once, and their parent directory is created on first use. Foreign
    keys are enforced and connections may move between threads.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A configured SQLAlchemy engine instance.
    """
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        _ensure_sqlite_directory(url.database)
        engine = create_engine(
            db_url,
            connect_args={
                "timeout": SQLITE_BUSY_TIMEOUT_SECONDS,
                "check_same_thread": False,
            },
            future=True,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


def _ensure_sqlite_directory(database: str | None) -> None:
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    Path(database).parent.mkdir(parents=True, exist_ok=True)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by one SQLAlchemy engine.

    The adapter hides configuration details (URLs, pooling) behind the port
    so application use cases can depend only on the protocol.
    """

    def __init__(self, db_url: str | None = None) -> None:
        """Initialize the adapter.

        Args:
            db_url: Ledger database URL. Read from ``LEDGER_DB_URL`` when
                omitted.
        """
        self._db_url = db_url
        self._engine: Engine | None = None

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database, creating it lazily.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger backend.
        """
        if self._engine is None:
            db_url = self._db_url or _get_env_var("LEDGER_DB_URL")
            self._engine = _create_engine(db_url)
        return self._engine

    @contextmanager
    def snapshot(self) -> Iterator[Connection]:
        """Yield a connection inside a read transaction.

        PostgreSQL reads run at REPEATABLE READ so multi-query reports see
        one snapshot. The transaction is rolled back on exit.
        """
        engine = self.get_ledger_engine()
        with engine.connect() as conn:
            if engine.dialect.name == "postgresql":
                conn.execution_options(isolation_level="REPEATABLE READ")
            trans = conn.begin()
            try:
                yield conn
            finally:
                trans.rollback()

    def dispose(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "SqlAlchemyDatabaseEngineAdapter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


__all__ = [
    "SqlAlchemyDatabaseEngineAdapter",
]
