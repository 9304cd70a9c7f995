"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_LOCK_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for the ledger store and its units of work.

    Attributes:
        db_url: SQLAlchemy URL of the ledger database.
        max_attempts: Attempts per unit of work on transient failures.
        lock_timeout_seconds: Maximum wait for a currency lock.
    """

    db_url: str
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables and a ``.env`` file.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        db_url = os.getenv("LEDGER_DB_URL", "").strip() or cls._default_db_url()
        max_attempts = cls._read_number(
            "LEDGER_MAX_ATTEMPTS",
            DEFAULT_MAX_ATTEMPTS,
            int,
            logger,
        )
        lock_timeout = cls._read_number(
            "LEDGER_LOCK_TIMEOUT",
            DEFAULT_LOCK_TIMEOUT_SECONDS,
            float,
            logger,
        )
        return cls(
            db_url=db_url,
            max_attempts=max_attempts,
            lock_timeout_seconds=lock_timeout,
        )

    @staticmethod
    def _default_db_url() -> str:
        """Return the SQLite file used when no URL is configured."""
        return f"sqlite:///{get_project_root() / 'data' / 'ledger.db'}"

    @staticmethod
    def _read_number(name: str, default, cast, logger):
        """Read a positive number, falling back to ``default`` when invalid.

        Args:
            name: Environment variable name.
            default: Value used when unset or invalid.
            cast: ``int`` or ``float``.
            logger: Logger used for warnings.

        Returns:
            Parsed positive value or the default.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = cast(raw.strip())
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}, using {default}")
            return default
        if value <= 0:
            logger.warning(f"Non-positive {name}={raw!r}, using {default}")
            return default
        return value


__all__ = ["LedgerSettings"]
