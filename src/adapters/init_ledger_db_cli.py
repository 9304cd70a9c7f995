"""CLI adapter creating the ledger tables and seeding currency locks."""

from src.infrastructure.container import build_database_adapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.schema import create_schema


def main() -> None:
    """Create missing ledger tables in the configured database."""
    logger = get_app_logger()
    adapter = build_database_adapter()
    try:
        engine = adapter.get_ledger_engine()
        seeded = create_schema(engine)
    finally:
        adapter.dispose()

    logger.info(f"Ledger schema ready, {seeded} currency locks seeded")
    print(f"Ledger schema ready ({seeded} currency locks seeded).")


if __name__ == "__main__":  # pragma: no cover
    main()
