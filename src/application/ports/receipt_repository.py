"""Port for storing customer receipts."""

from typing import Protocol

from sqlalchemy.engine import Connection

from src.domain.models import Receipt


class ReceiptRepositoryPort(Protocol):
    """Write access to customer receipts and their currency lines."""

    def insert(self, conn: Connection, receipt: Receipt) -> int:
        """Store the receipt with its lines and return its identifier.

        Raises:
            DuplicateSerialNumberError: If the serial number is taken.
        """


__all__ = ["ReceiptRepositoryPort"]
