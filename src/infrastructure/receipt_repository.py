"""SQLAlchemy-backed storage for customer receipts."""

from sqlalchemy import insert
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from src.application.ports.receipt_repository import ReceiptRepositoryPort
from src.domain.exceptions import DuplicateSerialNumberError
from src.domain.models import Receipt
from src.infrastructure.schema import customer_receipt, customer_receipt_line
from src.utils.decimal_utils import to_minor_units

SOURCES_SEPARATOR = ", "


class SqlAlchemyReceiptRepository(ReceiptRepositoryPort):
    """Receipt repository writing header and lines in the caller's unit."""

    def insert(self, conn: Connection, receipt: Receipt) -> int:
        """Insert the receipt and its lines.

        Args:
            conn: Connection of the running unit of work.
            receipt: Validated receipt.

        Returns:
            int: Identifier of the stored receipt.

        Raises:
            DuplicateSerialNumberError: If the serial number is taken.
        """
        try:
            result = conn.execute(
                insert(customer_receipt).values(
                    serial_number=receipt.serial_number,
                    receipt_day=receipt.receipt_day.isoformat(),
                    customer_name=receipt.customer_name,
                    nic_passport=receipt.nic_passport,
                    sources=SOURCES_SEPARATOR.join(receipt.sources),
                    remarks=receipt.remarks,
                )
            )
        except IntegrityError as exc:
            raise DuplicateSerialNumberError(receipt.serial_number) from exc
        receipt_id = int(result.inserted_primary_key[0])
        conn.execute(
            insert(customer_receipt_line),
            [
                {
                    "receipt_id": receipt_id,
                    "currency": line.currency.value,
                    "amount_received": to_minor_units(line.amount_received),
                    "rate": str(line.rate),
                    "amount_issued": to_minor_units(line.amount_issued),
                }
                for line in receipt.lines
            ],
        )
        return receipt_id


__all__ = ["SqlAlchemyReceiptRepository"]
