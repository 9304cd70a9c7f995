"""Use case recording a customer receipt and its purchases."""

from collections.abc import Iterable, Mapping
from typing import Any

from src.application.ports.receipt_repository import ReceiptRepositoryPort
from src.application.ports.transaction_log import TransactionLogPort
from src.application.use_cases.recalculate_balances import (
    BalanceRecalculationEngine,
    lock_order,
)
from src.domain.constants import EntryKind
from src.domain.exceptions import InvalidReceiptError
from src.domain.models import (
    LedgerEntry,
    Receipt,
    ReceiptLine,
    ReceiptResult,
)
from src.domain.services.day_key import normalize_day
from src.domain.services.normalization import (
    normalize_amount,
    normalize_currency,
    normalize_rate,
)
from src.infrastructure.logging.logger import get_app_logger, get_audit_logger


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_text(value: Any, field: str) -> str:
    if _is_blank(value) or not isinstance(value, str):
        raise InvalidReceiptError(f"Missing required field: {field}")
    return value.strip()


class RecordReceiptUseCase:
    """Store a receipt and post one purchase per currency line."""

    def __init__(
        self,
        engine: BalanceRecalculationEngine,
        transaction_log: TransactionLogPort,
        receipt_repository: ReceiptRepositoryPort,
        logger=None,
        audit_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            engine: Recalculation engine running the unit of work.
            transaction_log: Log receiving the purchase entries.
            receipt_repository: Storage for the receipt itself.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger for posted movements.
        """
        self._engine = engine
        self._transaction_log = transaction_log
        self._receipt_repository = receipt_repository
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_audit_logger()

    def execute(
        self,
        serial_number: str,
        receipt_day,
        customer_name: str,
        nic_passport: str,
        sources: Iterable[str],
        lines: Iterable[Mapping[str, Any]],
        remarks: str | None = None,
    ) -> ReceiptResult:
        """Record the receipt atomically.

        Args:
            serial_number: Unique receipt serial number.
            receipt_day: Day of the receipt.
            customer_name: Name of the customer.
            nic_passport: Identity document number.
            sources: Declared sources of the foreign currency.
            lines: Mappings with ``currency``, ``amount_received``, ``rate``
                and ``amount_issued`` keys, as submitted by a form.
            remarks: Optional free text.

        Returns:
            ReceiptResult: Identifier and posted purchase count.

        Raises:
            InvalidReceiptError: If required fields or lines are missing.
            DuplicateSerialNumberError: If the serial number is taken.
        """
        receipt = self._build_receipt(
            serial_number,
            receipt_day,
            customer_name,
            nic_passport,
            sources,
            lines,
            remarks,
        )
        currencies = lock_order(line.currency for line in receipt.lines)

        def _work(conn):
            receipt_id = self._receipt_repository.insert(conn, receipt)
            entry_ids = [
                self._transaction_log.append(
                    conn,
                    LedgerEntry(
                        kind=EntryKind.PURCHASE,
                        currency=line.currency,
                        day=receipt.receipt_day,
                        amount=line.amount_received,
                        receipt_id=receipt_id,
                    ),
                )
                for line in receipt.lines
            ]
            for currency in currencies:
                self._engine.recalculate(conn, currency, receipt.receipt_day)
            return receipt_id, entry_ids

        receipt_id, entry_ids = self._engine.run_unit(currencies, _work)
        for entry_id, line in zip(entry_ids, receipt.lines):
            self._audit_logger.info(
                f"purchase entry={entry_id} receipt={receipt.serial_number} "
                f"currency={line.currency.value} "
                f"day={receipt.receipt_day.isoformat()} "
                f"amount={line.amount_received}"
            )
        self._logger.info(
            f"Recorded receipt {receipt.serial_number} with "
            f"{len(receipt.lines)} currency lines"
        )
        return ReceiptResult(
            receipt_id=receipt_id,
            serial_number=receipt.serial_number,
            purchase_count=len(entry_ids),
            currencies=currencies,
        )

    def _build_receipt(
        self,
        serial_number,
        receipt_day,
        customer_name,
        nic_passport,
        sources,
        lines,
        remarks,
    ) -> Receipt:
        serial = _require_text(serial_number, "serial_number")
        name = _require_text(customer_name, "customer_name")
        identity = _require_text(nic_passport, "nic_passport")
        cleaned_sources = tuple(
            source.strip()
            for source in (sources or [])
            if isinstance(source, str) and source.strip()
        )
        if not cleaned_sources:
            raise InvalidReceiptError("At least one source is required")
        parsed_lines = tuple(
            self._parse_line(line)
            for line in (lines or [])
            if not self._is_blank_line(line)
        )
        if not parsed_lines:
            raise InvalidReceiptError(
                "At least one currency line is required"
            )
        cleaned_remarks = None
        if isinstance(remarks, str) and remarks.strip():
            cleaned_remarks = remarks.strip()
        return Receipt(
            serial_number=serial,
            receipt_day=normalize_day(receipt_day),
            customer_name=name,
            nic_passport=identity,
            sources=cleaned_sources,
            lines=parsed_lines,
            remarks=cleaned_remarks,
        )

    @staticmethod
    def _is_blank_line(line: Mapping[str, Any] | None) -> bool:
        if line is None:
            return True
        if not isinstance(line, Mapping):
            raise InvalidReceiptError(
                f"Currency line must be a mapping, got {type(line).__name__}"
            )
        if _is_blank(line.get("currency")):
            return True
        return _is_blank(line.get("amount_received")) and _is_blank(
            line.get("rate")
        )

    @staticmethod
    def _parse_line(line: Mapping[str, Any]) -> ReceiptLine:
        def _optional(key: str, parse):
            value = line.get(key)
            return parse("0" if _is_blank(value) else value)

        return ReceiptLine(
            currency=normalize_currency(line.get("currency")),
            amount_received=_optional("amount_received", normalize_amount),
            rate=_optional("rate", normalize_rate),
            amount_issued=_optional("amount_issued", normalize_amount),
        )


__all__ = ["RecordReceiptUseCase"]
