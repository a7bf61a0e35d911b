"""
Bill document parser.
Reads recurring bills exported from the finance application as YAML or JSON.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

from ..models.transaction import Bill, PaymentRecord
from ..utils.exceptions import InputParseError
from .fields import get_field, get_text, parse_amount, parse_flag, parse_optional_date

logger = logging.getLogger(__name__)


class BillParser:
    """
    Parser for bill documents.

    The file holds either a list of bill mappings or a mapping with a
    ``bills`` list. JSON files are read through the YAML loader.
    """

    def parse_file(self, file_path: Path) -> list[Bill]:
        """
        Parse a bill file.

        Args:
            file_path: Path to the YAML or JSON file

        Returns:
            List of bills; invalid entries are logged and skipped

        Raises:
            InputParseError: If the file cannot be read
        """
        logger.info(f"Parsing bill file: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to read bill file: {e}")
            raise InputParseError(f"Failed to read bill file: {e}") from e

        records = self._extract_records(document)
        bills: list[Bill] = []

        for idx, record in enumerate(records):
            try:
                bill = self.parse_record(record, idx)
            except (TypeError, ValueError) as e:
                logger.warning(f"Bill {idx}: {e}, skipping")
                continue
            if bill:
                bills.append(bill)

        logger.info(f"Extracted {len(bills)} bills")
        return bills

    def _extract_records(self, document: Any) -> list[dict]:
        if document is None:
            return []
        if isinstance(document, dict):
            document = document.get("bills", [])
        if not isinstance(document, list):
            raise InputParseError("Expected a list of bills")
        return [r for r in document if isinstance(r, dict)]

    def parse_record(self, record: dict, idx: int = 0) -> Optional[Bill]:
        """
        Convert one bill mapping into a Bill.

        Returns:
            The bill, or None if it has no id or amount
        """
        bill_id = get_text(record, "id")
        if not bill_id:
            logger.warning(f"Bill {idx}: missing id, skipping")
            return None

        amount = parse_amount(get_field(record, "amount"))
        if amount is None:
            logger.warning(f"Bill {bill_id}: missing or invalid amount, skipping")
            return None

        return Bill(
            id=bill_id,
            amount=amount,
            name=get_text(record, "name"),
            description=get_text(record, "description"),
            category=get_text(record, "category"),
            recipient_name=get_text(record, "recipient_name"),
            interval=get_text(record, "interval"),
            due_date=parse_optional_date(get_field(record, "due_date"), f"Bill {bill_id}"),
            is_paid=parse_flag(get_field(record, "is_paid")),
            last_paid_date=parse_optional_date(
                get_field(record, "last_paid_date"), f"Bill {bill_id}"
            ),
            payment_history=self._parse_history(record, bill_id),
        )

    def _parse_history(self, record: dict, bill_id: str) -> tuple[PaymentRecord, ...]:
        history = get_field(record, "payment_history") or []
        payments: list[PaymentRecord] = []

        for entry in history:
            if not isinstance(entry, dict):
                continue
            paid_on = parse_optional_date(entry.get("date"), f"Bill {bill_id} history")
            amount = parse_amount(entry.get("amount"))
            if not isinstance(paid_on, date) or amount is None:
                logger.warning(f"Bill {bill_id}: skipping unreadable payment entry")
                continue
            payments.append(PaymentRecord(date=paid_on, amount=amount, notes=entry.get("notes")))

        return tuple(payments)


def bill_to_record(bill: Bill) -> dict[str, Any]:
    """Convert a bill back into the application's camelCase document shape."""
    record: dict[str, Any] = {
        "id": bill.id,
        "name": bill.name,
        "description": bill.description,
        "category": bill.category,
        "recipientName": bill.recipient_name,
        "amount": _plain_number(bill.amount),
        "interval": bill.interval.value,
        "dueDate": _plain_date(bill.due_date),
        "isPaid": bill.is_paid,
        "lastPaidDate": _plain_date(bill.last_paid_date),
    }
    if bill.payment_history:
        record["paymentHistory"] = [
            {
                "date": p.date.isoformat(),
                "amount": _plain_number(p.amount),
                "notes": p.notes,
            }
            for p in bill.payment_history
        ]
    return {k: v for k, v in record.items() if v is not None}


def write_bills(bills: list[Bill], output_path: Path) -> None:
    """
    Write bills as a YAML document readable by ``BillParser``.

    Args:
        bills: Bills to write
        output_path: Destination file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            {"bills": [bill_to_record(b) for b in bills]},
            f,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info(f"Wrote {len(bills)} bills to {output_path}")


def _plain_number(value: Decimal) -> Any:
    return int(value) if value == value.to_integral_value() else float(value)


def _plain_date(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
