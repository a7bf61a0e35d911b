"""Shared field lookup for records exported by the finance application."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional
import logging

import pandas as pd

from ..utils.dates import DateLike, coerce_date
from ..utils.exceptions import DateParseError

logger = logging.getLogger(__name__)

# The application stores camelCase keys; snake_case is accepted too
FIELD_ALIASES = {
    "recipient_name": ("recipientName", "recipient_name"),
    "due_date": ("dueDate", "due_date"),
    "is_paid": ("isPaid", "is_paid"),
    "last_paid_date": ("lastPaidDate", "last_paid_date"),
    "payment_history": ("paymentHistory", "payment_history"),
}


def get_field(record: Mapping[str, Any], name: str) -> Any:
    """
    Look up a field by canonical name, trying its aliases.

    Returns:
        The value, or None when missing or NaN
    """
    for key in FIELD_ALIASES.get(name, (name,)):
        if key in record:
            value = record[key]
            if _is_missing(value):
                return None
            return value
    return None


def get_text(record: Mapping[str, Any], name: str) -> Optional[str]:
    value = get_field(record, name)
    return None if value is None else str(value)


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse an amount, accepting thousands separators and a currency sign."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    text = str(value).strip().replace(",", "").replace("$", "")
    if text.startswith("(") and text.endswith(")"):
        text = "-" + text[1:-1]
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def parse_optional_date(value: Any, context: str) -> Optional[DateLike]:
    """
    Parse a date if possible.

    Unreadable values are passed through unchanged so matching can skip the
    date signal for them instead of losing the whole record.
    """
    if value is None:
        return None
    try:
        return coerce_date(value)
    except DateParseError:
        logger.warning(f"{context}: unreadable date {value!r}")
        return value if isinstance(value, str) else str(value)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, date)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
