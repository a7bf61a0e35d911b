"""Lenient calendar-date coercion for values decoded from storage."""

from datetime import date, datetime
from typing import Union

from .exceptions import DateParseError

DateLike = Union[date, datetime, str]

# Tried in order after ISO 8601
_FALLBACK_FORMATS = ("%Y/%m/%d", "%m/%d/%Y", "%d.%m.%Y")


def coerce_date(value: DateLike) -> date:
    """
    Convert a stored date value into a calendar date.

    Datetimes are truncated to their date part. Strings are read as ISO 8601
    first (a trailing time or ``Z`` suffix is allowed), then as a few common
    day-first/month-first layouts.

    Raises:
        DateParseError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise DateParseError(f"Not a date: {value!r}")

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise DateParseError(f"Unrecognized date format: {value!r}")
