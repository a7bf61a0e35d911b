"""Utility modules."""

from .dates import DateLike, coerce_date
from .exceptions import (
    BillReconError,
    ConfigurationError,
    DateParseError,
    InputParseError,
    InvalidTransactionError,
)
from .logging_config import setup_logging

__all__ = [
    "BillReconError",
    "ConfigurationError",
    "DateParseError",
    "InputParseError",
    "InvalidTransactionError",
    "DateLike",
    "coerce_date",
    "setup_logging",
]
