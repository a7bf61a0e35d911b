"""Data models for bill reconciliation."""

from .transaction import (
    Bill,
    BillMatch,
    Confidence,
    Interval,
    MatchSummary,
    PaymentRecord,
    Transaction,
    TransactionType,
)

__all__ = [
    "Bill",
    "BillMatch",
    "Confidence",
    "Interval",
    "MatchSummary",
    "PaymentRecord",
    "Transaction",
    "TransactionType",
]
