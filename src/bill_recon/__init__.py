"""Reconciliation of bank transactions against recurring bills."""

from .config import MatchingSettings
from .matching import (
    BillMatchingEngine,
    apply_match,
    classify,
    find_bill_matches,
    is_eligible,
    next_due_date,
    normalize,
    score,
)
from .models import Bill, BillMatch, Confidence, Interval, Transaction, TransactionType

__version__ = "0.1.0"

__all__ = [
    "Bill",
    "BillMatch",
    "BillMatchingEngine",
    "Confidence",
    "Interval",
    "MatchingSettings",
    "Transaction",
    "TransactionType",
    "apply_match",
    "classify",
    "find_bill_matches",
    "is_eligible",
    "next_due_date",
    "normalize",
    "score",
]
