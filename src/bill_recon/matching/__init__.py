"""Bill matching engine, scoring signals and confirmation helpers."""

from .confidence import classify
from .confirmation import apply_match, group_by_confidence, select_auto_matches
from .eligibility import is_eligible
from .engine import BillMatchingEngine, find_bill_matches
from .normalizer import normalize, string_matches, token_overlap
from .schedule import next_due_date
from .strategies import (
    AmountSignal,
    CategorySignal,
    DateProximitySignal,
    ExactComboBonus,
    NameSignal,
    RecipientSignal,
    ScoringSignal,
    score,
)

__all__ = [
    "BillMatchingEngine",
    "find_bill_matches",
    "classify",
    "is_eligible",
    "next_due_date",
    "normalize",
    "string_matches",
    "token_overlap",
    "score",
    "ScoringSignal",
    "NameSignal",
    "CategorySignal",
    "RecipientSignal",
    "AmountSignal",
    "ExactComboBonus",
    "DateProximitySignal",
    "apply_match",
    "group_by_confidence",
    "select_auto_matches",
]
