"""
Scoring signals for bill matching.
Each signal scores one aspect of a (transaction, bill) pair; the scorer adds
them up in a fixed order.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
import logging
import math

from ..config import MatchingSettings
from ..models.transaction import Bill, Interval, Transaction
from ..utils.dates import coerce_date
from ..utils.exceptions import DateParseError
from .normalizer import string_matches, token_overlap

logger = logging.getLogger(__name__)

FUZZY_NAME_THRESHOLD = 0.5
EXACT_COMBO_BONUS = 10

# Date tolerance by interval; other intervals use the configured tolerance
INTERVAL_DATE_TOLERANCE = {
    Interval.WEEKLY: 3,
    Interval.YEARLY: 30,
}


@dataclass
class ScoringContext:
    """Pair under evaluation plus what earlier signals found."""

    transaction: Transaction
    bill: Bill
    settings: MatchingSettings
    exact_signals: set[str] = field(default_factory=set)


@dataclass
class SignalResult:
    """Points contributed by a single signal."""

    points: int = 0
    reason: Optional[str] = None
    exact: bool = False


NO_POINTS = SignalResult()


class ScoringSignal(ABC):
    """Abstract base class for scoring signals."""

    name: str = ""

    @abstractmethod
    def evaluate(self, context: ScoringContext) -> SignalResult:
        """
        Score one aspect of the pair in ``context``.

        Returns:
            Signal result; zero points when the signal does not fire
        """
        pass


class _TextSignal(ScoringSignal):
    """Exact/partial comparison of one optional text field on both sides."""

    label: str = ""
    exact_points: int = 0
    partial_points: int = 0

    @abstractmethod
    def _values(self, context: ScoringContext) -> tuple[Optional[str], Optional[str]]:
        """Return the (bill, transaction) values to compare."""
        pass

    def evaluate(self, context: ScoringContext) -> SignalResult:
        bill_value, txn_value = self._values(context)
        if not bill_value or not txn_value:
            return NO_POINTS

        exact, partial = string_matches(bill_value, txn_value)
        if exact:
            return SignalResult(self.exact_points, f"Exact {self.label} match", exact=True)
        if partial:
            return SignalResult(self.partial_points, f"Partial {self.label} match")
        return NO_POINTS


class NameSignal(_TextSignal):
    """
    Bill name (or description) against the transaction description.
    Falls back to word overlap when neither string contains the other.
    """

    name = "name"
    label = "name"
    exact_points = 40
    partial_points = 30
    fuzzy_points = 20

    def _values(self, context: ScoringContext) -> tuple[Optional[str], Optional[str]]:
        bill = context.bill
        return bill.name or bill.description, context.transaction.description

    def evaluate(self, context: ScoringContext) -> SignalResult:
        result = super().evaluate(context)
        if result.points:
            return result

        bill_name, description = self._values(context)
        if not bill_name or not description:
            return NO_POINTS

        overlap = token_overlap(bill_name, description)
        if overlap > FUZZY_NAME_THRESHOLD:
            percent = math.floor(overlap * 100 + 0.5)
            return SignalResult(self.fuzzy_points, f"Fuzzy name match ({percent}%)")
        return NO_POINTS


class CategorySignal(_TextSignal):
    name = "category"
    label = "category"
    exact_points = 30
    partial_points = 15

    def _values(self, context: ScoringContext) -> tuple[Optional[str], Optional[str]]:
        return context.bill.category, context.transaction.category


class RecipientSignal(_TextSignal):
    name = "recipient"
    label = "recipient"
    exact_points = 20
    partial_points = 10

    def _values(self, context: ScoringContext) -> tuple[Optional[str], Optional[str]]:
        return context.bill.recipient_name, context.transaction.recipient_name


class AmountSignal(ScoringSignal):
    """Compares magnitudes, tolerating a percentage of the bill amount."""

    name = "amount"

    def evaluate(self, context: ScoringContext) -> SignalResult:
        bill_amount = abs(context.bill.amount)
        txn_amount = abs(context.transaction.amount)
        if bill_amount == 0 or txn_amount == 0:
            return NO_POINTS

        if bill_amount == txn_amount:
            return SignalResult(30, "Exact amount match", exact=True)

        tolerance = Decimal(str(context.settings.amount_tolerance))
        percent_diff = abs(bill_amount - txn_amount) / bill_amount * 100

        if percent_diff <= tolerance:
            return SignalResult(15, f"Amount within tolerance ({percent_diff:.1f}% diff)")
        if percent_diff <= tolerance * 2:
            return SignalResult(8, f"Amount close ({percent_diff:.1f}% diff)")
        return NO_POINTS


class ExactComboBonus(ScoringSignal):
    """Rewards an exact name together with an exact amount."""

    name = "combo_bonus"

    def evaluate(self, context: ScoringContext) -> SignalResult:
        if {NameSignal.name, AmountSignal.name} <= context.exact_signals:
            return SignalResult(EXACT_COMBO_BONUS, "Bonus: exact name + exact amount match")
        return NO_POINTS


class DateProximitySignal(ScoringSignal):
    """
    Closeness of the transaction to the bill's due date.

    Worth up to 10 points, losing one per day of distance, inside the
    interval's tolerance; a flat 2 points up to twice the tolerance.
    """

    name = "date"
    max_points = 10
    near_points = 2

    def evaluate(self, context: ScoringContext) -> SignalResult:
        bill = context.bill
        if bill.due_date is None:
            return NO_POINTS

        try:
            due_date = coerce_date(bill.due_date)
            txn_date = coerce_date(context.transaction.date)
        except DateParseError as e:
            logger.debug(f"Bill {bill.id}: skipping date proximity ({e})")
            return NO_POINTS

        days_diff = abs((txn_date - due_date).days)
        tolerance = INTERVAL_DATE_TOLERANCE.get(
            bill.interval, context.settings.date_tolerance_days
        )

        if days_diff <= tolerance:
            points = max(0, self.max_points - days_diff)
            if points:
                return SignalResult(
                    points, f"Date within tolerance ({days_diff} days from due date)"
                )
            return NO_POINTS
        if days_diff <= tolerance * 2:
            return SignalResult(
                self.near_points, f"Date somewhat close ({days_diff} days from due date)"
            )
        return NO_POINTS


DEFAULT_SIGNALS: tuple[ScoringSignal, ...] = (
    NameSignal(),
    CategorySignal(),
    RecipientSignal(),
    AmountSignal(),
    ExactComboBonus(),
    DateProximitySignal(),
)


def score(
    transaction: Transaction,
    bill: Bill,
    settings: MatchingSettings,
    signals: tuple[ScoringSignal, ...] = DEFAULT_SIGNALS,
) -> Optional[tuple[int, list[str]]]:
    """
    Score a (transaction, bill) pair.

    Args:
        transaction: Candidate payment
        bill: Bill it might pay
        settings: Matching settings
        signals: Signals to apply, in order

    Returns:
        Tuple of (points, reasons), or None if points fall below
        ``settings.min_match_score``
    """
    context = ScoringContext(transaction=transaction, bill=bill, settings=settings)
    points = 0
    reasons: list[str] = []

    for signal in signals:
        result = signal.evaluate(context)
        if result.exact:
            context.exact_signals.add(signal.name)
        if result.points:
            points += result.points
            reasons.append(result.reason)

    if points < settings.min_match_score:
        return None
    return points, reasons
