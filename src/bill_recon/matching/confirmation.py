"""
Helpers for the caller that accepts matches.
The engine only proposes matches; rolling a bill forward happens here,
on a copy of the bill.
"""

from dataclasses import replace
import logging

from ..config import MatchingSettings
from ..models.transaction import Bill, BillMatch, Confidence, PaymentRecord
from ..utils.dates import coerce_date
from .schedule import next_due_date

logger = logging.getLogger(__name__)


def group_by_confidence(matches: list[BillMatch]) -> dict[Confidence, list[BillMatch]]:
    """Bucket matches by tier, preserving their order within each tier."""
    groups: dict[Confidence, list[BillMatch]] = {tier: [] for tier in Confidence}
    for match in matches:
        groups[match.confidence].append(match)
    return groups


def select_auto_matches(
    matches: list[BillMatch], settings: MatchingSettings
) -> list[BillMatch]:
    """
    Matches that may be accepted without asking anyone.

    Only high confidence matches qualify, and only when auto matching is on
    and confirmation is not required.
    """
    if settings.require_confirmation or not settings.auto_match_high_confidence:
        return []
    return [m for m in matches if m.confidence is Confidence.HIGH]


def apply_match(match: BillMatch) -> Bill:
    """
    Return the bill as it looks once ``match`` is accepted.

    The copy is marked paid on the transaction's date, moved to its next
    due date, and gains a payment history entry. The original bill is left
    as it was.
    """
    bill = match.bill
    transaction = match.transaction
    paid_on = coerce_date(transaction.date)

    payment = PaymentRecord(
        date=paid_on,
        amount=abs(transaction.amount),
        notes=f"Matched transaction {transaction.key} (score {match.score})",
    )
    updated = replace(
        bill,
        is_paid=True,
        last_paid_date=paid_on,
        due_date=next_due_date(bill, paid_on),
        payment_history=bill.payment_history + (payment,),
    )

    logger.info(f"Bill {bill.id} paid on {paid_on}, next due {updated.due_date}")
    return updated
