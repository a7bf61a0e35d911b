"""Pre-scoring filter on a bill's paid state."""

import logging

from ..models.transaction import Bill
from ..utils.dates import DateLike, coerce_date
from ..utils.exceptions import DateParseError

logger = logging.getLogger(__name__)


def is_eligible(bill: Bill, transaction_date: DateLike) -> bool:
    """
    Decide whether a transaction dated ``transaction_date`` may pay ``bill``.

    Unpaid bills accept any date; the due date only matters to scoring.
    A paid bill only accepts payments strictly after its last payment, so the
    next cycle can still be recognized. A paid bill with no usable last
    payment date accepts nothing.
    """
    if not bill.is_paid:
        return True

    if bill.last_paid_date is None:
        logger.debug(f"Bill {bill.id} is paid without a payment date, skipping")
        return False

    try:
        last_paid = coerce_date(bill.last_paid_date)
        txn_date = coerce_date(transaction_date)
    except DateParseError as e:
        logger.debug(f"Bill {bill.id}: {e}, skipping paid bill")
        return False

    return (txn_date - last_paid).days > 0
