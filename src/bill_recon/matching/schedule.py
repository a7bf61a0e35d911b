"""Next due date calculation for recurring bills."""

from datetime import date, timedelta
import logging

from ..models.transaction import Bill, Interval
from ..utils.dates import DateLike, coerce_date
from ..utils.exceptions import DateParseError

logger = logging.getLogger(__name__)

# Fixed day counts, not calendar months: a monthly bill due on the 15th
# of January is next due 30 days later, on the 14th of February.
INTERVAL_DAYS = {
    Interval.WEEKLY: 7,
    Interval.MONTHLY: 30,
    Interval.YEARLY: 365,
}


def next_due_date(bill: Bill, payment_date: DateLike) -> date:
    """
    Compute the bill's next expected due date after a recognized payment.

    The offset is added to the bill's current due date, or to the payment
    date when the bill has no usable due date.
    """
    base_date = None
    if bill.due_date is not None:
        try:
            base_date = coerce_date(bill.due_date)
        except DateParseError:
            logger.warning(f"Bill {bill.id} has an unreadable due date, using payment date")

    if base_date is None:
        base_date = coerce_date(payment_date)

    days = INTERVAL_DAYS.get(bill.interval, INTERVAL_DAYS[Interval.MONTHLY])
    return base_date + timedelta(days=days)
