"""Data models for bills, bank transactions and bill matches."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
import hashlib
import json

from ..utils.dates import DateLike
from ..utils.exceptions import InvalidTransactionError


class Interval(Enum):
    """Recurrence interval of a bill."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def from_value(cls, value: Any) -> "Interval":
        """Read an interval; absent or unknown values recur monthly."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MONTHLY


class TransactionType(Enum):
    """Direction of a bank transaction."""

    INCOME = "income"  # Money in
    EXPENSE = "expense"  # Money out


class Confidence(Enum):
    """Coarse confidence tier of a match."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class PaymentRecord:
    """One confirmed payment of a bill."""

    date: date
    amount: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class Bill:
    """
    Recurring obligation template (rent, a subscription, a utility).

    Optional text fields are ``None`` when absent; an empty string is a
    present but empty value. ``due_date`` is the expected date of the next
    unpaid occurrence.
    """

    id: str
    amount: Decimal
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    recipient_name: Optional[str] = None
    interval: Interval = Interval.MONTHLY
    due_date: Optional[DateLike] = None
    is_paid: bool = False
    last_paid_date: Optional[DateLike] = None
    payment_history: tuple[PaymentRecord, ...] = ()

    def __post_init__(self) -> None:
        """Coerce amount and interval into their canonical types."""
        object.__setattr__(self, "amount", _to_decimal(self.amount))
        object.__setattr__(self, "interval", Interval.from_value(self.interval))
        object.__setattr__(self, "payment_history", tuple(self.payment_history))

    @property
    def display_name(self) -> str:
        """Name shown to users, falling back to the description or the id."""
        return self.name or self.description or self.id


@dataclass(frozen=True)
class Transaction:
    """Bank record as decoded by the data source."""

    description: str
    amount: Decimal
    date: DateLike
    id: Optional[str] = None
    category: Optional[str] = None
    recipient_name: Optional[str] = None
    type: Optional[TransactionType] = None

    def __post_init__(self) -> None:
        """Coerce amount and type into their canonical types."""
        object.__setattr__(self, "amount", _to_decimal(self.amount))
        if self.type is not None and not isinstance(self.type, TransactionType):
            object.__setattr__(self, "type", TransactionType(str(self.type).lower()))

    @property
    def effective_type(self) -> TransactionType:
        """Tagged type, or the direction implied by the amount's sign."""
        if self.type is not None:
            return self.type
        return TransactionType.EXPENSE if self.amount < 0 else TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.effective_type is TransactionType.EXPENSE

    @property
    def key(self) -> str:
        """
        Identity used to claim the transaction during matching.

        The id when present, otherwise a SHA-256 digest of the record's
        content so that equal records collide and different ones do not.

        Raises:
            InvalidTransactionError: If there is no id and neither a date
                nor a description to tell the record apart
        """
        if self.id:
            return self.id

        if not self.description and self.date in (None, ""):
            raise InvalidTransactionError(
                "Transaction has no id and no content to derive one from"
            )
        content = {k: v for k, v in asdict(self).items() if k != "id"}
        payload = json.dumps(content, sort_keys=True, default=_json_default)
        return "sha256:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Unserializable value: {value!r}")


@dataclass(frozen=True)
class BillMatch:
    """Proposed pairing of one transaction to one bill occurrence."""

    bill: Bill
    transaction: Transaction
    score: int
    confidence: Confidence
    reasons: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Stable identity of the pairing, used by confirmation UIs."""
        return f"{self.bill.id}-{self.transaction.key}"


@dataclass
class MatchSummary:
    """Summary of a matching run."""

    total_bills: int
    total_transactions: int
    expense_transactions: int
    candidate_pairs: int
    matched_count: int

    matches_by_confidence: dict[str, int] = field(default_factory=dict)
    unmatched_bill_ids: list[str] = field(default_factory=list)

    processing_time_seconds: float = 0.0
    config_file_used: Optional[str] = None

    @property
    def match_rate_bills(self) -> float:
        """Percentage of bills that received a match."""
        if self.total_bills == 0:
            return 0.0
        return (self.matched_count / self.total_bills) * 100
