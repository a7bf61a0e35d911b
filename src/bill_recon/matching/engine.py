"""
Global bill matching engine.
Scores every eligible (transaction, bill) pair and commits a one-to-one
assignment greedily by descending score.
"""

from datetime import datetime
from typing import Iterable, Optional
import logging

from ..config import MatchingSettings
from ..models.transaction import Bill, BillMatch, MatchSummary, Transaction
from .confidence import classify
from .eligibility import is_eligible
from .strategies import DEFAULT_SIGNALS, ScoringSignal, score

logger = logging.getLogger(__name__)


class BillMatchingEngine:
    """
    Matches bank transactions to recurring bills.

    Each call works on the collections it is given and keeps no state
    between calls; bills and transactions are never modified.
    """

    def __init__(
        self,
        settings: Optional[MatchingSettings] = None,
        signals: tuple[ScoringSignal, ...] = DEFAULT_SIGNALS,
    ):
        """
        Initialize the matching engine.

        Args:
            settings: Matching settings, defaults when omitted
            signals: Scoring signals in evaluation order
        """
        self.settings = settings or MatchingSettings()
        self.signals = signals

    def match_pair(self, transaction: Transaction, bill: Bill) -> Optional[BillMatch]:
        """
        Evaluate a single pair.

        Returns:
            The match, or None if the bill cannot take this transaction or
            the score is below the minimum
        """
        if not is_eligible(bill, transaction.date):
            return None

        scored = score(transaction, bill, self.settings, self.signals)
        if scored is None:
            return None

        points, reasons = scored
        return BillMatch(
            bill=bill,
            transaction=transaction,
            score=points,
            confidence=classify(points),
            reasons=tuple(reasons),
        )

    def find_candidates(
        self, transactions: Iterable[Transaction], bills: Iterable[Bill]
    ) -> list[BillMatch]:
        """
        Score every eligible expense/bill pair.

        Returns:
            Candidate matches in enumeration order (transactions outer,
            bills inner)
        """
        bills = list(bills)
        candidates: list[BillMatch] = []

        for transaction in transactions:
            if not transaction.is_expense:
                continue
            # Raises early for records that cannot be claimed
            txn_key = transaction.key
            for bill in bills:
                candidate = self.match_pair(transaction, bill)
                if candidate is not None:
                    logger.debug(
                        f"Candidate {bill.id} <- {txn_key}: "
                        f"{candidate.score} ({', '.join(candidate.reasons)})"
                    )
                    candidates.append(candidate)

        return candidates

    def match(
        self, transactions: Iterable[Transaction], bills: Iterable[Bill]
    ) -> list[BillMatch]:
        """
        Find a conflict-free set of bill matches.

        Args:
            transactions: Bank transactions; only expenses are considered
            bills: Recurring bills

        Returns:
            Matches in descending score order; each bill and each
            transaction appears at most once
        """
        return self.assign(self.find_candidates(transactions, bills))

    @staticmethod
    def assign(candidates: list[BillMatch]) -> list[BillMatch]:
        """
        Greedily commit candidates by descending score.

        A candidate is skipped when its bill or transaction was claimed by a
        higher scored one. Ties keep their enumeration order. This is not an
        optimal assignment: a bill may lose its best transaction to a
        stronger claim even when another pairing would score more in total.
        """
        ranked = sorted(candidates, key=lambda m: m.score, reverse=True)

        claimed_bills: set[str] = set()
        claimed_transactions: set[str] = set()
        matches: list[BillMatch] = []

        for candidate in ranked:
            bill_id = candidate.bill.id
            txn_key = candidate.transaction.key
            if bill_id in claimed_bills or txn_key in claimed_transactions:
                continue

            matches.append(candidate)
            claimed_bills.add(bill_id)
            claimed_transactions.add(txn_key)

        return matches

    def reconcile(
        self,
        transactions: list[Transaction],
        bills: list[Bill],
        config_file: Optional[str] = None,
    ) -> tuple[list[BillMatch], MatchSummary]:
        """
        Run a full matching pass and summarize it.

        Returns:
            Tuple of (matches, summary)
        """
        start_time = datetime.now()
        logger.info(
            f"Starting bill matching: {len(transactions)} transactions, {len(bills)} bills"
        )

        candidates = self.find_candidates(transactions, bills)
        matches = self.assign(candidates)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Bill matching complete in {elapsed:.2f}s: {len(candidates)} candidates, "
            f"{len(matches)} matches"
        )

        summary = self.generate_summary(
            transactions=transactions,
            bills=bills,
            candidates=candidates,
            matches=matches,
            processing_time=elapsed,
            config_file=config_file,
        )
        return matches, summary

    def generate_summary(
        self,
        transactions: list[Transaction],
        bills: list[Bill],
        candidates: list[BillMatch],
        matches: list[BillMatch],
        processing_time: float,
        config_file: Optional[str] = None,
    ) -> MatchSummary:
        """
        Generate a summary of the matching results.

        Args:
            transactions: All transactions fed in
            bills: All bills fed in
            candidates: Pairs that cleared the minimum score
            matches: Committed matches
            processing_time: Time taken in seconds
            config_file: Configuration file used, if any

        Returns:
            Match summary object
        """
        by_confidence: dict[str, int] = {}
        for match in matches:
            tier = match.confidence.value
            by_confidence[tier] = by_confidence.get(tier, 0) + 1

        matched_ids = {m.bill.id for m in matches}

        return MatchSummary(
            total_bills=len(bills),
            total_transactions=len(transactions),
            expense_transactions=sum(1 for t in transactions if t.is_expense),
            candidate_pairs=len(candidates),
            matched_count=len(matches),
            matches_by_confidence=by_confidence,
            unmatched_bill_ids=[b.id for b in bills if b.id not in matched_ids],
            processing_time_seconds=processing_time,
            config_file_used=config_file,
        )


def find_bill_matches(
    transactions: Iterable[Transaction],
    bills: Iterable[Bill],
    settings: Optional[MatchingSettings] = None,
) -> list[BillMatch]:
    """Match transactions to bills with the default signals."""
    return BillMatchingEngine(settings).match(transactions, bills)
