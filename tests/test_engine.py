"""Tests for the global bill matching engine."""

from datetime import date

import pytest

from bill_recon.config import MatchingSettings
from bill_recon.matching.engine import BillMatchingEngine, find_bill_matches
from bill_recon.models import Confidence, Transaction, TransactionType
from bill_recon.utils.exceptions import InvalidTransactionError


@pytest.fixture
def engine():
    return BillMatchingEngine()


@pytest.fixture
def spotify_bills(make_bill):
    bill_a = make_bill("bill-a", "10", name="Spotify Premium")
    bill_b = make_bill("bill-b", "10.50", name="Spotify", category="Music & Audio")
    return bill_a, bill_b


class TestMatchPair:
    def test_exact_match_is_high_confidence(self, engine, netflix_bill, netflix_txn):
        match = engine.match_pair(netflix_txn, netflix_bill)
        assert match is not None
        assert match.score == 120
        assert match.confidence is Confidence.HIGH
        assert match.reasons == (
            "Exact name match",
            "Exact category match",
            "Exact amount match",
            "Bonus: exact name + exact amount match",
            "Date within tolerance (0 days from due date)",
        )

    def test_paid_bill_is_not_scored(self, engine, make_bill, netflix_txn):
        bill = make_bill(name="Netflix", is_paid=True, last_paid_date=date(2024, 3, 15))
        assert engine.match_pair(netflix_txn, bill) is None

    def test_low_tier_needs_a_lower_threshold(self, make_bill, make_txn):
        engine = BillMatchingEngine(MatchingSettings(min_match_score=30))
        match = engine.match_pair(make_txn("Netflix Inc", "-99"), make_bill(name="Netflix"))
        assert match.score == 30
        assert match.confidence is Confidence.LOW


class TestMatch:
    def test_single_exact_match(self, engine, netflix_bill, netflix_txn):
        matches = engine.match([netflix_txn], [netflix_bill])
        assert len(matches) == 1
        assert matches[0].bill is netflix_bill
        assert matches[0].transaction is netflix_txn
        assert matches[0].confidence is Confidence.HIGH

    def test_higher_score_wins_contested_transaction(self, engine, make_txn, spotify_bills):
        bill_a, bill_b = spotify_bills
        txn = make_txn("Spotify Premium", "-10", category="Music")

        assert engine.match_pair(txn, bill_a).score == 80
        assert engine.match_pair(txn, bill_b).score == 60

        matches = engine.match([txn], [bill_b, bill_a])
        assert [(m.bill.id, m.transaction.id) for m in matches] == [("bill-a", "txn-1")]

    def test_loser_takes_next_available_transaction(self, engine, make_txn, spotify_bills):
        bill_a, bill_b = spotify_bills
        txn_1 = make_txn("Spotify Premium", "-10", category="Music", txn_id="t1")
        txn_2 = make_txn("Spotify AB", "-12", category="Music", txn_id="t2")

        assert engine.match_pair(txn_2, bill_b).score == 53
        assert engine.match_pair(txn_2, bill_a) is None

        matches = engine.match([txn_1, txn_2], [bill_a, bill_b])
        assert [(m.bill.id, m.transaction.id, m.score) for m in matches] == [
            ("bill-a", "t1", 80),
            ("bill-b", "t2", 53),
        ]

    def test_bill_matched_at_most_once(self, engine, make_bill, make_txn):
        bill = make_bill(name="Netflix")
        first = make_txn("Netflix", txn_id="t1")
        second = make_txn("Netflix", txn_id="t2", txn_date=date(2024, 4, 15))

        matches = engine.match([first, second], [bill])
        assert len(matches) == 1
        assert matches[0].transaction is first

    def test_ties_keep_enumeration_order(self, engine, make_bill, make_txn):
        twin_1 = make_bill("twin-1", name="Netflix")
        twin_2 = make_bill("twin-2", name="Netflix")
        matches = engine.match([make_txn("Netflix")], [twin_1, twin_2])
        assert [m.bill.id for m in matches] == ["twin-1"]

    def test_results_in_descending_score_order(self, engine, make_bill, make_txn):
        bills = [make_bill("weak", "10", name="Gym"), make_bill("strong", "50", name="Rent")]
        txns = [
            make_txn("Gym Membership", "-10", txn_id="t1"),
            make_txn("Rent", "-50", txn_id="t2"),
        ]
        matches = engine.match(txns, bills)
        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)
        assert matches[0].bill.id == "strong"

    def test_income_is_ignored(self, engine, netflix_bill, make_txn):
        refund = make_txn("Netflix", "15.99", txn_type=TransactionType.INCOME)
        assert engine.match([refund], [netflix_bill]) == []

    def test_untyped_negative_amount_is_an_expense(self, engine, netflix_bill, make_txn):
        untyped = make_txn("Netflix", "-15.99", txn_type=None, category="Entertainment")
        positive = make_txn("Netflix", "15.99", txn_type=None, txn_id="t2")
        matches = engine.match([positive, untyped], [netflix_bill])
        assert [m.transaction.id for m in matches] == ["txn-1"]

    def test_below_threshold_yields_nothing(self, engine, make_bill, make_txn):
        bill = make_bill(name="Rent", amount="1000", category="Utilities")
        txn = make_txn("Coffee shop", "-5", category="Utilities - Electric")
        assert engine.match([txn], [bill]) == []

    def test_no_match_below_configured_minimum(self, make_bill, make_txn):
        settings = MatchingSettings(min_match_score=90)
        matches = find_bill_matches(
            [make_txn("Netflix")], [make_bill(name="Netflix")], settings
        )
        assert matches == []

    def test_paid_bill_only_matches_later_cycle(self, engine, make_bill, make_txn):
        bill = make_bill(
            name="Netflix",
            is_paid=True,
            last_paid_date=date(2024, 3, 1),
            due_date=date(2024, 3, 31),
        )
        old = make_txn("Netflix", txn_id="old", txn_date=date(2024, 3, 1))
        new = make_txn("Netflix", txn_id="new", txn_date=date(2024, 3, 2))
        matches = engine.match([old, new], [bill])
        assert [m.transaction.id for m in matches] == ["new"]

    def test_transactions_without_id_are_claimed_by_content(self, engine, make_bill):
        bills = [make_bill("a", name="Netflix"), make_bill("b", name="Netflix")]
        txn = Transaction(description="Netflix", amount="-15.99", date=date(2024, 3, 15))
        duplicate = Transaction(description="Netflix", amount="-15.99", date=date(2024, 3, 15))

        matches = engine.match([txn, duplicate], bills)
        assert len(matches) == 1

    def test_transaction_without_identity_raises(self, engine, make_bill):
        txn = Transaction(description="", amount="-15.99", date=None)
        bill = make_bill(name="anything")
        with pytest.raises(InvalidTransactionError):
            engine.match([txn], [bill])

    def test_inputs_are_not_modified(self, engine, netflix_bill, netflix_txn):
        bills = [netflix_bill]
        txns = [netflix_txn]
        engine.match(txns, bills)
        assert bills == [netflix_bill]
        assert txns == [netflix_txn]
        assert netflix_bill.is_paid is False

    def test_no_double_claims(self, engine, make_bill, make_txn):
        bills = [
            make_bill(f"b{i}", str(10 + i), name=name, category="Subscriptions")
            for i, name in enumerate(["Netflix", "Netflix Premium", "Hulu", "Hulu Live"])
        ]
        txns = [
            make_txn(desc, f"-{10 + i}", txn_id=f"t{i}", category="Subscriptions")
            for i, desc in enumerate(["Netflix", "Netflix", "Hulu", "Hulu Live TV", "Hulu"])
        ]
        matches = engine.match(txns, bills)

        bill_ids = [m.bill.id for m in matches]
        txn_ids = [m.transaction.key for m in matches]
        assert len(bill_ids) == len(set(bill_ids))
        assert len(txn_ids) == len(set(txn_ids))
        assert all(m.score >= engine.settings.min_match_score for m in matches)


class TestReconcile:
    def test_summary_counts(self, engine, netflix_bill, netflix_txn, make_bill, make_txn):
        rent = make_bill("rent", "1200", name="Rent")
        salary = make_txn("Salary", "3000", txn_id="pay", txn_type=TransactionType.INCOME)

        matches, summary = engine.reconcile([netflix_txn, salary], [netflix_bill, rent])

        assert len(matches) == 1
        assert summary.total_bills == 2
        assert summary.total_transactions == 2
        assert summary.expense_transactions == 1
        assert summary.candidate_pairs == 1
        assert summary.matched_count == 1
        assert summary.matches_by_confidence == {"high": 1}
        assert summary.unmatched_bill_ids == ["rent"]
        assert summary.match_rate_bills == 50.0
