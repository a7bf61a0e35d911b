"""Shared fixtures for bill matching tests."""

from datetime import date
from decimal import Decimal

import pytest

from bill_recon.config import MatchingSettings
from bill_recon.models import Bill, Transaction, TransactionType


@pytest.fixture
def settings():
    return MatchingSettings()


@pytest.fixture
def permissive_settings():
    """Settings that keep every scored pair, for inspecting raw scores."""
    return MatchingSettings(min_match_score=0)


@pytest.fixture
def make_bill():
    def _make(bill_id="bill-1", amount="15.99", **kwargs):
        return Bill(id=bill_id, amount=Decimal(amount), **kwargs)

    return _make


@pytest.fixture
def make_txn():
    def _make(
        description="",
        amount="-15.99",
        txn_date=date(2024, 3, 15),
        txn_id="txn-1",
        txn_type=TransactionType.EXPENSE,
        **kwargs,
    ):
        return Transaction(
            id=txn_id,
            description=description,
            amount=Decimal(amount),
            date=txn_date,
            type=txn_type,
            **kwargs,
        )

    return _make


@pytest.fixture
def netflix_bill(make_bill):
    return make_bill(
        "netflix",
        "15.99",
        name="Netflix",
        category="Entertainment",
        due_date=date(2024, 3, 15),
    )


@pytest.fixture
def netflix_txn(make_txn):
    return make_txn("Netflix", "-15.99", category="Entertainment")
