"""Tests for the paid-state eligibility guard."""

from datetime import date, datetime

import pytest

from bill_recon.matching.eligibility import is_eligible


@pytest.fixture
def paid_bill(make_bill):
    return make_bill(is_paid=True, last_paid_date=date(2024, 3, 1))


class TestIsEligible:
    def test_unpaid_bill_accepts_any_date(self, make_bill):
        bill = make_bill(due_date=date(2024, 3, 15))
        assert is_eligible(bill, date(2020, 1, 1))
        assert is_eligible(bill, date(2030, 1, 1))

    @pytest.mark.parametrize("txn_date", [date(2024, 3, 1), date(2024, 2, 28), date(2023, 12, 31)])
    def test_paid_bill_rejects_same_or_earlier(self, paid_bill, txn_date):
        assert not is_eligible(paid_bill, txn_date)

    @pytest.mark.parametrize("txn_date", [date(2024, 3, 2), date(2024, 4, 1)])
    def test_paid_bill_accepts_next_cycle(self, paid_bill, txn_date):
        assert is_eligible(paid_bill, txn_date)

    def test_datetime_on_the_paid_day_is_rejected(self, paid_bill):
        assert not is_eligible(paid_bill, datetime(2024, 3, 1, 23, 59))

    def test_paid_without_date_is_never_eligible(self, make_bill):
        bill = make_bill(is_paid=True)
        assert not is_eligible(bill, date(2099, 1, 1))

    def test_unreadable_last_paid_date_fails_safe(self, make_bill):
        bill = make_bill(is_paid=True, last_paid_date="last tuesday")
        assert not is_eligible(bill, date(2099, 1, 1))

    def test_unreadable_due_date_does_not_block(self, make_bill):
        bill = make_bill(due_date="??")
        assert is_eligible(bill, date(2024, 3, 1))
