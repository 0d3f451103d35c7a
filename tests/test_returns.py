"""
Tests for Returns and Late Fees

Expected days come from the amount paid, not from the stored duration.
"""

from datetime import date, timedelta

import pytest
from memberclub.billing.late_fee import LateFeeCalculator, round_half_up
from memberclub.billing.revenue import RevenueSource
from memberclub.core.ledger import RentalError
from memberclub.core.models import (
    Item,
    ItemKind,
    ItemStatus,
    Member,
    MembershipTier,
    Rental,
    RentalStatus,
    RentalUnit,
)


def make_rental(total_cost, start=date(2024, 6, 1)):
    return Rental(
        rental_id="RENT-001",
        member_id=1,
        item_id="TENT-001",
        start_date=start,
        expected_return_date=start,
        total_cost=total_cost,
        duration=0,
        unit=RentalUnit.DAILY,
    )


def make_item(per_day=100.0):
    return Item(
        item_id="TENT-001",
        name="Tent",
        kind=ItemKind.TENT,
        price_per_hour=20.0,
        price_per_day=per_day,
    )


class TestRounding:

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2
        assert round_half_up(3.5) == 4
        assert round_half_up(0.5) == 1
        assert round_half_up(0.0) == 0


class TestLateFeeCalculator:
    """Fee assessment in isolation."""

    def test_on_time(self):
        """Returned the day it was rented: no fee."""
        calc = LateFeeCalculator()
        member = Member(member_id=1, name="M", tier=MembershipTier.STANDARD)

        assessment = calc.assess(make_rental(300.0), make_item(), member, date(2024, 6, 1))

        assert assessment.expected_days == 3
        assert assessment.days_rented == 0
        assert assessment.fee == 0.0
        assert not assessment.is_overdue

    def test_overdue(self):
        """Three paid days returned after five: two days charged."""
        calc = LateFeeCalculator()
        member = Member(member_id=1, name="M", tier=MembershipTier.STANDARD)

        assessment = calc.assess(make_rental(300.0), make_item(), member, date(2024, 6, 6))

        assert assessment.overdue_days == 2
        assert assessment.fee == 200.0

    def test_discounted_rate(self):
        calc = LateFeeCalculator()
        member = Member(member_id=1, name="M", tier=MembershipTier.PREMIUM)

        assessment = calc.assess(make_rental(140.0), make_item(), member, date(2024, 6, 5))

        assert assessment.effective_daily_rate == pytest.approx(70.0)
        assert assessment.expected_days == 2
        assert assessment.fee == pytest.approx(140.0)

    def test_zero_rate_means_no_fee(self):
        calc = LateFeeCalculator()
        member = Member(member_id=1, name="M")

        assessment = calc.assess(make_rental(0.0), make_item(per_day=0.0), member, date(2024, 7, 1))

        assert assessment.expected_days == 0
        assert assessment.fee == 0.0

    def test_fee_grows_with_days_and_is_zero_until_due(self):
        calc = LateFeeCalculator()
        member = Member(member_id=1, name="M")
        start = date(2024, 6, 1)

        assessments = [
            calc.assess(make_rental(500.0, start), make_item(), member, start + timedelta(days=days))
            for days in range(0, 15)
        ]
        fees = [a.fee for a in assessments]

        assert assessments[0].expected_days == 5
        for earlier, later in zip(fees, fees[1:]):
            assert earlier <= later
        for a in assessments:
            if a.days_rented <= a.expected_days:
                assert a.fee == 0.0
            else:
                assert a.fee == (a.days_rented - a.expected_days) * 100.0


class TestReturnDesk:
    """Returning rentals through the session."""

    def test_return_on_time(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 3, RentalUnit.DAILY).rental

        result = system.returns.return_rental(rental.rental_id)

        assert result.ok
        assert result.late_fee == 0.0
        assert rental.status == RentalStatus.COMPLETED
        assert tent.status == ItemStatus.AVAILABLE
        assert system.revenue.total() == 0.0

    def test_return_late_credits_fee(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 3, RentalUnit.DAILY).rental
        clock.advance(5)

        result = system.returns.return_rental(rental.rental_id)

        assert result.late_fee == 200.0
        assert result.assessment.days_rented == 5
        # Original payment untouched
        assert rental.total_cost == 300.0
        assert system.revenue.breakdown()[RevenueSource.LATE_FEE.value] == 200.0

    def test_return_twice(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 1, RentalUnit.DAILY).rental
        clock.advance(3)
        system.returns.return_rental(rental.rental_id)
        total = system.revenue.total()

        second = system.returns.return_rental(rental.rental_id)

        assert not second.ok
        assert second.error == RentalError.RENTAL_NOT_ACTIVE
        assert system.revenue.total() == total

    def test_return_unknown(self, system):
        result = system.returns.return_rental("RENT-404")

        assert result.error == RentalError.RENTAL_NOT_FOUND
        assert result.late_fee == 0.0

    def test_preview_is_read_only(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 1, RentalUnit.DAILY).rental
        clock.advance(4)

        preview = system.returns.preview(rental.rental_id)

        assert preview.fee == 300.0
        assert rental.is_active
        assert tent.status == ItemStatus.RENTED
        assert system.revenue.total() == 0.0

    def test_preview_closed_rental(self, system, tent, standard_member):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 1, RentalUnit.DAILY).rental
        system.ledger.cancel(rental.rental_id)

        assert system.returns.preview(rental.rental_id) is None

    def test_member_with_active_rental_keeps_fee(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 3, RentalUnit.DAILY).rental

        removed = system.ledger.remove_member(standard_member.member_id)
        clock.advance(5)
        result = system.returns.return_rental(rental.rental_id)

        assert removed.error == RentalError.MEMBER_HAS_ACTIVE_RENTALS
        assert result.ok
        assert result.late_fee == 200.0
        assert system.revenue.total() == 200.0

    def test_missing_member_is_not_a_free_return(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 3, RentalUnit.DAILY).rental
        # Bypasses the ledger guard
        system.members.remove(standard_member.member_id)
        clock.advance(5)

        result = system.returns.return_rental(rental.rental_id)

        assert not result.ok
        assert result.error == RentalError.MEMBER_NOT_FOUND
        assert rental.is_active
        assert tent.is_rented
        assert system.revenue.total() == 0.0


class TestBulkReturn:
    """Batch returns."""

    def test_failures_are_isolated(self, system, tent, kayak, standard_member, clock):
        first = system.ledger.create(standard_member.member_id, tent.item_id, 1, RentalUnit.DAILY).rental
        second = system.ledger.create(standard_member.member_id, kayak.item_id, 1, RentalUnit.DAILY).rental
        clock.advance(2)

        bulk = system.returns.return_many([first.rental_id, "RENT-404", second.rental_id])

        assert bulk.success_count == 2
        assert [r.rental_id for r in bulk.failed] == ["RENT-404"]
        assert bulk.total_late_fees == pytest.approx(100.0 + 80.0)
        assert system.revenue.total() == pytest.approx(180.0)
        assert system.revenue.snapshot().credits == 1

    def test_duplicate_ids_not_charged_twice(self, system, tent, standard_member, clock):
        rental = system.ledger.create(standard_member.member_id, tent.item_id, 1, RentalUnit.DAILY).rental
        clock.advance(3)

        bulk = system.returns.return_many([rental.rental_id, rental.rental_id])

        assert bulk.success_count == 1
        assert bulk.failed[0].error == RentalError.RENTAL_NOT_ACTIVE
        assert system.revenue.total() == pytest.approx(200.0)

    def test_return_all_for_member(self, system, tent, kayak, standard_member, student_member):
        system.ledger.create(standard_member.member_id, tent.item_id, 1, RentalUnit.DAILY)
        system.ledger.create(student_member.member_id, kayak.item_id, 1, RentalUnit.DAILY)

        bulk = system.returns.return_all_for_member(standard_member.member_id)

        assert bulk.success_count == 1
        assert tent.status == ItemStatus.AVAILABLE
        assert kayak.status == ItemStatus.RENTED

    def test_return_all_with_nothing_active(self, system, standard_member):
        bulk = system.returns.return_all_for_member(standard_member.member_id)

        assert bulk.results == []
        assert bulk.to_dict()["success_count"] == 0
