"""
Late Fee Calculation

No rental duration is consulted here. The expected number of days is
reconstructed from what the member paid:

    effective_daily_rate = price_per_day x (1 - tier discount)
    expected_days        = round(total_cost / effective_daily_rate)
    overdue_days         = max(0, days_rented - expected_days)
    fee                  = overdue_days x effective_daily_rate

For hourly rentals the reconstruction is only approximate (a few hours of
hourly rate usually rounds to zero expected days), so an hourly rental
returned a day later is charged as overdue.
"""

from dataclasses import dataclass
from datetime import date
import math
from typing import Any, Dict
import structlog

from ..core.models import Item, Member, Rental
from ..core.pricing import tier_discount

logger = structlog.get_logger()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


@dataclass
class LateFeeAssessment:
    """Result of checking one rental for lateness."""
    rental_id: str
    days_rented: int
    expected_days: int
    effective_daily_rate: float
    overdue_days: int = 0
    fee: float = 0.0

    @property
    def is_overdue(self) -> bool:
        return self.overdue_days > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rental_id": self.rental_id,
            "days_rented": self.days_rented,
            "expected_days": self.expected_days,
            "effective_daily_rate": self.effective_daily_rate,
            "overdue_days": self.overdue_days,
            "fee": self.fee,
        }


class LateFeeCalculator:
    """Computes overdue penalties from information stored on the rental."""

    def effective_daily_rate(self, item: Item, member: Member) -> float:
        return item.price_per_day * (1 - tier_discount(member.tier))

    def expected_days(self, total_cost: float, effective_daily_rate: float) -> int:
        """Duration implied by the amount paid. Zero when the rate is zero."""
        if effective_daily_rate <= 0:
            return 0
        return round_half_up(total_cost / effective_daily_rate)

    def assess(
        self,
        rental: Rental,
        item: Item,
        member: Member,
        returned_on: date,
    ) -> LateFeeAssessment:
        """
        Assess the late fee for returning `rental` on `returned_on`.

        The member's current tier is used for the effective rate.
        """
        days_rented = (returned_on - rental.start_date).days
        rate = self.effective_daily_rate(item, member)
        expected = self.expected_days(rental.total_cost, rate)

        assessment = LateFeeAssessment(
            rental_id=rental.rental_id,
            days_rented=days_rented,
            expected_days=expected,
            effective_daily_rate=rate,
        )

        if days_rented > expected:
            assessment.overdue_days = days_rented - expected
            assessment.fee = assessment.overdue_days * rate

            logger.info(
                "late_fee_assessed",
                rental_id=rental.rental_id,
                days_rented=days_rented,
                expected_days=expected,
                overdue_days=assessment.overdue_days,
                fee=assessment.fee,
            )

        return assessment
