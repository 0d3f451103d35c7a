"""
Return Desk

Completes rentals through the ledger and charges late fees. Fees are
credited to revenue as their own amounts; the original rental payment is
never adjusted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import structlog

from ..core.ledger import RentalError, RentalLedger
from ..core.models import Rental
from .late_fee import LateFeeAssessment, LateFeeCalculator
from .revenue import RevenueLedger, RevenueSource

logger = structlog.get_logger()


@dataclass
class ReturnResult:
    """Outcome of returning a single rental."""
    rental_id: str
    rental: Optional[Rental] = None
    assessment: Optional[LateFeeAssessment] = None
    error: Optional[RentalError] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def late_fee(self) -> float:
        return self.assessment.fee if self.assessment else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rental_id": self.rental_id,
            "ok": self.ok,
            "rental": self.rental.to_dict() if self.rental else None,
            "late_fee": self.late_fee,
            "assessment": self.assessment.to_dict() if self.assessment else None,
            "error": self.error.value if self.error else None,
            "message": self.message,
        }


@dataclass
class BulkReturnResult:
    """Per-rental outcomes of a batch return."""
    results: List[ReturnResult] = field(default_factory=list)

    @property
    def returned(self) -> List[ReturnResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[ReturnResult]:
        return [r for r in self.results if not r.ok]

    @property
    def success_count(self) -> int:
        return len(self.returned)

    @property
    def total_late_fees(self) -> float:
        return sum(r.late_fee for r in self.returned)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success_count": self.success_count,
            "failure_count": len(self.failed),
            "total_late_fees": self.total_late_fees,
            "results": [r.to_dict() for r in self.results],
        }


class ReturnDesk:
    """Single, bulk and per-member returns."""

    def __init__(
        self,
        ledger: RentalLedger,
        revenue: RevenueLedger,
        calculator: Optional[LateFeeCalculator] = None,
    ):
        self.ledger = ledger
        self.revenue = revenue
        self.calculator = calculator or LateFeeCalculator()

    def preview(self, rental_id: str) -> Optional[LateFeeAssessment]:
        """Late fee the rental would incur if returned today. Read-only."""
        rental = self.ledger.by_id(rental_id)
        if rental is None or not rental.is_active:
            return None

        item = self.ledger.inventory.get(rental.item_id)
        member = self.ledger.members.get(rental.member_id)
        if item is None or member is None:
            return None

        return self.calculator.assess(rental, item, member, self.ledger.clock())

    def return_rental(self, rental_id: str) -> ReturnResult:
        """Return one rental and credit its late fee, if any."""
        result = self._process(rental_id)

        if result.ok and result.late_fee > 0:
            self.revenue.add(result.late_fee, RevenueSource.LATE_FEE)

        return result

    def return_many(self, rental_ids: Iterable[str]) -> BulkReturnResult:
        """
        Return several rentals independently.

        A failed return is recorded and the batch carries on. The summed late
        fees are credited once at the end.
        """
        bulk = BulkReturnResult()

        for rental_id in rental_ids:
            bulk.results.append(self._process(rental_id))

        if bulk.total_late_fees > 0:
            self.revenue.add(bulk.total_late_fees, RevenueSource.LATE_FEE)

        logger.info(
            "bulk_return_processed",
            returned=bulk.success_count,
            failed=len(bulk.failed),
            total_late_fees=bulk.total_late_fees,
        )

        return bulk

    def return_all_for_member(self, member_id: int) -> BulkReturnResult:
        """Return every active rental held by a member."""
        rental_ids = [
            r.rental_id for r in self.ledger.rentals_for_member(member_id, active_only=True)
        ]
        return self.return_many(rental_ids)

    def _process(self, rental_id: str) -> ReturnResult:
        rental = self.ledger.by_id(rental_id)
        if rental is None:
            return ReturnResult(
                rental_id=rental_id,
                error=RentalError.RENTAL_NOT_FOUND,
                message=f"Rental {rental_id} not found",
            )

        # The fee needs both records; without them the rental stays open
        item = self.ledger.inventory.get(rental.item_id)
        member = self.ledger.members.get(rental.member_id)
        if rental.is_active and (item is None or member is None):
            error = RentalError.MEMBER_NOT_FOUND if member is None else RentalError.ITEM_NOT_FOUND
            logger.warning(
                "return_refused",
                rental_id=rental_id,
                error=error.value,
            )
            return ReturnResult(
                rental_id=rental_id,
                rental=rental,
                error=error,
                message=f"Cannot assess late fee for {rental_id}: {error.value}",
            )

        completed = self.ledger.complete_rental(rental_id)
        if not completed.ok:
            return ReturnResult(
                rental_id=rental_id,
                rental=rental,
                error=completed.error,
                message=completed.message,
            )

        assessment = self.calculator.assess(rental, item, member, rental.end_date)

        return ReturnResult(rental_id=rental_id, rental=rental, assessment=assessment)
