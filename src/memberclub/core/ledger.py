"""
Rental Ledger

Single source of truth for rental records and the only component that flips
item availability.

Lifecycle:
    create()   -> ACTIVE   (item RENTED, rental ID appended to member history)
    complete() -> COMPLETED (end_date = today, item AVAILABLE)
    cancel()   -> CANCELLED (end_date untouched, item AVAILABLE)

Terminal rentals never transition again. Expected failures are returned to
the caller as a RentalError inside a LedgerResult, never raised.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from threading import Lock
from typing import Callable, Dict, List, Optional
import structlog

from .models import (
    Item,
    ItemStatus,
    Rental,
    RentalStatus,
    RentalUnit,
)
from .pricing import get_policy
from .registry import IdSequence, Inventory, MemberDirectory

logger = structlog.get_logger()


class RentalError(Enum):
    """Recoverable failure reasons reported by the rental core."""
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    ITEM_NOT_AVAILABLE = "ITEM_NOT_AVAILABLE"
    RENTAL_NOT_FOUND = "RENTAL_NOT_FOUND"
    RENTAL_NOT_ACTIVE = "RENTAL_NOT_ACTIVE"
    MEMBER_HAS_ACTIVE_RENTALS = "MEMBER_HAS_ACTIVE_RENTALS"


@dataclass
class LedgerResult:
    """Outcome of a ledger operation: a rental or the reason it failed."""
    rental: Optional[Rental] = None
    error: Optional[RentalError] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def expected_return_date(start: date, duration: int, unit: RentalUnit) -> date:
    """
    Day-granularity expected return.

    Hourly rentals are expected back the same day; the hours themselves are
    not tracked as a timestamp.
    """
    if unit == RentalUnit.HOURLY:
        return start
    return start + timedelta(days=duration)


class RentalLedger:
    """Creates, queries and transitions rental records."""

    def __init__(
        self,
        inventory: Inventory,
        members: MemberDirectory,
        id_sequence: Optional[IdSequence] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.inventory = inventory
        self.members = members
        self.id_sequence = id_sequence or IdSequence("RENT")
        self.clock = clock or date.today

        self._rentals: List[Rental] = []
        self._by_id: Dict[str, Rental] = {}
        self._lock = Lock()

    def create(
        self,
        member_id: int,
        item_id: str,
        duration: int,
        unit: RentalUnit,
    ) -> LedgerResult:
        """
        Create an ACTIVE rental.

        The cost is priced with the member's tier at this moment and stays
        fixed afterwards. A rejected request changes nothing and does not
        consume a rental ID.
        """
        with self._lock:
            member = self.members.get(member_id)
            if member is None:
                return self._reject(
                    RentalError.MEMBER_NOT_FOUND,
                    f"Member {member_id} not found",
                    member_id=member_id,
                    item_id=item_id,
                )

            item = self.inventory.get(item_id)
            if item is None:
                return self._reject(
                    RentalError.ITEM_NOT_FOUND,
                    f"Item {item_id} not found",
                    member_id=member_id,
                    item_id=item_id,
                )

            if not item.is_available:
                return self._reject(
                    RentalError.ITEM_NOT_AVAILABLE,
                    f"Item {item_id} is {item.status.value}",
                    member_id=member_id,
                    item_id=item_id,
                )

            # Pricing may raise on a bad duration; nothing is mutated yet
            total_cost = get_policy(member.tier).price(item, duration, unit)

            today = self.clock()
            rental = Rental(
                rental_id=self.id_sequence.next(),
                member_id=member.member_id,
                item_id=item.item_id,
                start_date=today,
                expected_return_date=expected_return_date(today, duration, unit),
                total_cost=total_cost,
                duration=duration,
                unit=unit,
            )

            item.status = ItemStatus.RENTED
            member.add_rental(rental.rental_id)
            self._rentals.append(rental)
            self._by_id[rental.rental_id] = rental

        logger.info(
            "rental_created",
            rental_id=rental.rental_id,
            member_id=member.member_id,
            item_id=item.item_id,
            tier=member.tier.value,
            duration=duration,
            unit=unit.value,
            total_cost=total_cost,
        )

        return LedgerResult(rental=rental)

    def complete(self, rental_id: str) -> bool:
        """
        Complete an active rental and release its item.

        Returns False for unknown rentals and for rentals that are already
        completed or cancelled; a second completion never flips the item.
        """
        result = self.complete_rental(rental_id)
        return result.ok

    def complete_rental(self, rental_id: str) -> LedgerResult:
        """Like `complete()` but reports why a completion was refused."""
        with self._lock:
            rental = self._by_id.get(rental_id)
            if rental is None:
                return self._reject(
                    RentalError.RENTAL_NOT_FOUND,
                    f"Rental {rental_id} not found",
                    rental_id=rental_id,
                )

            if rental.status != RentalStatus.ACTIVE:
                return self._reject(
                    RentalError.RENTAL_NOT_ACTIVE,
                    f"Rental {rental_id} is already {rental.status.value}",
                    rental_id=rental_id,
                )

            rental.end_date = self.clock()
            rental.status = RentalStatus.COMPLETED
            self._release_item(rental)

        logger.info(
            "rental_completed",
            rental_id=rental_id,
            item_id=rental.item_id,
            end_date=rental.end_date.isoformat(),
        )

        return LedgerResult(rental=rental)

    def cancel(self, rental_id: str) -> LedgerResult:
        """
        Cancel an active rental.

        The end date is left unset and the item goes back to AVAILABLE.
        """
        with self._lock:
            rental = self._by_id.get(rental_id)
            if rental is None:
                return self._reject(
                    RentalError.RENTAL_NOT_FOUND,
                    f"Rental {rental_id} not found",
                    rental_id=rental_id,
                )

            if rental.status != RentalStatus.ACTIVE:
                return self._reject(
                    RentalError.RENTAL_NOT_ACTIVE,
                    f"Rental {rental_id} is already {rental.status.value}",
                    rental_id=rental_id,
                )

            rental.status = RentalStatus.CANCELLED
            self._release_item(rental)

        logger.info("rental_cancelled", rental_id=rental_id, item_id=rental.item_id)

        return LedgerResult(rental=rental)

    def remove_member(self, member_id: int) -> LedgerResult:
        """
        Remove a member from the directory.

        Refused while the member still holds active rentals; their late
        fees are charged on return and need the member record.
        """
        with self._lock:
            if self.members.get(member_id) is None:
                return self._reject(
                    RentalError.MEMBER_NOT_FOUND,
                    f"Member {member_id} not found",
                    member_id=member_id,
                )

            active = self.rentals_for_member(member_id, active_only=True)
            if active:
                return self._reject(
                    RentalError.MEMBER_HAS_ACTIVE_RENTALS,
                    f"Member {member_id} has {len(active)} active rental(s)",
                    member_id=member_id,
                )

            self.members.remove(member_id)

        return LedgerResult()

    def active_rentals(self) -> List[Rental]:
        return [r for r in self._rentals if r.status == RentalStatus.ACTIVE]

    def all_rentals(self) -> List[Rental]:
        return list(self._rentals)

    def by_id(self, rental_id: str) -> Optional[Rental]:
        return self._by_id.get(rental_id)

    def rentals_for_member(self, member_id: int, active_only: bool = False) -> List[Rental]:
        return [
            r for r in self._rentals
            if r.member_id == member_id and (not active_only or r.is_active)
        ]

    def active_rental_for_item(self, item_id: str) -> Optional[Rental]:
        for rental in self._rentals:
            if rental.item_id == item_id and rental.is_active:
                return rental
        return None

    def _release_item(self, rental: Rental) -> None:
        item: Optional[Item] = self.inventory.get(rental.item_id)
        if item is None:
            # Item was removed from the inventory while rented
            logger.warning("rental_item_missing", rental_id=rental.rental_id, item_id=rental.item_id)
            return
        item.status = ItemStatus.AVAILABLE

    def _reject(self, error: RentalError, message: str, **context) -> LedgerResult:
        logger.warning("rental_rejected", error=error.value, **context)
        return LedgerResult(error=error, message=message)
