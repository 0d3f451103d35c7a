"""
Checkout

Turns a confirmed cart into ledger rentals.

Flow:
1. Quote the cart (lines, totals, discount)
2. Ask the operator to confirm the quote
3. Create one rental per line; each creation stands on its own
4. Credit the cart's discounted total to revenue once, if anything was rented
5. Clear the cart

The cart is all-or-nothing, the ledger is not: a line whose item was rented
by someone else in the meantime fails alone while the rest go through, and
revenue is still credited for the full quoted total.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import structlog

from ..billing.revenue import RevenueLedger, RevenueSource
from ..core.ledger import RentalError, RentalLedger
from ..core.models import Rental
from .cart import CartLine, ShoppingCart

logger = structlog.get_logger()


class CheckoutStatus(Enum):
    """Checkout outcomes."""
    COMPLETED = "COMPLETED"  # Every line became a rental
    PARTIAL = "PARTIAL"  # Some lines failed
    FAILED = "FAILED"  # No line became a rental
    DECLINED = "DECLINED"  # Operator did not confirm
    EMPTY_CART = "EMPTY_CART"


@dataclass
class CheckoutQuote:
    """What the operator is asked to confirm."""
    member_id: int
    member_name: str
    tier: str
    lines: List[CartLine]
    total_before_discount: float
    discount_rate: float
    discount_amount: float
    total_after_discount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member_id": self.member_id,
            "member_name": self.member_name,
            "tier": self.tier,
            "lines": [line.to_dict() for line in self.lines],
            "total_before_discount": self.total_before_discount,
            "discount_rate": self.discount_rate,
            "discount_amount": self.discount_amount,
            "total_after_discount": self.total_after_discount,
        }


@dataclass
class LineFailure:
    """A cart line that could not be turned into a rental."""
    index: int
    item_id: str
    error: RentalError
    message: Optional[str] = None


@dataclass
class CheckoutResult:
    """Outcome of a checkout attempt."""
    status: CheckoutStatus
    quote: Optional[CheckoutQuote] = None
    rentals: List[Rental] = field(default_factory=list)
    failures: List[LineFailure] = field(default_factory=list)
    committed_total: float = 0.0
    revenue_credited: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status in (CheckoutStatus.COMPLETED, CheckoutStatus.PARTIAL)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "quote": self.quote.to_dict() if self.quote else None,
            "rentals": [r.to_dict() for r in self.rentals],
            "failures": [
                {
                    "index": f.index,
                    "item_id": f.item_id,
                    "error": f.error.value,
                    "message": f.message,
                }
                for f in self.failures
            ],
            "committed_total": self.committed_total,
            "revenue_credited": self.revenue_credited,
        }


ConfirmCallback = Callable[[CheckoutQuote], bool]


class CheckoutService:
    """Commits carts to the rental ledger and the revenue ledger."""

    def __init__(self, ledger: RentalLedger, revenue: RevenueLedger):
        self.ledger = ledger
        self.revenue = revenue

    def new_cart(self, member_id: int) -> Optional[ShoppingCart]:
        """Open a cart for a known member, None if the member is unknown."""
        member = self.ledger.members.get(member_id)
        if member is None:
            return None
        return ShoppingCart(member)

    def quote(self, cart: ShoppingCart) -> CheckoutQuote:
        return CheckoutQuote(
            member_id=cart.member.member_id,
            member_name=cart.member.name,
            tier=cart.member.tier.value,
            lines=cart.lines,
            total_before_discount=cart.total_before_discount(),
            discount_rate=cart.discount_rate(),
            discount_amount=cart.discount_amount(),
            total_after_discount=cart.total_after_discount(),
        )

    def checkout(
        self,
        cart: ShoppingCart,
        confirm: Optional[ConfirmCallback] = None,
    ) -> CheckoutResult:
        """
        Confirm and commit a cart.

        Args:
            cart: Cart to commit
            confirm: Called with the quote; returning False aborts and
                leaves the cart untouched. No callback means confirmed.

        Returns:
            CheckoutResult with created rentals and per-line failures
        """
        if cart.is_empty:
            return CheckoutResult(status=CheckoutStatus.EMPTY_CART)

        quote = self.quote(cart)

        if confirm is not None and not confirm(quote):
            logger.info("checkout_declined", member_id=quote.member_id, lines=len(quote.lines))
            return CheckoutResult(status=CheckoutStatus.DECLINED, quote=quote)

        result = CheckoutResult(status=CheckoutStatus.FAILED, quote=quote)

        for index, line in enumerate(quote.lines):
            created = self.ledger.create(
                quote.member_id,
                line.item.item_id,
                line.duration,
                line.unit,
            )
            if created.ok:
                result.rentals.append(created.rental)
                result.committed_total += line.price
            else:
                result.failures.append(LineFailure(
                    index=index,
                    item_id=line.item.item_id,
                    error=created.error,
                    message=created.message,
                ))

        if result.rentals:
            # One credit for the whole batch, at the quoted total
            self.revenue.add(quote.total_after_discount, RevenueSource.CHECKOUT)
            result.revenue_credited = quote.total_after_discount
            result.status = (
                CheckoutStatus.PARTIAL if result.failures else CheckoutStatus.COMPLETED
            )

        cart.clear()

        log = logger.warning if result.failures else logger.info
        log(
            "checkout_processed",
            status=result.status.value,
            member_id=quote.member_id,
            rentals=len(result.rentals),
            failures=len(result.failures),
            total_after_discount=quote.total_after_discount,
            revenue_credited=result.revenue_credited,
        )

        return result
