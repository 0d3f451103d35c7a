"""
Tier Pricing

Price = rate(unit) x duration x tier multiplier.

Exactly one policy exists per membership tier and it is chosen by a table
lookup keyed on the tier.
"""

from dataclasses import dataclass
from typing import Dict

from .models import Item, Member, MembershipTier, RentalUnit


@dataclass(frozen=True)
class PricingPolicy:
    """Discount policy for a single membership tier."""
    tier: MembershipTier
    discount: float

    @property
    def multiplier(self) -> float:
        return 1.0 - self.discount

    def price(self, item: Item, duration: int, unit: RentalUnit) -> float:
        """Discounted price of renting `item` for `duration` units."""
        return base_price(item, duration, unit) * self.multiplier


TIER_POLICIES: Dict[MembershipTier, PricingPolicy] = {
    MembershipTier.STANDARD: PricingPolicy(MembershipTier.STANDARD, 0.0),
    MembershipTier.STUDENT: PricingPolicy(MembershipTier.STUDENT, 0.20),  # 20% discount
    MembershipTier.PREMIUM: PricingPolicy(MembershipTier.PREMIUM, 0.30),  # 30% discount
}


def get_policy(tier: MembershipTier) -> PricingPolicy:
    """Look up the pricing policy for a tier."""
    return TIER_POLICIES[tier]


def tier_discount(tier: MembershipTier) -> float:
    """Discount fraction for a tier (0.0, 0.2 or 0.3)."""
    return TIER_POLICIES[tier].discount


def base_price(item: Item, duration: int, unit: RentalUnit) -> float:
    """Undiscounted price. Duration must be a positive whole number of units."""
    if duration < 1:
        raise ValueError(f"Rental duration must be at least 1, got {duration}")
    return item.rate_for(unit) * duration


def price(item: Item, member: Member, duration: int, unit: RentalUnit) -> float:
    """Price for `member` using the policy of their current tier."""
    return get_policy(member.tier).price(item, duration, unit)
