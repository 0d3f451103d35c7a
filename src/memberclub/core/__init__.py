"""
Member Club Rental - Core Module

Rental lifecycle and pricing engine: items, members, tier pricing and the
rental ledger.
"""

from .models import (
    Item,
    ItemCategory,
    ItemKind,
    ItemStatus,
    Member,
    MembershipTier,
    Rental,
    RentalStatus,
    RentalUnit,
)
from .pricing import PricingPolicy, get_policy, tier_discount, base_price, price
from .registry import IdSequence, Inventory, MemberDirectory
from .ledger import RentalLedger, LedgerResult, RentalError, expected_return_date

__all__ = [
    "Item",
    "ItemCategory",
    "ItemKind",
    "ItemStatus",
    "Member",
    "MembershipTier",
    "Rental",
    "RentalStatus",
    "RentalUnit",
    "PricingPolicy",
    "get_policy",
    "tier_discount",
    "base_price",
    "price",
    "IdSequence",
    "Inventory",
    "MemberDirectory",
    "RentalLedger",
    "LedgerResult",
    "RentalError",
    "expected_return_date",
]
