"""
Member Club Rental - Billing Module

Revenue accounting, late fees and returns.
- Revenue ledger fed by checkout payments and late fees
- Late fees reconstructed from the amount paid
- Single, bulk and per-member returns with isolated failures
"""

from .revenue import RevenueLedger, RevenueSource, RevenueSnapshot
from .late_fee import LateFeeCalculator, LateFeeAssessment, round_half_up
from .returns import ReturnDesk, ReturnResult, BulkReturnResult

__all__ = [
    "RevenueLedger",
    "RevenueSource",
    "RevenueSnapshot",
    "LateFeeCalculator",
    "LateFeeAssessment",
    "round_half_up",
    "ReturnDesk",
    "ReturnResult",
    "BulkReturnResult",
]
