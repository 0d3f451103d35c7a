"""
Member Club Rental - Checkout Module

Shopping cart staging and batch checkout into the rental ledger.
"""

from .cart import CartLine, ShoppingCart
from .service import (
    CheckoutService,
    CheckoutQuote,
    CheckoutResult,
    CheckoutStatus,
    LineFailure,
)

__all__ = [
    "CartLine",
    "ShoppingCart",
    "CheckoutService",
    "CheckoutQuote",
    "CheckoutResult",
    "CheckoutStatus",
    "LineFailure",
]
