"""
MEMBER CLUB RENTAL

Rental lifecycle and pricing engine for an outdoor equipment club:
camping, fishing and watercraft gear rented by members on discount tiers.
"""

__version__ = "1.0.0"
