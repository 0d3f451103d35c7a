"""
Revenue Ledger

Running revenue total for one club session. Checkout payments and late fees
feed it; nothing is ever subtracted. The instance is owned by the session
container and passed to the services that credit it.
"""

from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Dict
import structlog

logger = structlog.get_logger()


class RevenueSource(Enum):
    """Where a revenue amount came from."""
    CHECKOUT = "CHECKOUT"
    LATE_FEE = "LATE_FEE"


@dataclass
class RevenueSnapshot:
    """Point-in-time view of the ledger."""
    total: float
    by_source: Dict[str, float]
    credits: int


class RevenueLedger:
    """
    Non-negative, monotonically increasing revenue accumulator.

    Amounts <= 0 are ignored rather than rejected.
    """

    def __init__(self):
        self._total = 0.0
        self._by_source: Dict[RevenueSource, float] = {s: 0.0 for s in RevenueSource}
        self._credits = 0
        self._lock = Lock()

    def add(self, amount: float, source: RevenueSource = RevenueSource.CHECKOUT) -> float:
        """
        Credit an amount and return the new total.

        Negative and zero amounts leave the ledger unchanged.
        """
        if amount <= 0:
            logger.debug("revenue_ignored", amount=amount, source=source.value)
            return self._total

        with self._lock:
            self._total += amount
            self._by_source[source] += amount
            self._credits += 1
            total = self._total

        logger.info(
            "revenue_added",
            amount=amount,
            source=source.value,
            total=total,
        )

        return total

    def total(self) -> float:
        return self._total

    def breakdown(self) -> Dict[str, float]:
        """Totals per revenue source."""
        return {source.value: amount for source, amount in self._by_source.items()}

    def snapshot(self) -> RevenueSnapshot:
        with self._lock:
            return RevenueSnapshot(
                total=self._total,
                by_source=self.breakdown(),
                credits=self._credits,
            )

    def reset(self) -> None:
        """Zero the ledger (start of a new accounting session)."""
        with self._lock:
            previous = self._total
            self._total = 0.0
            self._by_source = {s: 0.0 for s in RevenueSource}
            self._credits = 0

        logger.warning("revenue_reset", previous_total=previous)
