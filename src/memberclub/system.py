"""
Club Session

Wires the registries, ledgers and services for one process. Everything the
session owns lives and dies with the ClubSystem instance; there is no
module-level state.
"""

from datetime import date, datetime, timezone
from typing import Callable, Optional
import structlog

from .auth import OperatorAccount
from .billing.returns import ReturnDesk
from .billing.revenue import RevenueLedger
from .checkout.service import CheckoutService
from .config import ClubConfig
from .core.ledger import RentalLedger
from .core.registry import Inventory, MemberDirectory
from .core.sample_data import load_sample_items, load_sample_members

logger = structlog.get_logger()


class ClubSystem:
    """Session container for the rental club."""

    def __init__(
        self,
        config: Optional[ClubConfig] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.config = config or ClubConfig()
        self.operator = OperatorAccount.from_config(self.config)

        self.inventory = Inventory()
        self.members = MemberDirectory()
        self.revenue = RevenueLedger()
        self.ledger = RentalLedger(self.inventory, self.members, clock=clock)
        self.checkout = CheckoutService(self.ledger, self.revenue)
        self.returns = ReturnDesk(self.ledger, self.revenue)

        if self.config.load_sample_data:
            load_sample_items(self.inventory)
            load_sample_members(self.members)

        self.start_time = datetime.now(timezone.utc)

        logger.info(
            "club_session_started",
            items=self.inventory.count(),
            members=self.members.count(),
        )
