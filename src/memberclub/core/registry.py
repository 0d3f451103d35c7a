"""
In-memory Registries

Keyed stores for items and members plus the monotonic ID sequences used to
name new records. Records are handed out by reference; callers mutate them
in place.
"""

from threading import Lock
from typing import Any, Dict, List, Optional
import structlog

from .models import (
    Item,
    ItemCategory,
    ItemKind,
    Member,
    MembershipTier,
)

logger = structlog.get_logger()


class IdSequence:
    """
    Strictly increasing identifiers of the form PREFIX-NNN.

    Values are never reused for the lifetime of the sequence.
    """

    def __init__(self, prefix: str, width: int = 3, start: int = 1):
        self.prefix = prefix
        self.width = width
        self._counter = start
        self._lock = Lock()

    def next(self) -> str:
        with self._lock:
            value = self._counter
            self._counter += 1
        return f"{self.prefix}-{value:0{self.width}d}"

    def peek(self) -> str:
        """The identifier the next call to `next()` will return."""
        return f"{self.prefix}-{self._counter:0{self.width}d}"


class Inventory:
    """Items keyed by ID, with per-kind ID sequences."""

    def __init__(self):
        self._items: Dict[str, Item] = {}
        self._sequences: Dict[ItemKind, IdSequence] = {}

    def new_item(
        self,
        kind: ItemKind,
        name: str,
        price_per_day: float,
        price_per_hour: float,
        **attributes: Any,
    ) -> Item:
        """Create an item with the next ID for its kind and store it."""
        if kind not in self._sequences:
            self._sequences[kind] = IdSequence(kind.id_prefix)

        item = Item(
            item_id=self._sequences[kind].next(),
            name=name,
            kind=kind,
            price_per_hour=price_per_hour,
            price_per_day=price_per_day,
            attributes=attributes,
        )
        self.add(item)
        return item

    def add(self, item: Item) -> None:
        """Store a new item. IDs are unique; an existing item is never replaced."""
        if item.item_id in self._items:
            logger.warning("item_add_refused", item_id=item.item_id, reason="DUPLICATE_ID")
            raise ValueError(f"Item {item.item_id} already exists")
        self._items[item.item_id] = item
        logger.debug("item_added", item_id=item.item_id, kind=item.kind.value)

    def get(self, item_id: str) -> Optional[Item]:
        return self._items.get(item_id)

    def remove(self, item_id: str) -> bool:
        """Remove an item. Rented items stay in the inventory."""
        item = self._items.get(item_id)
        if item is None:
            return False
        if item.is_rented:
            logger.warning("item_remove_refused", item_id=item_id, reason="RENTED")
            return False
        del self._items[item_id]
        logger.info("item_removed", item_id=item_id)
        return True

    def all(self) -> List[Item]:
        return list(self._items.values())

    def count(self) -> int:
        return len(self._items)

    def by_category(self, category: ItemCategory) -> List[Item]:
        return [i for i in self._items.values() if i.category == category]

    def by_kind(self, kind: ItemKind) -> List[Item]:
        return [i for i in self._items.values() if i.kind == kind]

    def available(self) -> List[Item]:
        return [i for i in self._items.values() if i.is_available]

    def search(self, term: str) -> List[Item]:
        """Case-insensitive substring match on item name."""
        needle = term.lower()
        return [i for i in self._items.values() if needle in i.name.lower()]


class MemberDirectory:
    """Members keyed by integer ID."""

    def __init__(self, start_id: int = 1):
        self._members: Dict[int, Member] = {}
        self._next_id = start_id
        self._lock = Lock()

    def register(
        self,
        name: str,
        tier: MembershipTier = MembershipTier.STANDARD,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Member:
        """Create a member with the next sequential ID."""
        with self._lock:
            member_id = self._next_id
            self._next_id += 1

        member = Member(
            member_id=member_id,
            name=name,
            tier=tier,
            email=email,
            phone=phone,
        )
        self.add(member)
        return member

    def add(self, member: Member) -> None:
        if member.member_id in self._members:
            raise ValueError(f"Member {member.member_id} already exists")
        self._members[member.member_id] = member
        with self._lock:
            if member.member_id >= self._next_id:
                self._next_id = member.member_id + 1
        logger.info("member_added", member_id=member.member_id, tier=member.tier.value)

    def get(self, member_id: int) -> Optional[Member]:
        return self._members.get(member_id)

    def remove(self, member_id: int) -> bool:
        """
        Drop a member from the directory.

        Rentals are not consulted here; use RentalLedger.remove_member to
        keep members with active rentals.
        """
        if member_id not in self._members:
            return False
        del self._members[member_id]
        logger.info("member_removed", member_id=member_id)
        return True

    def update_tier(self, member_id: int, tier: MembershipTier) -> bool:
        """
        Change a member's tier.

        Existing rentals keep the cost they were created with.
        """
        member = self._members.get(member_id)
        if member is None:
            return False

        old_tier = member.tier
        member.tier = tier
        logger.info(
            "member_tier_updated",
            member_id=member_id,
            old_tier=old_tier.value,
            new_tier=tier.value,
        )
        return True

    def all(self) -> List[Member]:
        return list(self._members.values())

    def count(self) -> int:
        return len(self._members)

    def search_by_name(self, term: str) -> List[Member]:
        needle = term.lower()
        return [m for m in self._members.values() if needle in m.name.lower()]
