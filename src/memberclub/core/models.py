"""
Domain Models for the Rental Club

Items are a single flat record tagged with an ItemKind. The kind decides the
category, the ID prefix and which entries of the attribute payload are
meaningful; nothing inspects Python types to find out what an item is.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class ItemCategory(Enum):
    """Top-level equipment categories."""
    CAMPING = "CAMPING"
    FISHING = "FISHING"
    WATERCRAFT = "WATERCRAFT"


class ItemKind(Enum):
    """Concrete equipment kinds stocked by the club."""
    BACKPACK = "BACKPACK"
    LANTERN = "LANTERN"
    SLEEPING_BAG = "SLEEPING_BAG"
    TENT = "TENT"
    TRANGIA_KITCHEN = "TRANGIA_KITCHEN"
    FISHING_ROD = "FISHING_ROD"
    FISHING_NET = "FISHING_NET"
    FISHING_BAIT = "FISHING_BAIT"
    KAYAK = "KAYAK"
    ELECTRIC_BOAT = "ELECTRIC_BOAT"
    MOTOR_BOAT = "MOTOR_BOAT"
    ROW_BOAT = "ROW_BOAT"

    @property
    def category(self) -> ItemCategory:
        return KIND_CATEGORIES[self]

    @property
    def id_prefix(self) -> str:
        return KIND_ID_PREFIXES[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


KIND_CATEGORIES: Dict[ItemKind, ItemCategory] = {
    ItemKind.BACKPACK: ItemCategory.CAMPING,
    ItemKind.LANTERN: ItemCategory.CAMPING,
    ItemKind.SLEEPING_BAG: ItemCategory.CAMPING,
    ItemKind.TENT: ItemCategory.CAMPING,
    ItemKind.TRANGIA_KITCHEN: ItemCategory.CAMPING,
    ItemKind.FISHING_ROD: ItemCategory.FISHING,
    ItemKind.FISHING_NET: ItemCategory.FISHING,
    ItemKind.FISHING_BAIT: ItemCategory.FISHING,
    ItemKind.KAYAK: ItemCategory.WATERCRAFT,
    ItemKind.ELECTRIC_BOAT: ItemCategory.WATERCRAFT,
    ItemKind.MOTOR_BOAT: ItemCategory.WATERCRAFT,
    ItemKind.ROW_BOAT: ItemCategory.WATERCRAFT,
}

KIND_ID_PREFIXES: Dict[ItemKind, str] = {
    ItemKind.BACKPACK: "BACK",
    ItemKind.LANTERN: "LANT",
    ItemKind.SLEEPING_BAG: "SLEEP",
    ItemKind.TENT: "TENT",
    ItemKind.TRANGIA_KITCHEN: "TRANG",
    ItemKind.FISHING_ROD: "ROD",
    ItemKind.FISHING_NET: "NET",
    ItemKind.FISHING_BAIT: "BAIT",
    ItemKind.KAYAK: "KAY",
    ItemKind.ELECTRIC_BOAT: "EBOAT",
    ItemKind.MOTOR_BOAT: "MBOAT",
    ItemKind.ROW_BOAT: "RBOAT",
}

# Attribute keys shown in the one-line description of each kind
KIND_HEADLINE_ATTRIBUTES: Dict[ItemKind, List[str]] = {
    ItemKind.BACKPACK: ["volume_liters", "backpack_type"],
    ItemKind.LANTERN: ["lumens", "power_source"],
    ItemKind.SLEEPING_BAG: ["comfort_temp_c", "season_rating"],
    ItemKind.TENT: ["capacity", "season_rating"],
    ItemKind.TRANGIA_KITCHEN: ["burners", "fuel_type"],
    ItemKind.FISHING_ROD: ["rod_length_m", "rod_type"],
    ItemKind.FISHING_NET: ["net_size"],
    ItemKind.FISHING_BAIT: ["bait_type", "pack_size"],
    ItemKind.KAYAK: ["seats", "length_m"],
    ItemKind.ELECTRIC_BOAT: ["capacity", "battery_kwh"],
    ItemKind.MOTOR_BOAT: ["capacity", "horsepower"],
    ItemKind.ROW_BOAT: ["capacity", "oars"],
}


class ItemStatus(Enum):
    """Availability of a physical item."""
    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    BROKEN = "BROKEN"


class MembershipTier(Enum):
    """Member discount classes."""
    STANDARD = "STANDARD"
    STUDENT = "STUDENT"
    PREMIUM = "PREMIUM"


class RentalUnit(Enum):
    """Billing granularity of a rental."""
    HOURLY = "HOURLY"
    DAILY = "DAILY"


class RentalStatus(Enum):
    """Rental lifecycle states. COMPLETED and CANCELLED are terminal."""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass
class Item:
    """
    A rentable piece of equipment.

    The item is shared by reference between the inventory and the ledger;
    the ledger flips `status` in place.
    """
    item_id: str
    name: str
    kind: ItemKind
    price_per_hour: float
    price_per_day: float
    status: ItemStatus = ItemStatus.AVAILABLE
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def category(self) -> ItemCategory:
        return self.kind.category

    @property
    def is_available(self) -> bool:
        return self.status == ItemStatus.AVAILABLE

    @property
    def is_rented(self) -> bool:
        return self.status == ItemStatus.RENTED

    @property
    def is_broken(self) -> bool:
        return self.status == ItemStatus.BROKEN

    def rate_for(self, unit: RentalUnit) -> float:
        """Undiscounted price for one unit of time."""
        if unit == RentalUnit.HOURLY:
            return self.price_per_hour
        return self.price_per_day

    def describe(self) -> str:
        """Short human readable description driven by the kind tag."""
        details = []
        for key in KIND_HEADLINE_ATTRIBUTES[self.kind]:
            if key in self.attributes:
                value = self.attributes[key]
                if isinstance(value, Enum):
                    value = value.value
                details.append(f"{key}={value}")
        suffix = f" ({', '.join(details)})" if details else ""
        return f"{self.kind.label}: {self.name}{suffix}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "kind": self.kind.value,
            "category": self.category.value,
            "price_per_hour": self.price_per_hour,
            "price_per_day": self.price_per_day,
            "status": self.status.value,
            "attributes": {
                k: (v.value if isinstance(v, Enum) else v)
                for k, v in self.attributes.items()
            },
            "description": self.describe(),
        }


@dataclass
class Member:
    """A club member. `rental_history` is append-only."""
    member_id: int
    name: str
    tier: MembershipTier = MembershipTier.STANDARD
    email: Optional[str] = None
    phone: Optional[str] = None
    rental_history: List[str] = field(default_factory=list)

    def add_rental(self, rental_id: str) -> None:
        self.rental_history.append(rental_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member_id": self.member_id,
            "name": self.name,
            "tier": self.tier.value,
            "email": self.email,
            "phone": self.phone,
            "rental_history": list(self.rental_history),
        }


@dataclass
class Rental:
    """
    One rental transaction.

    `total_cost` is fixed at creation and never recomputed. `end_date` stays
    None until the rental is completed; cancellation leaves it untouched.
    """
    rental_id: str
    member_id: int
    item_id: str
    start_date: date
    expected_return_date: date
    total_cost: float
    duration: int
    unit: RentalUnit
    end_date: Optional[date] = None
    status: RentalStatus = RentalStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == RentalStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status == RentalStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status == RentalStatus.CANCELLED

    def duration_in_days(self) -> Optional[int]:
        """Days between start and end, None while the rental is open."""
        if self.end_date is None:
            return None
        return (self.end_date - self.start_date).days

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rental_id": self.rental_id,
            "member_id": self.member_id,
            "item_id": self.item_id,
            "start_date": self.start_date.isoformat(),
            "expected_return_date": self.expected_return_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "total_cost": self.total_cost,
            "duration": self.duration,
            "unit": self.unit.value,
            "status": self.status.value,
        }
