"""
Shopping Cart

Staged, not yet committed rentals for one member. Each line is priced with
the member's tier when it is added, and the cart total then gets the tier
discount applied again at checkout. That second pass is how the club's
register has always priced orders, so it is kept as-is.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..core.models import Item, Member, RentalUnit
from ..core.pricing import get_policy, tier_discount


@dataclass(frozen=True)
class CartLine:
    """One prospective rental with its tier-priced amount."""
    item: Item
    duration: int
    unit: RentalUnit
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item.item_id,
            "item_name": self.item.name,
            "duration": self.duration,
            "unit": self.unit.value,
            "price": self.price,
        }


class ShoppingCart:
    """Cart for a single member's checkout session."""

    def __init__(self, member: Member):
        self.member = member
        self._lines: List[CartLine] = []

    def add_line(self, item: Item, duration: int, unit: RentalUnit) -> CartLine:
        """Price and stage one item."""
        line = CartLine(
            item=item,
            duration=duration,
            unit=unit,
            price=get_policy(self.member.tier).price(item, duration, unit),
        )
        self._lines.append(line)
        return line

    def add_lines(self, items: Iterable[Item], duration: int, unit: RentalUnit) -> List[CartLine]:
        """Stage several items with the same duration and unit."""
        return [self.add_line(item, duration, unit) for item in items]

    def add_all(self, lines: Iterable[CartLine]) -> None:
        """Stage lines that were priced elsewhere."""
        self._lines.extend(lines)

    def remove_line(self, index: int) -> Optional[CartLine]:
        """Remove the line at a zero-based index. None for a bad index."""
        if 0 <= index < len(self._lines):
            return self._lines.pop(index)
        return None

    def clear(self) -> int:
        """Drop every line and return how many there were."""
        count = len(self._lines)
        self._lines.clear()
        return count

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    @property
    def size(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def total_before_discount(self) -> float:
        """Sum of the line prices (each already tier-adjusted)."""
        return sum(line.price for line in self._lines)

    def discount_rate(self) -> float:
        return tier_discount(self.member.tier)

    def discount_amount(self) -> float:
        return self.total_before_discount() * self.discount_rate()

    def total_after_discount(self) -> float:
        return self.total_before_discount() * (1 - self.discount_rate())
