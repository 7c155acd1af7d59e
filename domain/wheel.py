"""
Domain: Weighted rotation wheel and deterministic selection (pure).

Contract:
- The wheel lists every eligible seller `weight` times, contiguously, in the
  order the sellers are given. Sellers are ordered by creation time (seller id
  breaks ties) so the same configuration always yields the same wheel.
- A seller is eligible iff weight >= 1 and it has at least one usable contact.
- The campaign's click count is the cursor: slot = clicks mod len(wheel).
- Within the chosen seller, contact = seller_clicks mod len(contacts).

Nothing here touches storage; every function is a pure function of its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple
from uuid import UUID

from .seller import Contact, Seller


class NoEligibleSellers(Exception):
    """Raised when no seller survives eligibility filtering."""

    def __init__(self, considered: int):
        self.considered = considered
        super().__init__(
            f"No eligible sellers: {considered} considered, none with weight >= 1 "
            f"and at least one usable contact"
        )


@dataclass(frozen=True, slots=True)
class WheelShare:
    """One seller's portion of the wheel (used for previews)."""

    seller_id: UUID
    name: str
    weight: int
    slots: int
    percentage: float
    contact_count: int


def order_sellers(sellers: Iterable[Seller]) -> List[Seller]:
    """Stable rotation order: creation time ascending, then seller id."""
    return sorted(sellers, key=lambda s: (s.created_at, str(s.seller_id)))


def order_contacts(contacts: Iterable[Contact]) -> Tuple[Contact, ...]:
    """Stable contact order: creation time ascending, then contact id."""
    return tuple(sorted(contacts, key=lambda c: (c.created_at, str(c.contact_id))))


def is_eligible(seller: Seller) -> bool:
    return seller.weight >= 1 and len(seller.usable_contacts) > 0


def build_wheel(sellers: Sequence[Seller]) -> Tuple[Seller, ...]:
    """
    Expand sellers into the virtual wheel.

    Input order is preserved as grouping order; all repeats of one seller are
    contiguous.

    Raises:
        NoEligibleSellers: if filtering leaves nothing to rotate over.
    """
    slots: List[Seller] = []
    for seller in sellers:
        if is_eligible(seller):
            slots.extend([seller] * seller.weight)

    if not slots:
        raise NoEligibleSellers(considered=len(sellers))
    return tuple(slots)


def _index(count: int, length: int) -> int:
    if count < 0:
        raise ValueError(f"click count must be >= 0, got {count}")
    return count % length


def select_seller(wheel: Sequence[Seller], total_campaign_clicks: int) -> Seller:
    """Seller for the next click, given the campaign's recorded click count."""
    return wheel[_index(total_campaign_clicks, len(wheel))]


def select_contact(contacts: Sequence[Contact], total_seller_clicks: int) -> Contact:
    """Contact for the next click, given the seller's recorded click count."""
    return contacts[_index(total_seller_clicks, len(contacts))]


def wheel_distribution(sellers: Sequence[Seller]) -> List[WheelShare]:
    """
    Describe how the wheel is split between sellers.

    Every seller is listed in rotation order; ineligible ones get zero slots.
    """
    total = sum(s.weight for s in sellers if is_eligible(s))
    shares: List[WheelShare] = []
    for seller in sellers:
        slots = seller.weight if is_eligible(seller) else 0
        shares.append(
            WheelShare(
                seller_id=seller.seller_id,
                name=seller.name,
                weight=seller.weight,
                slots=slots,
                percentage=round(slots * 100.0 / total, 2) if total else 0.0,
                contact_count=len(seller.usable_contacts),
            )
        )
    return shares


__all__ = [
    "NoEligibleSellers",
    "WheelShare",
    "build_wheel",
    "is_eligible",
    "order_contacts",
    "order_sellers",
    "select_contact",
    "select_seller",
    "wheel_distribution",
]
