"""
Domain: Sellers and their contact numbers.

A seller owns an ordered list of contacts. There are no back-references from
contact to seller object: the rotation wheel is rebuilt from a fresh snapshot
on every click, so a plain owned collection is all that is needed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from .time import require_utc_timestamp

DEFAULT_SELLER_WEIGHT: int = 1

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(phone_number: str | None) -> str:
    """
    Strip every non-digit character from a phone number.

    Example:
        normalize_phone("+55 (11) 98765-4321")  # "5511987654321"
    """
    return _NON_DIGITS.sub("", phone_number or "")


@dataclass(frozen=True, slots=True)
class Contact:
    """A WhatsApp-reachable number belonging to one seller."""

    contact_id: UUID
    seller_id: UUID
    phone_number: str
    created_at: datetime
    description: Optional[str] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)

    @property
    def whatsapp_number(self) -> str:
        return normalize_phone(self.phone_number)

    @property
    def is_dialable(self) -> bool:
        return bool(self.whatsapp_number)


@dataclass(frozen=True, slots=True)
class Seller:
    """
    Seller snapshot with its weight and contacts.

    Weight is the number of wheel slots the seller occupies. Stored data may
    carry a weight of 0 (seller paused); such sellers are kept in the snapshot
    but never enter the wheel.
    """

    seller_id: UUID
    team_id: UUID
    name: str
    created_at: datetime
    weight: int = DEFAULT_SELLER_WEIGHT
    contacts: Tuple[Contact, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise TypeError(f"weight must be an int, got {type(self.weight)!r}")
        for contact in self.contacts:
            if contact.seller_id != self.seller_id:
                raise ValueError(
                    f"Contact {contact.contact_id} belongs to seller {contact.seller_id}, "
                    f"not {self.seller_id}"
                )

    @property
    def usable_contacts(self) -> Tuple[Contact, ...]:
        """Contacts that can form a destination, in contact order."""
        return tuple(contact for contact in self.contacts if contact.is_dialable)
