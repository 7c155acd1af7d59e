"""
In-memory stand-ins for the Supabase repositories, plus entity builders.

The fake ledger behaves like the real `clicks` table: append-only, counted by
campaign or by (campaign, seller).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Set
from uuid import NAMESPACE_URL, UUID, uuid5

from domain.campaign import Campaign
from domain.click import ClickRecord
from domain.seller import Contact, Seller

TEAM_ID = UUID("00000000-0000-0000-0000-0000000000aa")
BASE_TIME = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def seller_id_for(name: str) -> UUID:
    return uuid5(NAMESPACE_URL, f"seller:{name}")


def make_seller(
    name: str,
    weight: int = 1,
    phones: Iterable[str] = ("+55 11 90000-0000",),
    created_minutes: int = 0,
    team_id: UUID = TEAM_ID,
) -> Seller:
    """Seller created `created_minutes` after BASE_TIME; contacts one second apart."""
    seller_id = seller_id_for(name)
    created_at = BASE_TIME + timedelta(minutes=created_minutes)
    contacts = tuple(
        Contact(
            contact_id=uuid5(NAMESPACE_URL, f"contact:{name}:{i}"),
            seller_id=seller_id,
            phone_number=phone,
            created_at=created_at + timedelta(seconds=i),
        )
        for i, phone in enumerate(phones)
    )
    return Seller(
        seller_id=seller_id,
        team_id=team_id,
        name=name,
        weight=weight,
        created_at=created_at,
        contacts=contacts,
    )


def make_campaign(
    slug: str = "promo",
    is_active: bool = True,
    greeting_message: Optional[str] = "Olá! Quero saber mais",
    team_id: UUID = TEAM_ID,
) -> Campaign:
    return Campaign(
        campaign_id=uuid5(NAMESPACE_URL, f"campaign:{slug}"),
        team_id=team_id,
        slug=slug,
        name=slug.replace("-", " ").title(),
        is_active=is_active,
        greeting_message=greeting_message,
        created_at=BASE_TIME,
    )


class StoreDown(ConnectionError):
    """Simulated connectivity failure."""


class InMemoryStore:
    def __init__(self) -> None:
        self.campaigns: Dict[str, Campaign] = {}
        self.sellers: Dict[UUID, List[Seller]] = {}
        self.clicks: List[ClickRecord] = []
        self.failing: Set[str] = set()
        self.reads: List[str] = []
        self._next_click_id = 1

    # -- setup ---------------------------------------------------------------

    def add_campaign(self, campaign: Campaign) -> Campaign:
        self.campaigns[campaign.slug] = campaign
        return campaign

    def add_seller(self, seller: Seller) -> Seller:
        self.sellers.setdefault(seller.team_id, []).append(seller)
        return seller

    def fail(self, operation: str) -> None:
        self.failing.add(operation)

    def _check(self, operation: str) -> None:
        self.reads.append(operation)
        if operation in self.failing:
            raise StoreDown(f"{operation} unavailable")

    # -- repository surface --------------------------------------------------

    def get_campaign_by_slug(self, slug: str) -> Optional[Campaign]:
        self._check("get_campaign_by_slug")
        return self.campaigns.get(slug)

    def list_sellers_with_contacts(self, team_id: UUID) -> List[Seller]:
        self._check("list_sellers_with_contacts")
        return list(self.sellers.get(team_id, []))

    def count_campaign_clicks(self, campaign_id: UUID) -> int:
        self._check("count_campaign_clicks")
        return sum(1 for c in self.clicks if c.campaign_id == campaign_id)

    def count_seller_clicks(self, campaign_id: UUID, seller_id: UUID) -> int:
        self._check("count_seller_clicks")
        return sum(
            1 for c in self.clicks if c.campaign_id == campaign_id and c.seller_id == seller_id
        )

    def record_click(
        self, campaign_id: UUID, seller_id: UUID, clicked_at: Optional[datetime] = None
    ) -> ClickRecord:
        self._check("record_click")
        click = ClickRecord(
            click_id=self._next_click_id,
            campaign_id=campaign_id,
            seller_id=seller_id,
            created_at=clicked_at or BASE_TIME + timedelta(seconds=self._next_click_id),
        )
        self._next_click_id += 1
        self.clicks.append(click)
        return click
