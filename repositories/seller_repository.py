"""
Seller repository (persistence).

Loads a team's sellers together with their contacts in one PostgREST request
(`seller_contacts` is embedded through its foreign key). Rows are returned in
rotation order: sellers by creation time then id, contacts likewise.
"""

from __future__ import annotations

from typing import Any, List, Mapping
from uuid import UUID

from domain.seller import DEFAULT_SELLER_WEIGHT, Contact, Seller
from domain.time import parse_utc_timestamp
from domain.wheel import order_contacts, order_sellers
from repositories.client import get_supabase

_SELLERS_TABLE: str = "sellers"

_SELLER_COLUMNS: str = (
    "id, team_id, name, weight, created_at, "
    "seller_contacts(id, seller_id, phone_number, description, created_at)"
)


def _row_to_contact(row: Mapping[str, Any]) -> Contact:
    return Contact(
        contact_id=UUID(str(row["id"])),
        seller_id=UUID(str(row["seller_id"])),
        phone_number=str(row.get("phone_number") or ""),
        description=row.get("description"),
        created_at=parse_utc_timestamp(row["created_at"]),
    )


def _row_to_seller(row: Mapping[str, Any]) -> Seller:
    """Convert a Supabase row (with embedded contacts) into a Seller."""

    weight = row.get("weight")
    contacts = [_row_to_contact(c) for c in (row.get("seller_contacts") or [])]

    return Seller(
        seller_id=UUID(str(row["id"])),
        team_id=UUID(str(row["team_id"])),
        name=str(row.get("name") or ""),
        weight=int(weight) if weight is not None else DEFAULT_SELLER_WEIGHT,
        created_at=parse_utc_timestamp(row["created_at"]),
        contacts=order_contacts(contacts),
    )


def list_sellers_with_contacts(team_id: UUID) -> List[Seller]:
    """
    Retrieve every seller of a team with its contacts.

    Returns:
        List[Seller] in rotation order (possibly empty)
    """

    response = (
        get_supabase()
        .table(_SELLERS_TABLE)
        .select(_SELLER_COLUMNS)
        .eq("team_id", str(team_id))
        .order("created_at")
        .order("id")
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list sellers: {error}")

    rows = getattr(response, "data", None) or []
    return order_sellers(_row_to_seller(row) for row in rows)


__all__ = ["list_sellers_with_contacts"]
