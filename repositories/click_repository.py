"""
Click repository (persistence).

The `clicks` table is an append-only ledger. This module only counts rows and
inserts new ones; it never updates or deletes.

Counts use PostgREST's exact row count, so no rows are transferred.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from domain.click import ClickRecord
from domain.time import parse_utc_timestamp, require_utc_timestamp, utc_now
from repositories.client import get_supabase

_CLICKS_TABLE: str = "clicks"


def _exact_count(response: Any, what: str) -> int:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to count {what}: {error}")

    count: Optional[int] = getattr(response, "count", None)
    if count is None:
        raise RuntimeError(f"Failed to count {what}: no count in response")
    return int(count)


def count_campaign_clicks(campaign_id: UUID) -> int:
    """Number of ledger rows recorded for a campaign."""

    response = (
        get_supabase()
        .table(_CLICKS_TABLE)
        .select("id", count="exact")
        .eq("campaign_id", str(campaign_id))
        .limit(1)
        .execute()
    )
    return _exact_count(response, "campaign clicks")


def count_seller_clicks(campaign_id: UUID, seller_id: UUID) -> int:
    """Number of ledger rows recorded for one seller within a campaign."""

    response = (
        get_supabase()
        .table(_CLICKS_TABLE)
        .select("id", count="exact")
        .eq("campaign_id", str(campaign_id))
        .eq("seller_id", str(seller_id))
        .limit(1)
        .execute()
    )
    return _exact_count(response, "seller clicks")


def _row_to_click(row: Mapping[str, Any]) -> ClickRecord:
    return ClickRecord(
        click_id=int(row["id"]) if row.get("id") is not None else None,
        campaign_id=UUID(str(row["campaign_id"])),
        seller_id=UUID(str(row["seller_id"])),
        created_at=parse_utc_timestamp(row["created_at"]),
    )


def record_click(campaign_id: UUID, seller_id: UUID, clicked_at: Optional[datetime] = None) -> ClickRecord:
    """
    Append one row to the click ledger.

    Args:
        campaign_id: Campaign the click was served for
        seller_id: Seller the click was routed to
        clicked_at: UTC timestamp of the click (default: now)

    Returns:
        ClickRecord as stored (with the database-assigned id when returned)
    """

    clicked_at = clicked_at or utc_now()
    require_utc_timestamp("clicked_at", clicked_at)

    payload: dict[str, Any] = {
        "campaign_id": str(campaign_id),
        "seller_id": str(seller_id),
        "created_at": clicked_at.isoformat(),
    }

    response = get_supabase().table(_CLICKS_TABLE).insert(payload).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to record click: {error}")

    rows = getattr(response, "data", None) or []
    if rows:
        return _row_to_click(rows[0])
    return ClickRecord(campaign_id=campaign_id, seller_id=seller_id, created_at=clicked_at)


__all__ = [
    "count_campaign_clicks",
    "count_seller_clicks",
    "record_click",
]
