"""
Campaign repository (persistence).

Read-only access to the `campaigns` table. Campaigns are created and edited by
the dashboard; the redirect path only ever looks them up by slug.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from domain.campaign import Campaign
from domain.time import parse_utc_timestamp
from repositories.client import get_supabase

_CAMPAIGNS_TABLE: str = "campaigns"

_CAMPAIGN_COLUMNS: str = "id, team_id, slug, name, is_active, greeting_message, created_at"


def _row_to_campaign(row: Mapping[str, Any]) -> Campaign:
    """Convert a Supabase row into a Campaign."""

    return Campaign(
        campaign_id=UUID(str(row["id"])),
        team_id=UUID(str(row["team_id"])),
        slug=str(row["slug"]),
        name=str(row.get("name") or ""),
        is_active=bool(row.get("is_active", False)),
        greeting_message=row.get("greeting_message"),
        created_at=parse_utc_timestamp(row["created_at"]) if row.get("created_at") else None,
    )


def get_campaign_by_slug(slug: str) -> Optional[Campaign]:
    """
    Fetch a campaign by its public slug.

    Returns:
        Campaign or None if no campaign uses this slug
    """

    response = (
        get_supabase()
        .table(_CAMPAIGNS_TABLE)
        .select(_CAMPAIGN_COLUMNS)
        .eq("slug", slug)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch campaign: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_campaign(rows[0])


__all__ = ["get_campaign_by_slug"]
