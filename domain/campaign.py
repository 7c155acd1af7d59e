"""
Domain: Campaign.

A campaign is a public redirect link owned by a team. Its slug is the routing
key carried by inbound clicks; its greeting message prefills the outbound
WhatsApp conversation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Campaign:
    """
    Read-only snapshot of a campaign as seen by the redirect path.

    A redirect is only ever served while `is_active` is True.
    """

    campaign_id: UUID
    team_id: UUID
    slug: str
    name: str
    is_active: bool
    greeting_message: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    @property
    def greeting(self) -> str:
        """Greeting text exactly as stored ('' when unset or blank)."""
        if not self.greeting_message or not self.greeting_message.strip():
            return ""
        return self.greeting_message
