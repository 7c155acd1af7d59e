"""
Domain: Click ledger entries.

The click ledger is append-only. Its row counts are the only state that
advances a campaign's rotation; there is no stored cursor.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class ClickRecord:
    """
    Immutable record of one served redirect.

    click_id is assigned by the database and is None until the row is stored.
    """

    campaign_id: UUID
    seller_id: UUID
    created_at: datetime
    click_id: Optional[int] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
