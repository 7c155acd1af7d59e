"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================================
# Redirect Models
# ============================================================================

class RedirectRequest(BaseModel):
    """Request to resolve a campaign slug (browser redirect page contract)."""
    slug: Any = Field(
        None,
        description="Public campaign slug"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "slug": "acme-black-friday"
            }
        }


class RedirectUrlResponse(BaseModel):
    """Resolved WhatsApp destination."""
    redirect_url: str

    class Config:
        json_schema_extra = {
            "example": {
                "redirect_url": "https://wa.me/5511987654321?text=Ol%C3%A1%21"
            }
        }


# ============================================================================
# Rotation Models
# ============================================================================

class RotationShareResponse(BaseModel):
    """One seller's share of the rotation wheel."""
    seller_id: UUID
    name: str
    weight: int
    slots: int
    percentage: float
    contact_count: int


class RotationPreviewResponse(BaseModel):
    """Current rotation layout for a campaign."""
    campaign_id: UUID
    slug: str
    is_active: bool
    wheel_length: int
    campaign_clicks: int
    next_seller_id: Optional[UUID] = None
    shares: List[RotationShareResponse]

    class Config:
        json_schema_extra = {
            "example": {
                "campaign_id": "123e4567-e89b-12d3-a456-426614174000",
                "slug": "acme-black-friday",
                "is_active": True,
                "wheel_length": 3,
                "campaign_clicks": 41,
                "next_seller_id": "123e4567-e89b-12d3-a456-426614174002",
                "shares": [
                    {
                        "seller_id": "123e4567-e89b-12d3-a456-426614174001",
                        "name": "Ana",
                        "weight": 2,
                        "slots": 2,
                        "percentage": 66.67,
                        "contact_count": 1
                    },
                    {
                        "seller_id": "123e4567-e89b-12d3-a456-426614174002",
                        "name": "Bruno",
                        "weight": 1,
                        "slots": 1,
                        "percentage": 33.33,
                        "contact_count": 2
                    }
                ]
            }
        }


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    reason: str
    status_code: int
    fallback_url: str

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Campaign is inactive",
                "reason": "campaign_inactive",
                "status_code": 403,
                "fallback_url": "/"
            }
        }
