"""
Rotation API Endpoints.

Read-only view of how a campaign's clicks are split between sellers.
"""

import logging

from fastapi import APIRouter

from api.models import ErrorResponse, RotationPreviewResponse, RotationShareResponse
from services.redirect_service import InternalRedirectError, RedirectError, preview_rotation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/campaigns/{slug}/rotation",
    response_model=RotationPreviewResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Preview Campaign Rotation",
    description="Show the weighted wheel for a campaign and which seller the next click goes to."
)
def get_campaign_rotation(slug: str):
    """
    Preview the seller rotation of a campaign.

    Sellers with weight 0 or without a usable contact are listed with zero
    slots. No click is recorded.
    """
    try:
        preview = preview_rotation(slug)
    except RedirectError:
        raise
    except Exception as e:
        logger.exception("Unexpected error previewing rotation", extra={"slug": slug})
        raise InternalRedirectError() from e

    return RotationPreviewResponse(
        campaign_id=preview.campaign_id,
        slug=preview.slug,
        is_active=preview.is_active,
        wheel_length=preview.wheel_length,
        campaign_clicks=preview.campaign_clicks,
        next_seller_id=preview.next_seller_id,
        shares=[
            RotationShareResponse(
                seller_id=share.seller_id,
                name=share.name,
                weight=share.weight,
                slots=share.slots,
                percentage=share.percentage,
                contact_count=share.contact_count,
            )
            for share in preview.shares
        ],
    )
