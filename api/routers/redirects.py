"""
Redirect API Endpoints.

Public endpoints that turn a campaign slug into a WhatsApp conversation.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import RedirectResponse

from api.models import ErrorResponse, RedirectRequest, RedirectUrlResponse
from api.settings import Settings, get_settings
from services.redirect_service import (
    InternalRedirectError,
    InvalidSlugError,
    RedirectDecision,
    RedirectError,
    record_click_safely,
    resolve_redirect_within,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or malformed slug"},
    403: {"model": ErrorResponse, "description": "Campaign is inactive"},
    404: {"model": ErrorResponse, "description": "Campaign, sellers or contacts not found"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
    504: {"model": ErrorResponse, "description": "Resolution timed out"},
}


def _resolve(slug, settings: Settings, background_tasks: BackgroundTasks) -> RedirectDecision:
    """Resolve within the configured timeout and schedule the ledger append."""
    try:
        decision = resolve_redirect_within(slug, settings.redirect_timeout_seconds)
    except RedirectError:
        raise
    except Exception as e:
        logger.exception("Redirect handler error")
        raise InternalRedirectError() from e

    # Runs after the response is sent; failures are logged, never surfaced.
    background_tasks.add_task(record_click_safely, decision)
    return decision


@router.get(
    "/r/{slug}",
    status_code=307,
    response_class=RedirectResponse,
    responses=_ERROR_RESPONSES,
    summary="Follow Campaign Link",
    description="Redirect the visitor to the WhatsApp conversation of the next seller in rotation."
)
def follow_campaign_link(
    slug: str,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
):
    """
    Resolve a campaign slug and redirect to WhatsApp.

    **Example usage:**
    ```
    GET /r/acme-black-friday
    ```

    **Response:**
    `307 Temporary Redirect` to `https://wa.me/<digits>?text=<greeting>`
    """
    decision = _resolve(slug, settings, background_tasks)
    return RedirectResponse(url=decision.destination_url, status_code=307)


@router.get("/r", include_in_schema=False)
def follow_campaign_link_without_slug():
    raise InvalidSlugError()


@router.post(
    "/api/v1/redirect",
    response_model=RedirectUrlResponse,
    responses=_ERROR_RESPONSES,
    summary="Resolve Campaign Link",
    description="Resolve a campaign slug to a WhatsApp URL for a separately hosted redirect page."
)
def resolve_campaign_link(
    request: RedirectRequest,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
):
    """
    Resolve a campaign slug without redirecting.

    **Example request:**
    ```json
    {"slug": "acme-black-friday"}
    ```

    **Success response:**
    ```json
    {"redirect_url": "https://wa.me/5511987654321?text=Ol%C3%A1%21"}
    ```
    """
    decision = _resolve(request.slug, settings, background_tasks)
    return RedirectUrlResponse(redirect_url=decision.destination_url)
