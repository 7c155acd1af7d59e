"""
Redirect decision service.

Turns an inbound campaign slug into a WhatsApp destination:

1. Validate the slug and load the campaign (must exist and be active)
2. Load the team's sellers with their contacts, in rotation order
3. Build the weighted wheel
4. Count the campaign's recorded clicks -> pick the wheel slot
5. Count the chosen seller's clicks in this campaign -> pick the contact
6. Format the wa.me deep link with the greeting as prefilled text
7. Append a click to the ledger (best-effort, see `record_click_safely`)

There is no stored cursor. Two concurrent clicks can read the same counts and
go to the same seller; each recorded click moves the next read forward, so the
distribution still converges to the configured weights.

Every expected failure leaves this module as a `RedirectError` subclass carrying a
stable `reason` and an HTTP `status_code`. Store exceptions are chained but
never exposed.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TypeVar
from urllib.parse import quote
from uuid import UUID

from domain.campaign import Campaign
from domain.click import ClickRecord
from domain.seller import Contact
from domain.wheel import (
    NoEligibleSellers,
    WheelShare,
    build_wheel,
    is_eligible,
    order_sellers,
    select_contact,
    select_seller,
    wheel_distribution,
)
from repositories.campaign_repository import get_campaign_by_slug
from repositories.click_repository import (
    count_campaign_clicks,
    count_seller_clicks,
    record_click,
)
from repositories.seller_repository import list_sellers_with_contacts

logger = logging.getLogger(__name__)

T = TypeVar("T")

WHATSAPP_BASE_URL: str = "https://wa.me"

MAX_SLUG_LENGTH: int = 120

_SLUG_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# Bounded pool for timeout-limited resolutions.
_executor = ThreadPoolExecutor(max_workers=16, thread_name_prefix="redirect")


# ============================================================================
# Errors
# ============================================================================

class RedirectError(Exception):
    """Base class for every failure surfaced by the redirect service."""

    reason: str = "redirect_failed"
    status_code: int = 500
    public_message: str = "Redirect failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)


class InvalidSlugError(RedirectError):
    reason = "invalid_slug"
    status_code = 400
    public_message = "Slug is required"


class CampaignNotFoundError(RedirectError):
    reason = "campaign_not_found"
    status_code = 404
    public_message = "Campaign not found"


class CampaignInactiveError(RedirectError):
    reason = "campaign_inactive"
    status_code = 403
    public_message = "Campaign is inactive"


class NoSellersConfiguredError(RedirectError):
    reason = "no_sellers_configured"
    status_code = 404
    public_message = "No sellers configured for this campaign"


class NoEligibleSellersError(RedirectError):
    reason = "no_eligible_sellers"
    status_code = 404
    public_message = "No sellers with contacts available for this campaign"


class StoreUnavailableError(RedirectError):
    reason = "store_unavailable"
    status_code = 500
    public_message = "Internal server error"


class RedirectTimeoutError(RedirectError):
    reason = "redirect_timeout"
    status_code = 504
    public_message = "Redirect timed out"


class InternalRedirectError(RedirectError):
    """Anything unexpected, caught at the HTTP boundary."""

    reason = "internal_error"
    status_code = 500
    public_message = "Internal server error"


# ============================================================================
# Results
# ============================================================================

@dataclass(frozen=True, slots=True)
class RedirectDecision:
    """Outcome of one resolution, before the click is recorded."""

    campaign_id: UUID
    seller_id: UUID
    contact_id: UUID
    destination_url: str
    campaign_clicks: int
    seller_clicks: int
    wheel_length: int


@dataclass(frozen=True, slots=True)
class RotationPreview:
    """Read-only view of a campaign's rotation."""

    campaign_id: UUID
    slug: str
    is_active: bool
    wheel_length: int
    campaign_clicks: int
    next_seller_id: Optional[UUID]
    shares: List[WheelShare]


# ============================================================================
# Helpers
# ============================================================================

def validate_slug(slug: Any) -> str:
    """
    Return the normalized slug or raise InvalidSlugError.

    Runs before any store access.
    """
    if not isinstance(slug, str):
        raise InvalidSlugError()

    cleaned = slug.strip()
    if not cleaned:
        raise InvalidSlugError()
    if len(cleaned) > MAX_SLUG_LENGTH or not _SLUG_PATTERN.match(cleaned):
        raise InvalidSlugError("Slug is malformed")
    return cleaned


def build_whatsapp_url(contact: Contact, greeting: str = "") -> str:
    """
    Format the wa.me deep link for a contact.

    Example:
        build_whatsapp_url(contact, "Olá! Vim pelo anúncio")
        # "https://wa.me/5511987654321?text=Ol%C3%A1%21%20Vim%20pelo%20an%C3%BAncio"
    """
    url = f"{WHATSAPP_BASE_URL}/{contact.whatsapp_number}"
    if greeting:
        url += f"?text={quote(greeting, safe='')}"
    return url


def _read(step: str, func: Callable[..., T], *args: Any) -> T:
    """Run a required store read, mapping any failure to StoreUnavailableError."""
    try:
        return func(*args)
    except Exception as exc:
        logger.error(
            f"Store read failed during {step}",
            exc_info=True,
            extra={"step": step},
        )
        raise StoreUnavailableError() from exc


def _load_campaign(slug: str) -> Campaign:
    campaign = _read("campaign lookup", get_campaign_by_slug, slug)
    if campaign is None:
        logger.warning("Campaign not found", extra={"slug": slug})
        raise CampaignNotFoundError()
    return campaign


# ============================================================================
# Operations
# ============================================================================

def resolve_redirect(slug: Any) -> RedirectDecision:
    """
    Decide which seller and contact receive the next click for a campaign.

    Does not record the click; see `record_click_safely`.

    Raises:
        RedirectError: one of the subclasses above
    """
    slug = validate_slug(slug)
    logger.info("Processing redirect", extra={"slug": slug})

    campaign = _load_campaign(slug)
    if not campaign.is_active:
        logger.warning(
            "Campaign is inactive",
            extra={"slug": slug, "campaign_id": str(campaign.campaign_id)},
        )
        raise CampaignInactiveError()

    sellers = _read("seller lookup", list_sellers_with_contacts, campaign.team_id)
    if not sellers:
        logger.warning(
            "No sellers configured",
            extra={"campaign_id": str(campaign.campaign_id), "team_id": str(campaign.team_id)},
        )
        raise NoSellersConfiguredError()

    try:
        wheel = build_wheel(order_sellers(sellers))
    except NoEligibleSellers as exc:
        logger.warning(str(exc), extra={"campaign_id": str(campaign.campaign_id)})
        raise NoEligibleSellersError() from exc

    campaign_clicks = _read("campaign click count", count_campaign_clicks, campaign.campaign_id)
    seller = select_seller(wheel, campaign_clicks)

    seller_clicks = _read(
        "seller click count", count_seller_clicks, campaign.campaign_id, seller.seller_id
    )
    contacts = seller.usable_contacts
    contact = select_contact(contacts, seller_clicks)

    logger.info(
        f"Round-robin: campaign_clicks={campaign_clicks}, wheel_length={len(wheel)}, "
        f"wheel_index={campaign_clicks % len(wheel)}, seller_clicks={seller_clicks}, "
        f"contacts={len(contacts)}, contact_index={seller_clicks % len(contacts)}",
        extra={
            "campaign_id": str(campaign.campaign_id),
            "seller_id": str(seller.seller_id),
            "contact_id": str(contact.contact_id),
        },
    )

    return RedirectDecision(
        campaign_id=campaign.campaign_id,
        seller_id=seller.seller_id,
        contact_id=contact.contact_id,
        destination_url=build_whatsapp_url(contact, campaign.greeting),
        campaign_clicks=campaign_clicks,
        seller_clicks=seller_clicks,
        wheel_length=len(wheel),
    )


def record_click_safely(decision: RedirectDecision) -> Optional[ClickRecord]:
    """
    Append the served click to the ledger.

    The redirect decision has already been made when this runs, so a failed
    append is logged and swallowed. Returns None in that case.
    """
    try:
        click = record_click(decision.campaign_id, decision.seller_id)
    except Exception:
        logger.exception(
            "Error logging click",
            extra={
                "campaign_id": str(decision.campaign_id),
                "seller_id": str(decision.seller_id),
            },
        )
        return None

    logger.debug("Click logged", extra={"click_id": click.click_id})
    return click


def resolve_and_record(slug: Any) -> RedirectDecision:
    """Resolve a redirect and record its click before returning."""
    decision = resolve_redirect(slug)
    record_click_safely(decision)
    return decision


def resolve_redirect_within(slug: Any, timeout_seconds: float) -> RedirectDecision:
    """
    `resolve_redirect` bounded by a timeout.

    Raises:
        RedirectTimeoutError: if the resolution did not finish in time
    """
    slug = validate_slug(slug)
    future = _executor.submit(resolve_redirect, slug)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError:
        # cancel() only helps while still queued; a running worker is abandoned
        # and keeps its pool slot until the store call returns.
        abandoned = not future.cancel()
        logger.error(
            f"Redirect resolution exceeded {timeout_seconds:.2f}s"
            + ("; worker abandoned, still running" if abandoned else "; cancelled before start"),
            extra={"slug": slug},
        )
        raise RedirectTimeoutError()


def preview_rotation(slug: Any) -> RotationPreview:
    """
    Describe a campaign's current wheel without recording anything.

    Inactive campaigns can be previewed; a team with no eligible seller yields
    an empty wheel rather than an error.
    """
    slug = validate_slug(slug)
    campaign = _load_campaign(slug)
    sellers = order_sellers(
        _read("seller lookup", list_sellers_with_contacts, campaign.team_id)
    )
    campaign_clicks = _read("campaign click count", count_campaign_clicks, campaign.campaign_id)

    wheel_length = sum(s.weight for s in sellers if is_eligible(s))
    next_seller_id = None
    if wheel_length:
        next_seller_id = select_seller(build_wheel(sellers), campaign_clicks).seller_id

    return RotationPreview(
        campaign_id=campaign.campaign_id,
        slug=campaign.slug,
        is_active=campaign.is_active,
        wheel_length=wheel_length,
        campaign_clicks=campaign_clicks,
        next_seller_id=next_seller_id,
        shares=wheel_distribution(sellers),
    )


__all__ = [
    "CampaignInactiveError",
    "CampaignNotFoundError",
    "InternalRedirectError",
    "InvalidSlugError",
    "NoEligibleSellersError",
    "NoSellersConfiguredError",
    "RedirectDecision",
    "RedirectError",
    "RedirectTimeoutError",
    "RotationPreview",
    "StoreUnavailableError",
    "build_whatsapp_url",
    "preview_rotation",
    "record_click_safely",
    "resolve_and_record",
    "resolve_redirect",
    "resolve_redirect_within",
    "validate_slug",
]
