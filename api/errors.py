"""
Error rendering for the HTTP boundary.

Every failure crosses the boundary as the same JSON shape, carrying the
generic fallback destination the browser should go to instead.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models import ErrorResponse
from api.settings import get_settings
from services.redirect_service import InvalidSlugError, RedirectError


def error_response(exc: RedirectError) -> JSONResponse:
    body = ErrorResponse(
        error=exc.public_message,
        reason=exc.reason,
        status_code=exc.status_code,
        fallback_url=get_settings().fallback_url,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def redirect_error_handler(request: Request, exc: RedirectError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable bodies and wrongly typed fields are malformed-slug requests."""
    return error_response(InvalidSlugError("Slug is malformed"))
