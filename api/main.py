"""
Lead Rotation API - Main Application.

FastAPI application with CORS enabled so the public redirect page (hosted
separately) can call it from the browser.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.errors import redirect_error_handler, request_validation_handler
from api.observability import configure_logging, observe_request
from api.settings import get_settings
from services.redirect_service import RedirectError

settings = get_settings()
configure_logging(settings.log_level)

# Create FastAPI application
app = FastAPI(
    title="Lead Rotation API",
    description="Weighted round-robin distribution of campaign clicks to sellers' WhatsApp numbers",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def observability_middleware(request: Request, call_next):
    return await observe_request(request, call_next)


app.add_exception_handler(RedirectError, redirect_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "lead-rotation-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Lead Rotation API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import redirects, rotation

app.include_router(redirects.router, tags=["Redirects"])
app.include_router(rotation.router, prefix="/api/v1", tags=["Rotation"])
