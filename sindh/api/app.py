"""
Sindh marketplace HTTP API.

Docs are served at /docs (Swagger UI) and /redoc.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from config.settings import settings
from sindh import __version__
from sindh.api.exceptions import (
    general_exception_handler,
    http_exception_handler,
    request_validation_handler,
    sindh_exception_handler,
)
from sindh.api.routers import (
    auth_router,
    employers_router,
    jobs_router,
    notifications_router,
    workers_router,
)
from sindh.auth.rate_limit import RateLimiter
from sindh.exceptions import SindhError
from sindh.notifications.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


def create_app(
    dispatcher: Optional[NotificationDispatcher] = None,
    otp_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        dispatcher: Notification dispatcher (defaults to the configured SMS gateway)
        otp_limiter: Per-phone OTP request limiter (defaults to settings)
    """
    app = FastAPI(
        title="Sindh API",
        description="Gig work marketplace: worker profiles, job matching and applications",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.dispatcher = dispatcher or NotificationDispatcher()
    app.state.otp_limiter = otp_limiter or RateLimiter(
        max_requests=settings.otp_max_requests,
        window_seconds=settings.otp_window_minutes * 60,
    )

    # Register exception handlers
    app.add_exception_handler(SindhError, sindh_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(workers_router)
    app.include_router(employers_router)
    app.include_router(jobs_router)
    app.include_router(notifications_router)
    app.include_router(auth_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "sindh-api", "version": __version__}

    return app
