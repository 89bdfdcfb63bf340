"""API routers."""
from .auth import router as auth_router
from .employers import router as employers_router
from .jobs import router as jobs_router
from .notifications import router as notifications_router
from .workers import router as workers_router

__all__ = [
    "auth_router",
    "employers_router",
    "jobs_router",
    "notifications_router",
    "workers_router",
]
