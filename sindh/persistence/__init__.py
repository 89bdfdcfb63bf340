"""Database persistence layer."""
from .database import get_session, init_db
from .models import (
    Application,
    Base,
    Employer,
    Job,
    Notification,
    StatusHistory,
    WalletTransaction,
    Worker,
)

__all__ = [
    "Base",
    "Worker",
    "Employer",
    "Job",
    "Application",
    "StatusHistory",
    "Notification",
    "WalletTransaction",
    "init_db",
    "get_session",
]
