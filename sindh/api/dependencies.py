"""FastAPI dependencies for dependency injection."""
from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from sindh.auth.rate_limit import RateLimiter
from sindh.auth.service import AuthService
from sindh.jobs.service import JobService
from sindh.matching.config import ScoringConfig, get_scoring_config
from sindh.matching.service import MatchService
from sindh.notifications.dispatcher import NotificationDispatcher
from sindh.notifications.service import NotificationService
from sindh.persistence.database import SessionLocal
from sindh.profiles.service import ProfileService
from sindh.tracking.application_service import ApplicationService
from sindh.tracking.wallet_service import WalletService


def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session for one request.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_config() -> ScoringConfig:
    return get_scoring_config()


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_otp_limiter(request: Request) -> RateLimiter:
    return request.app.state.otp_limiter


def get_profile_service(
    db: Session = Depends(get_db),
    config: ScoringConfig = Depends(get_config),
) -> ProfileService:
    return ProfileService(db, config)


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    return JobService(db)


def get_application_service(
    db: Session = Depends(get_db),
    config: ScoringConfig = Depends(get_config),
) -> ApplicationService:
    return ApplicationService(db, config)


def get_wallet_service(db: Session = Depends(get_db)) -> WalletService:
    return WalletService(db)


def get_match_service(
    db: Session = Depends(get_db),
    config: ScoringConfig = Depends(get_config),
) -> MatchService:
    return MatchService(db, config)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_auth_service(
    db: Session = Depends(get_db),
    limiter: RateLimiter = Depends(get_otp_limiter),
) -> AuthService:
    return AuthService(db, limiter=limiter)
