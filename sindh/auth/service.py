"""Phone-based one-time-code login for workers and employers."""
import logging
import secrets
from datetime import timedelta
from typing import Optional, Union

import bcrypt
from sqlalchemy import select
from sqlalchemy.orm import Session

from sindh.auth.rate_limit import RateLimiter
from sindh.exceptions import (
    AccountNotFoundError,
    InvalidOTPError,
    OTPExpiredError,
    OTPRateLimitError,
    ValidationError,
)
from sindh.persistence.models import Employer, Worker, as_utc, utcnow

logger = logging.getLogger(__name__)

ROLES = {"worker": Worker, "employer": Employer}

OTP_LENGTH = 6


def hash_code(code: str) -> str:
    """
    Hash a one-time code using bcrypt.

    Args:
        code: Plain text code

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt(rounds=10)
    return bcrypt.hashpw(code.encode("utf-8"), salt).decode("utf-8")


def verify_code(code: str, hashed: str) -> bool:
    """
    Verify a one-time code against a bcrypt hash.

    Returns:
        True if the code matches, False otherwise
    """
    try:
        return bcrypt.checkpw(code.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_code(length: int = OTP_LENGTH) -> str:
    """Random numeric code, zero-padded."""
    return str(secrets.randbelow(10 ** length)).zfill(length)


class AuthService:
    """
    OTP login.

    The current code's hash and expiry live on the profile row, so a
    second request replaces the first code.
    """

    def __init__(
        self,
        session: Session,
        ttl_minutes: Optional[int] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        """
        Initialize auth service.

        Args:
            session: Database session
            ttl_minutes: Code lifetime (defaults to settings.otp_ttl_minutes)
            limiter: Optional per-phone limit on code requests
        """
        if ttl_minutes is None:
            from config.settings import settings

            ttl_minutes = settings.otp_ttl_minutes
        self.session = session
        self.ttl = timedelta(minutes=ttl_minutes)
        self.limiter = limiter

    def request_otp(self, phone: str, role: str) -> str:
        """
        Issue a new code for a registered phone number.

        Args:
            phone: Registered phone number
            role: "worker" or "employer"

        Returns:
            The plain code, to be delivered by SMS

        Raises:
            AccountNotFoundError: If no profile uses this phone
            OTPRateLimitError: If the phone asked for too many codes recently
        """
        account = self.get_account(phone, role)

        if self.limiter is not None and not self.limiter.allow(phone):
            raise OTPRateLimitError(phone, self.limiter.window_seconds)

        code = generate_code()
        account.otp_hash = hash_code(code)
        account.otp_expires_at = utcnow() + self.ttl
        self.session.commit()

        logger.info("Issued OTP for %s %s", role, account.id)
        return code

    def verify_otp(self, phone: str, code: str, role: str) -> Union[Worker, Employer]:
        """
        Check a code and log the account in.

        Returns:
            The authenticated Worker or Employer

        Raises:
            AccountNotFoundError: If no profile uses this phone
            OTPExpiredError: If no code is pending or it has expired
            InvalidOTPError: If the code does not match
        """
        account = self.get_account(phone, role)

        if not account.otp_hash or account.otp_expires_at is None:
            raise OTPExpiredError()
        if as_utc(account.otp_expires_at) < utcnow():
            account.otp_hash = None
            account.otp_expires_at = None
            self.session.commit()
            raise OTPExpiredError()
        if not verify_code(code, account.otp_hash):
            logger.warning("Invalid OTP for %s %s", role, account.id)
            raise InvalidOTPError()

        account.otp_hash = None
        account.otp_expires_at = None
        account.last_login = utcnow()
        self.session.commit()
        self.session.refresh(account)

        logger.info("%s %s logged in", role.capitalize(), account.id)
        return account

    def get_account(self, phone: str, role: str) -> Union[Worker, Employer]:
        """Look up the worker or employer registered with a phone number."""
        model = ROLES.get(role)
        if model is None:
            raise ValidationError("role", f"Role must be one of {sorted(ROLES)}")

        stmt = select(model).where(model.phone == phone)
        account = self.session.execute(stmt).scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError(phone)
        return account
