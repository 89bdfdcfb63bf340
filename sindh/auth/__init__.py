"""OTP authentication."""
from .rate_limit import RateLimiter
from .service import AuthService, hash_code, verify_code

__all__ = ["AuthService", "RateLimiter", "hash_code", "verify_code"]
