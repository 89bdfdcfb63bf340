"""Sliding-window limiter for OTP requests."""
import time
from collections import defaultdict
from typing import Callable


class RateLimiter:
    """Sliding-window rate limiter.

    Tracks request times per key (a phone number) and allows at most
    ``max_requests`` within ``window_seconds``.

    Usage:
        limiter = RateLimiter(max_requests=3, window_seconds=600)
        if not limiter.allow("+919876543210"):
            raise OTPRateLimitError(...)
    """

    def __init__(
        self,
        max_requests: int = 3,
        window_seconds: int = 600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._last_sweep = self._clock()

    def key_count(self) -> int:
        """Number of keys currently tracked."""
        return len(self._requests)

    def _prune(self, key: str) -> list[float]:
        cutoff = self._clock() - self.window_seconds
        recent = [t for t in self._requests.get(key, ()) if t > cutoff]
        if recent:
            self._requests[key] = recent
        else:
            self._requests.pop(key, None)
        return recent

    def _sweep(self) -> None:
        # Drop idle keys at most once per window
        now = self._clock()
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._requests):
            self._prune(key)

    def allow(self, key: str) -> bool:
        """Record a request for key; False if it would exceed the limit."""
        self._sweep()
        if len(self._prune(key)) >= self.max_requests:
            return False
        self._requests[key].append(self._clock())
        return True

    def remaining(self, key: str) -> int:
        return max(0, self.max_requests - len(self._prune(key)))

    def reset(self, key: str) -> None:
        self._requests.pop(key, None)
