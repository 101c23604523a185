"""
Fixed-window rate limiting.

Each request is counted against a ``(tier, key)`` window, where the key is
``user:<id>`` for authenticated callers and ``ip:<addr>`` otherwise. The
counters are in-process and guarded by a lock.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from starlette.requests import HTTPConnection

from catalog.errors import AppError, Errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for a rate limit tier."""

    max_requests: int
    window_seconds: float


class RateLimitTier(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


TIERS: Dict[RateLimitTier, RateLimitConfig] = {
    RateLimitTier.SHORT: RateLimitConfig(max_requests=3, window_seconds=1),
    RateLimitTier.MEDIUM: RateLimitConfig(max_requests=20, window_seconds=10),
    RateLimitTier.LONG: RateLimitConfig(max_requests=100, window_seconds=60),
}


@dataclass
class _Window:
    started_at: float
    count: int


class RateLimiter:
    """In-memory fixed-window limiter shared by the REST and RPC surfaces."""

    def __init__(
        self,
        tiers: Optional[Dict[RateLimitTier, RateLimitConfig]] = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.tiers = dict(tiers or TIERS)
        self._timer = timer
        self._windows: Dict[Tuple[RateLimitTier, str], _Window] = {}
        self._lock = Lock()
        self._last_cleanup = timer()
        self._cleanup_interval = 60.0

    def _cleanup_old_entries(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self.tiers[key[0]].window_seconds
        ]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired rate limit windows")

    def hit(self, tier: RateLimitTier, key: str) -> Tuple[bool, Optional[int]]:
        """Count one request; return ``(allowed, retry_after_seconds)``."""
        config = self.tiers[tier]
        now = self._timer()
        with self._lock:
            self._cleanup_old_entries(now)
            window = self._windows.get((tier, key))
            if window is None or now - window.started_at >= config.window_seconds:
                window = _Window(started_at=now, count=0)
                self._windows[(tier, key)] = window
            window.count += 1
            if window.count > config.max_requests:
                retry_after = max(1, math.ceil(window.started_at + config.window_seconds - now))
                return False, retry_after
        return True, None

    def enforce(self, tier: RateLimitTier, key: str) -> None:
        allowed, retry_after = self.hit(tier, key)
        if not allowed:
            logger.warning(f"Rate limit exceeded tier={tier.value} key={key} retry_after={retry_after}s")
            raise RateLimitExceeded(retry_after or 1)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RateLimitExceeded(AppError):
    def __init__(self, retry_after: int):
        super().__init__(Errors.TOO_MANY_REQUESTS)
        self.retry_after = retry_after


def client_ip(conn: HTTPConnection) -> str:
    """Client address, preferring the first ``X-Forwarded-For`` hop."""
    forwarded = conn.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if conn.client:
        return conn.client.host
    return "unknown"


def rate_limit_key(conn: HTTPConnection, user_id: Optional[object] = None) -> str:
    if user_id is not None:
        return f"user:{user_id}"
    return f"ip:{client_ip(conn)}"


_limiter = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    return _limiter
