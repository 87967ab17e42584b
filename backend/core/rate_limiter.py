"""Rate Limiting Module

In-process fixed-window counters keyed by client (IP, or user id for
authenticated groups). The limiter is advisory: each process keeps its own
buckets and expired buckets are pruned on a periodic interval.
"""

import time
import logging
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from fastapi import Depends, Request

from .auth import decode_access_token
from .config import Settings, get_settings
from .exceptions import RateLimitExceededError, UnauthorizedError

logger = logging.getLogger(__name__)


class RateLimitGroup(str, Enum):
    AUTH = "auth"
    PAYMENT = "payment"
    GENERAL = "general"


def group_limits(settings: Settings, group: RateLimitGroup) -> Tuple[int, int]:
    """Return ``(max_requests, window_seconds)`` for a group."""
    if group == RateLimitGroup.AUTH:
        return settings.AUTH_RATE_LIMIT, settings.AUTH_RATE_WINDOW_SECONDS
    if group == RateLimitGroup.PAYMENT:
        return settings.PAYMENT_RATE_LIMIT, settings.PAYMENT_RATE_WINDOW_SECONDS
    return settings.GENERAL_RATE_LIMIT, settings.GENERAL_RATE_WINDOW_SECONDS


class _Bucket:
    __slots__ = ("count", "reset_at")

    def __init__(self, reset_at: float):
        self.count = 0
        self.reset_at = reset_at


class RateLimiter:
    """Fixed-window counter per key."""

    def __init__(
        self,
        prune_interval_seconds: int = 300,
        time_func: Callable[[], float] = time.monotonic,
    ):
        self._buckets: Dict[str, _Bucket] = {}
        self._time = time_func
        self._prune_interval = prune_interval_seconds
        self._last_prune = time_func()

    def check(
        self, key: str, max_requests: int, window_seconds: int
    ) -> Tuple[bool, Optional[int]]:
        """
        Count one request against ``key``.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        now = self._time()
        self._maybe_prune(now)

        bucket = self._buckets.get(key)
        if bucket is None or bucket.reset_at <= now:
            bucket = _Bucket(now + window_seconds)
            self._buckets[key] = bucket

        if bucket.count >= max_requests:
            return False, max(int(bucket.reset_at - now), 1)

        bucket.count += 1
        return True, None

    def prune(self, now: Optional[float] = None) -> int:
        """Drop expired buckets, returning how many were removed."""
        now = self._time() if now is None else now
        expired = [key for key, bucket in self._buckets.items() if bucket.reset_at <= now]
        for key in expired:
            del self._buckets[key]
        self._last_prune = now
        return len(expired)

    def _maybe_prune(self, now: float) -> None:
        if now - self._last_prune >= self._prune_interval:
            removed = self.prune(now)
            if removed:
                logger.debug(f"Pruned {removed} expired rate limit buckets")

    def __len__(self) -> int:
        return len(self._buckets)


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


def client_key(request: Request, settings: Settings, per_user: bool) -> str:
    if per_user:
        authorization = request.headers.get("Authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            try:
                return f"user:{decode_access_token(token, settings).customer_id}"
            except UnauthorizedError:
                pass
    return f"ip:{get_client_ip(request)}"


def rate_limit(group: RateLimitGroup, per_user: bool = False):
    """Dependency factory enforcing the limit for ``group``.

    Keys by user id when ``per_user`` is set and a valid bearer token is
    present, by client IP otherwise.
    """

    async def dependency(
        request: Request, settings: Settings = Depends(get_settings)
    ) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        limiter: RateLimiter = request.app.state.rate_limiter
        max_requests, window = group_limits(settings, group)
        key = f"{group.value}:{client_key(request, settings, per_user)}"
        allowed, retry_after = limiter.check(key, max_requests, window)
        if not allowed:
            logger.warning(f"Rate limit exceeded for {key}")
            raise RateLimitExceededError(retry_after)

    return dependency
