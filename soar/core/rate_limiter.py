"""
Rate Limiter - Control chat request frequency per user.

Every chat message can cost up to three LLM calls (classify, search,
reformat), so requests are capped per user_id with an in-memory
sliding window. Limits are per process.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
import threading

from soar.core.logging_config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Simple sliding window rate limiter.

    Tracks requests per user_id within a one-minute window.

    Example:
        >>> limiter = RateLimiter(requests_per_minute=30)
        >>> limiter.is_allowed("user-123")
        (True, 29)
    """

    def __init__(self, requests_per_minute: int = 30, cleanup_interval_minutes: int = 5):
        """
        Initialize the rate limiter.

        Args:
            requests_per_minute: Maximum requests allowed per minute
            cleanup_interval_minutes: How often idle users are forgotten
        """
        self.limit = requests_per_minute
        self.window = timedelta(minutes=1)
        self.cleanup_interval = timedelta(minutes=cleanup_interval_minutes)

        self._requests: Dict[str, List[datetime]] = {}
        self._lock = threading.RLock()
        self._last_cleanup = datetime.utcnow()

        logger.info(f"RateLimiter initialized: {requests_per_minute} requests/minute")

    def is_allowed(self, user_id: str) -> Tuple[bool, int]:
        """
        Record a request for user_id if it fits in the window.

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        with self._lock:
            self._maybe_cleanup()

            now = datetime.utcnow()
            recent = self._recent(user_id, now)
            self._requests[user_id] = recent

            if len(recent) >= self.limit:
                logger.warning(f"Rate limit exceeded for user={user_id}")
                return False, 0

            recent.append(now)
            return True, self.limit - len(recent)

    def retry_after_seconds(self, user_id: str) -> int:
        """Seconds until the oldest request in the window expires (at least 1)."""
        with self._lock:
            recent = self._recent(user_id, datetime.utcnow())
            if not recent:
                return 1
            reset_at = min(recent) + self.window
            return max(1, int((reset_at - datetime.utcnow()).total_seconds()))

    def _recent(self, user_id: str, now: datetime) -> List[datetime]:
        cutoff = now - self.window
        return [t for t in self._requests.get(user_id, []) if t > cutoff]

    def _maybe_cleanup(self) -> None:
        now = datetime.utcnow()
        if now - self._last_cleanup < self.cleanup_interval:
            return

        for user_id in list(self._requests):
            recent = self._recent(user_id, now)
            if recent:
                self._requests[user_id] = recent
            else:
                del self._requests[user_id]

        self._last_cleanup = now
        logger.debug(f"Rate limiter cleanup: {len(self._requests)} active users")


# Global rate limiter instance
_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get or create the global rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        from soar.core.config import get_settings
        _rate_limiter = RateLimiter(requests_per_minute=get_settings().rate_limit_per_minute)
    return _rate_limiter


def reset_rate_limiter() -> None:
    """Forget the global rate limiter (useful for testing)."""
    global _rate_limiter
    _rate_limiter = None
