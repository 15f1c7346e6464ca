"""
Rate limiting utility for admin login attempts
"""
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Rate limiter that enforces an attempts-per-window limit per key
    Uses sliding window algorithm; never sleeps, callers reject instead
    """

    def __init__(self, max_attempts: int, window_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        """
        Initialize rate limiter

        Args:
            max_attempts: Maximum number of attempts allowed per window (0 disables limiting)
            window_seconds: Length of the sliding window
        """
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock
        self.attempts: Dict[str, Deque[float]] = {}
        self.last_attempt_time: Optional[float] = None

    def _cleanup_old_attempts(self, key: str, current_time: float) -> Deque[float]:
        """Remove attempts older than the window"""
        times = self.attempts.get(key)
        if times is None:
            return deque()
        while times and current_time - times[0] > self.window_seconds:
            times.popleft()
        if not times:
            del self.attempts[key]
        return times

    def allow(self, key: str) -> bool:
        """
        Record an attempt for key and report whether it is within the limit
        Should be called before each attempt
        """
        if not self.max_attempts:
            return True

        current_time = self.clock()
        times = self._cleanup_old_attempts(key, current_time)

        if len(times) >= self.max_attempts:
            logger.warning("Rate limit reached for %s (%d attempts)", key, len(times))
            return False

        self.attempts.setdefault(key, times).append(current_time)
        self.last_attempt_time = current_time
        return True

    def reset(self, key: str) -> None:
        self.attempts.pop(key, None)

    def get_stats(self, key: str) -> dict:
        """Get current rate limiter statistics for key"""
        times = self._cleanup_old_attempts(key, self.clock())

        return {
            'attempts_in_window': len(times),
            'limit': self.max_attempts,
            'last_attempt_time': self.last_attempt_time
        }
