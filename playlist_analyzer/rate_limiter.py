"""
Rate Limiter - Spaces out per-track enrichment so metadata APIs are not hammered
"""
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-delay throttle applied between enriched tracks

    Usage:
        limiter = RateLimiter(delay_seconds=1.0)

        for track in tracks:
            enrich(track)
            limiter.pause()  # Always sleeps the full delay
    """

    def __init__(self, delay_seconds: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        """
        Initialize rate limiter

        Args:
            delay_seconds: Pause inserted after each enrichment step (0 disables)
            sleep: Sleep function, injectable for tests
        """
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")

        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.total_waits = 0
        self.total_wait_time = 0.0

        logger.debug(f"Rate limiter initialized: {self.delay_seconds:.2f}s pause between tracks")

    def pause(self):
        """Sleep for the configured delay"""
        if self.delay_seconds <= 0:
            return
        self._sleep(self.delay_seconds)
        self.total_waits += 1
        self.total_wait_time += self.delay_seconds

    def get_stats(self) -> dict:
        """Get statistics about rate limiting"""
        return {
            'total_waits': self.total_waits,
            'total_wait_time': self.total_wait_time,
        }
