"""
Burst-rate limiting for Bitso API requests.

Implements a token bucket of size 1:
- A caller takes the single ticket before dispatching a request
- A timer hands the ticket back `burst_rate` seconds after it was taken
- Spacing is measured from dispatch, so a slow response does not stretch
  the throttle window

A burst rate of zero disables throttling entirely.

Usage:
    limiter = RateLimiter(burst_rate=0.5)
    limiter.acquire()  # Blocks until the ticket is available
    response = session.get(...)
"""

import logging
import threading
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limiter configuration."""

    burst_rate: float = 0.0  # Seconds between requests (0 = disabled)


class RateLimiter:
    """
    Size-1 ticket pool refilled on a timer.

    Safe to share between threads: concurrent callers queue on the
    semaphore and are released one per interval.
    """

    def __init__(self, burst_rate: float = 0.0):
        """
        Initialize rate limiter.

        Args:
            burst_rate: Minimum seconds between request dispatches
        """
        if burst_rate < 0:
            raise ValueError("burst_rate must be >= 0")

        self._burst_rate = burst_rate
        self._lock = threading.Lock()
        self._tickets = threading.BoundedSemaphore(1)

    @classmethod
    def from_config(cls, config: RateLimitConfig) -> "RateLimiter":
        """Create from config object."""
        return cls(burst_rate=config.burst_rate)

    @property
    def burst_rate(self) -> float:
        """Get the current burst rate in seconds."""
        with self._lock:
            return self._burst_rate

    @burst_rate.setter
    def burst_rate(self, value: float) -> None:
        if value < 0:
            raise ValueError("burst_rate must be >= 0")
        with self._lock:
            self._burst_rate = value

    @property
    def enabled(self) -> bool:
        return self.burst_rate > 0

    def acquire(self) -> float:
        """
        Acquire permission to dispatch a request.

        Blocks until the ticket is available, then schedules its release
        after the burst interval.

        Returns:
            Wait time in seconds (0 if no wait needed)
        """
        burst_rate = self.burst_rate
        if burst_rate <= 0:
            return 0.0

        started = time.monotonic()
        self._tickets.acquire()
        wait_time = time.monotonic() - started

        timer = threading.Timer(burst_rate, self._release)
        timer.daemon = True
        timer.start()

        if wait_time > 0.001:
            logger.debug(
                f"Rate limiting: waited {wait_time:.3f}s, "
                f"burst_rate={burst_rate:.3f}s"
            )

        return wait_time

    def _release(self) -> None:
        """Return the ticket to the pool."""
        self._tickets.release()
