"""
Tests for the burst-rate limiter.

Tests cover:
- Disabled limiter never waits
- Dispatch spacing with a non-zero burst rate
- Concurrent callers
- Runtime changes to the burst rate
"""

import threading
import time
import pytest

from bitso.api.rate_limiter import RateLimitConfig, RateLimiter


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_zero_burst_rate_no_delay(self):
        """Test that a zero burst rate disables throttling."""
        limiter = RateLimiter(burst_rate=0)
        assert not limiter.enabled

        start = time.monotonic()
        waits = [limiter.acquire() for _ in range(50)]
        elapsed = time.monotonic() - start

        assert all(w == 0.0 for w in waits)
        assert elapsed < 0.05

    def test_first_acquire_is_immediate(self):
        """Test that the first ticket is available at once."""
        limiter = RateLimiter(burst_rate=0.5)
        assert limiter.acquire() < 0.05

    def test_burst_gap(self):
        """Test that consecutive dispatches are spaced by the burst rate."""
        limiter = RateLimiter(burst_rate=0.1)

        limiter.acquire()
        first = time.monotonic()
        limiter.acquire()
        second = time.monotonic()

        assert second - first >= 0.09

    def test_concurrent_callers_are_serialized(self):
        """Test that threads sharing a limiter are released one per interval."""
        limiter = RateLimiter(burst_rate=0.1)
        dispatch_times = []
        lock = threading.Lock()

        def worker():
            limiter.acquire()
            with lock:
                dispatch_times.append(time.monotonic())

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        dispatch_times.sort()
        gaps = [b - a for a, b in zip(dispatch_times, dispatch_times[1:])]
        assert all(gap >= 0.09 for gap in gaps)

    def test_negative_burst_rate_raises(self):
        with pytest.raises(ValueError):
            RateLimiter(burst_rate=-1)

    def test_set_burst_rate(self):
        """Test that the burst rate can be changed at runtime."""
        limiter = RateLimiter()
        limiter.burst_rate = 0.25
        assert limiter.burst_rate == 0.25
        assert limiter.enabled

        with pytest.raises(ValueError):
            limiter.burst_rate = -0.1

    def test_from_config(self):
        limiter = RateLimiter.from_config(RateLimitConfig(burst_rate=0.2))
        assert limiter.burst_rate == 0.2
