# tests/unit/llm/test_unit_rate_limiter.py - v1
"""Tests for llm/rate_limiter.py: sliding-window admission."""

from __future__ import annotations

import pytest

from topicforge.core.errors import RateLimited
from topicforge.llm.rate_limiter import SlidingWindowRateLimiter
from tests.conftest import FakeClock


class TestSlidingWindow:
    def test_admits_exactly_max_requests(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=3, window_ms=1000, clock=clock)
        for _ in range(3):
            limiter.try_admit()
        with pytest.raises(RateLimited) as exc_info:
            limiter.try_admit()
        assert exc_info.value.limit == 3
        assert exc_info.value.window_ms == 1000

    def test_boundary_burst(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=60, window_ms=60_000, clock=clock)
        clock.advance(59.995)
        for _ in range(59):
            limiter.try_admit()
        clock.advance(0.004)
        limiter.try_admit()
        with pytest.raises(RateLimited):
            limiter.try_admit()

    def test_rejection_has_no_side_effect(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_ms=1000, clock=clock)
        limiter.try_admit()
        for _ in range(5):
            with pytest.raises(RateLimited):
                limiter.try_admit()
        clock.advance(1.001)
        limiter.try_admit()

    def test_window_slides(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=2, window_ms=1000, clock=clock)
        limiter.try_admit()
        clock.advance(0.5)
        limiter.try_admit()
        clock.advance(0.501)
        # First admission left the window, second is still inside
        limiter.try_admit()
        with pytest.raises(RateLimited):
            limiter.try_admit()

    def test_admission_exactly_at_window_edge_still_counts(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_ms=1000, clock=clock)
        limiter.try_admit()
        clock.advance(1.0)
        with pytest.raises(RateLimited):
            limiter.try_admit()

    def test_retry_after(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_ms=10_000, clock=clock)
        limiter.try_admit()
        clock.advance(4)
        with pytest.raises(RateLimited) as exc_info:
            limiter.try_admit()
        assert exc_info.value.retry_after_s == pytest.approx(6.0)

    def test_remaining_and_reset(self, clock):
        limiter = SlidingWindowRateLimiter(max_requests=5, window_ms=1000, clock=clock)
        limiter.try_admit()
        limiter.try_admit()
        assert limiter.remaining() == 3
        limiter.reset()
        assert limiter.remaining() == 5

    def test_defaults(self):
        limiter = SlidingWindowRateLimiter(clock=FakeClock())
        assert limiter.max_requests == 60
        assert limiter.window_ms == 60_000

    @pytest.mark.parametrize("kwargs", [{"max_requests": 0}, {"window_ms": 0}])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            SlidingWindowRateLimiter(**kwargs)
