# src/llm/rate_limiter.py - v1
"""Sliding-window admission control in front of the generation service.

One instance is shared process-wide because the upstream quota is global.
No queuing or backoff happens here: a rejected admission raises RateLimited
and the caller decides whether to retry.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable

from topicforge.core.errors import RateLimited

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Admit at most max_requests calls in any rolling window_ms window."""

    def __init__(
        self,
        max_requests: int = 60,
        window_ms: int = 60_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._clock = clock
        self._admissions: deque[float] = deque()
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def try_admit(self) -> None:
        """Record one admission or raise RateLimited without side effect."""
        with self._lock:
            now_ms = self._clock() * 1000
            self._trim(now_ms)
            if len(self._admissions) >= self._max_requests:
                retry_after_s = max(
                    0.0, (self._admissions[0] + self._window_ms - now_ms) / 1000
                )
                logger.warning(
                    "Generation rate limit reached (%d/%d ms), retry in %.1fs",
                    self._max_requests, self._window_ms, retry_after_s,
                )
                raise RateLimited(self._max_requests, self._window_ms, retry_after_s)
            self._admissions.append(now_ms)

    def remaining(self) -> int:
        """Admissions still available in the current window."""
        with self._lock:
            self._trim(self._clock() * 1000)
            return self._max_requests - len(self._admissions)

    def reset(self) -> None:
        with self._lock:
            self._admissions.clear()

    def _trim(self, now_ms: float) -> None:
        # Timestamps exactly at the window edge are still inside the window
        cutoff = now_ms - self._window_ms
        while self._admissions and self._admissions[0] < cutoff:
            self._admissions.popleft()
