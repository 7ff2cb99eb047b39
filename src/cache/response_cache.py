# src/cache/response_cache.py - v1
"""Bounded, TTL-based, least-recently-used response cache.

Holds detail entries keyed by (kind, topic, fact or item id) so identical
lookups never re-invoke generation within max_age. One instance is shared
process-wide; get+promote and evict+insert never suspend between halves.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class CacheRecord(Generic[V]):
    """Cached value with the time it was inserted."""

    value: V
    inserted_at: float


class ResponseCache(Generic[V]):
    """LRU with TTL. Eviction is by least recent access, not insertion."""

    def __init__(
        self,
        max_size: int = 1000,
        max_age_s: float = 24 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._max_size = max_size
        self._max_age_s = max_age_s
        self._clock = clock
        self._records: OrderedDict[str, CacheRecord[V]] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: str) -> V | None:
        """Return the cached value, or None when absent or expired."""
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return None
            if self._clock() - record.inserted_at > self._max_age_s:
                del self._records[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            self._records.move_to_end(key)
            return record.value

    def set(self, key: str, value: V) -> None:
        """Insert at the most-recently-used position, evicting one LRU entry if full."""
        with self._lock:
            if key in self._records:
                del self._records[key]
            elif len(self._records) >= self._max_size:
                evicted, _ = self._records.popitem(last=False)
                logger.debug("Cache full, evicted %s", evicted)
            self._records[key] = CacheRecord(value=value, inserted_at=self._clock())

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
