"""
TTL Cache — small in-memory cache with expiry and a size bound.

Entries live for `ttl_seconds`.  A cleanup sweep runs on access when the
cleanup interval has elapsed or the cache has reached `max_size`; it drops
expired entries and then evicts the oldest remaining entries until the
cache is back within bounds.  All access is serialized with a lock so the
cache can be shared between request threads.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


@dataclass
class CacheStats:
    size: int
    max_size: int
    ttl_seconds: float
    last_cleanup: float
    hits: int
    misses: int
    evictions: int


class TTLCache(Generic[T]):
    """Keyed cache with per-entry TTL and oldest-first eviction."""

    def __init__(
        self,
        ttl_seconds: float = 5 * 60,
        max_size: int = 1000,
        cleanup_interval_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    # ── Access ───────────────────────────────────────────

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None when absent or expired."""
        with self._lock:
            now = self._clock()
            self._cleanup_if_needed(now)

            entry = self._entries.get(key)
            if entry is not None and now - entry.timestamp < self.ttl_seconds:
                self._hits += 1
                return entry.data

            self._misses += 1
            return None

    def set(self, key: str, value: T) -> None:
        with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(data=value, timestamp=now)
            if len(self._entries) > self.max_size:
                self._sweep(now)

    # ── Maintenance ──────────────────────────────────────

    def cleanup(self) -> int:
        """Force a sweep. Returns the number of entries removed."""
        with self._lock:
            return self._sweep(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._last_cleanup = self._clock()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_size=self.max_size,
                ttl_seconds=self.ttl_seconds,
                last_cleanup=self._last_cleanup,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    # ── Internal (caller holds the lock) ─────────────────

    def _cleanup_if_needed(self, now: float) -> None:
        if (
            now - self._last_cleanup < self.cleanup_interval_seconds
            and len(self._entries) < self.max_size
        ):
            return
        self._sweep(now)

    def _sweep(self, now: float) -> int:
        expired = [
            key for key, entry in self._entries.items()
            if now - entry.timestamp >= self.ttl_seconds
        ]
        for key in expired:
            del self._entries[key]

        evicted = 0
        overflow = len(self._entries) - self.max_size
        if overflow > 0:
            oldest = sorted(self._entries.items(), key=lambda item: item[1].timestamp)
            for key, _ in oldest[:overflow]:
                del self._entries[key]
            evicted = overflow

        self._evictions += len(expired) + evicted
        self._last_cleanup = now

        removed = len(expired) + evicted
        if removed:
            logger.debug(f"[TTLCache] Swept {len(expired)} expired, {evicted} evicted; {len(self._entries)} remain")
        return removed
