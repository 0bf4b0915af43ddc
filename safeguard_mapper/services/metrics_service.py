"""
Performance Metrics — request counts, error rate and rolling execution
times per operation.  A summary line is logged at most once per
stats interval.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Callable, Iterator

from safeguard_mapper.models.schemas import MetricsSnapshot, OperationStats

logger = logging.getLogger(__name__)


class PerformanceMetrics:
    """Thread-safe in-process counters for MappingService operations."""

    def __init__(
        self,
        window: int = 100,
        stats_log_interval_seconds: float = 5 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window = window
        self.stats_log_interval_seconds = stats_log_interval_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._started = clock()
        self._last_stats_log = self._started
        self._total_requests = 0
        self._error_count = 0
        self._request_counts: dict[str, int] = {}
        self._execution_times: dict[str, deque[float]] = {}

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Time a block; exceptions are counted as errors and re-raised."""
        start = self._clock()
        try:
            yield
        except Exception:
            self.record(f"{operation}_error", (self._clock() - start) * 1000, error=True)
            raise
        self.record(operation, (self._clock() - start) * 1000)

    def record(self, operation: str, duration_ms: float, error: bool = False) -> None:
        with self._lock:
            self._total_requests += 1
            if error:
                self._error_count += 1
            self._request_counts[operation] = self._request_counts.get(operation, 0) + 1
            times = self._execution_times.setdefault(operation, deque(maxlen=self.window))
            times.append(duration_ms)

            due = self._clock() - self._last_stats_log >= self.stats_log_interval_seconds
            if due:
                self._last_stats_log = self._clock()

        if due:
            self.log_stats()

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            total = self._total_requests
            operations = {
                name: OperationStats(
                    requests=self._request_counts.get(name, 0),
                    average_ms=round(sum(times) / len(times), 3) if times else 0.0,
                    samples=len(times),
                )
                for name, times in self._execution_times.items()
            }
            return MetricsSnapshot(
                uptime_seconds=round(self._clock() - self._started, 3),
                total_requests=total,
                error_count=self._error_count,
                error_rate=round(self._error_count / total * 100, 1) if total else 0.0,
                operations=operations,
            )

    def log_stats(self) -> None:
        snap = self.snapshot()
        logger.info(
            f"[PerformanceMetrics] Uptime: {round(snap.uptime_seconds)}s, "
            f"Requests: {snap.total_requests}, Error Rate: {snap.error_rate}%"
        )
        for name, stats in snap.operations.items():
            logger.info(f"[PerformanceMetrics] {name}: {round(stats.average_ms)}ms avg")
