"""Report generation timing collector.

A ``MetricsCollector`` is created explicitly (one per server process, see the
application lifespan) and handed to whoever records timings. There is no
module-level instance.
"""

import logging
import math
import threading
from collections import deque

import numpy as np
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PerformanceSnapshot(BaseModel):
    """Point-in-time view of the collected samples."""

    average_time: float = Field(..., serialization_alias="averageTime")
    p95_time: float = Field(..., serialization_alias="p95Time")
    p99_time: float = Field(..., serialization_alias="p99Time")
    total_requests: int = Field(..., serialization_alias="totalRequests")
    success_rate: float = Field(..., serialization_alias="successRate")


class ThresholdCheck(BaseModel):
    within_p95: bool = Field(..., serialization_alias="withinP95")
    within_p99: bool = Field(..., serialization_alias="withinP99")


class MetricsCollector:
    """Collects generation times and reports averages and tail latencies."""

    def __init__(
        self,
        max_samples: int = 1000,
        p95_threshold_ms: float = 5000.0,
        p99_threshold_ms: float = 8000.0,
    ):
        if max_samples <= 0:
            raise ValueError("max_samples must be positive")
        self.max_samples = max_samples
        self.p95_threshold_ms = p95_threshold_ms
        self.p99_threshold_ms = p99_threshold_ms
        self._lock = threading.Lock()
        self._times: deque[float] = deque(maxlen=max_samples)
        self._outcomes: deque[bool] = deque(maxlen=max_samples)

    def record(self, duration_ms: float, success: bool = True) -> None:
        """Record one generation. Failed runs count toward the success rate only."""
        if duration_ms < 0 or math.isnan(duration_ms):
            raise ValueError(f"duration_ms must be a non-negative number, got {duration_ms}")
        with self._lock:
            self._outcomes.append(success)
            if success:
                self._times.append(float(duration_ms))
        logger.debug(f"[METRICS] Recorded {duration_ms:.1f}ms (success={success})")

    def reset(self) -> None:
        """Drop all samples."""
        with self._lock:
            self._times.clear()
            self._outcomes.clear()
        logger.info("[METRICS] Collector reset")

    def snapshot(self) -> PerformanceSnapshot:
        """Compute current statistics."""
        with self._lock:
            times = np.array(self._times, dtype=float)
            outcomes = list(self._outcomes)

        if times.size:
            ordered = np.sort(times)
            average = float(times.mean())
            p95 = float(ordered[min(int(ordered.size * 0.95), ordered.size - 1)])
            p99 = float(ordered[min(int(ordered.size * 0.99), ordered.size - 1)])
        else:
            average = p95 = p99 = 0.0

        success_rate = 100.0 * sum(outcomes) / len(outcomes) if outcomes else 100.0

        return PerformanceSnapshot(
            average_time=average,
            p95_time=p95,
            p99_time=p99,
            total_requests=len(outcomes),
            success_rate=success_rate,
        )

    def check_thresholds(self) -> ThresholdCheck:
        """Compare tail latencies with the configured thresholds."""
        snapshot = self.snapshot()
        return ThresholdCheck(
            within_p95=not snapshot.p95_time or snapshot.p95_time <= self.p95_threshold_ms,
            within_p99=not snapshot.p99_time or snapshot.p99_time <= self.p99_threshold_ms,
        )

    def detailed_report(self) -> str:
        """Plain text summary for logs."""
        snapshot = self.snapshot()
        thresholds = self.check_thresholds()
        p95_mark = "OK" if thresholds.within_p95 else "OVER"
        p99_mark = "OK" if thresholds.within_p99 else "OVER"
        return (
            "Performance Report:\n"
            f"    - Average: {snapshot.average_time:.1f}ms\n"
            f"    - P95: {snapshot.p95_time:.1f}ms (target <= {self.p95_threshold_ms:.0f}ms, {p95_mark})\n"
            f"    - P99: {snapshot.p99_time:.1f}ms (target <= {self.p99_threshold_ms:.0f}ms, {p99_mark})\n"
            f"    - Total Requests: {snapshot.total_requests}\n"
            f"    - Success Rate: {snapshot.success_rate:.1f}%"
        )
