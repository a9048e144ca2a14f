"""Unit tests for the report timing collector."""

import threading

import pytest

from backend.app.services.metrics import MetricsCollector


class TestMetricsCollector:
    """Test cases for MetricsCollector."""

    def test_empty_snapshot(self):
        """Test an empty collector reports zeros and full success."""
        snapshot = MetricsCollector().snapshot()

        assert snapshot.average_time == 0
        assert snapshot.p95_time == 0
        assert snapshot.total_requests == 0
        assert snapshot.success_rate == 100.0

    def test_percentiles_use_floor_index(self):
        """Test p95/p99 pick the sorted sample at floor(n * q)."""
        collector = MetricsCollector()
        for ms in range(100, 0, -1):  # 100..1 in reverse to exercise sorting
            collector.record(float(ms))

        snapshot = collector.snapshot()
        assert snapshot.p95_time == 96.0  # sorted[95]
        assert snapshot.p99_time == 100.0  # sorted[99]
        assert snapshot.average_time == pytest.approx(50.5)

    def test_small_sample_percentiles(self):
        """Test the index is clamped for tiny samples."""
        collector = MetricsCollector()
        collector.record(10.0)
        collector.record(30.0)

        snapshot = collector.snapshot()
        assert snapshot.p95_time == 30.0
        assert snapshot.p99_time == 30.0

    def test_failures_count_toward_success_rate_only(self):
        """Test failed runs lower the success rate but not the averages."""
        collector = MetricsCollector()
        collector.record(100.0)
        collector.record(300.0)
        collector.record(5000.0, success=False)
        collector.record(9000.0, success=False)

        snapshot = collector.snapshot()
        assert snapshot.total_requests == 4
        assert snapshot.success_rate == 50.0
        assert snapshot.average_time == 200.0

    def test_max_samples_drops_oldest(self):
        """Test only the newest max_samples are kept."""
        collector = MetricsCollector(max_samples=3)
        for ms in [1000.0, 1.0, 2.0, 3.0]:
            collector.record(ms)

        snapshot = collector.snapshot()
        assert snapshot.total_requests == 3
        assert snapshot.average_time == 2.0

    @pytest.mark.parametrize("bad", [-1.0, float("nan")])
    def test_invalid_duration_rejected(self, bad):
        """Test negative and NaN durations are rejected."""
        with pytest.raises(ValueError):
            MetricsCollector().record(bad)

    def test_invalid_max_samples(self):
        """Test the sample bound must be positive."""
        with pytest.raises(ValueError):
            MetricsCollector(max_samples=0)

    def test_thresholds(self):
        """Test tail latencies are compared with the configured thresholds."""
        collector = MetricsCollector(p95_threshold_ms=100, p99_threshold_ms=200)
        assert collector.check_thresholds().within_p95

        collector.record(150.0)
        check = collector.check_thresholds()
        assert not check.within_p95
        assert check.within_p99
        assert check.model_dump(by_alias=True) == {"withinP95": False, "withinP99": True}

    def test_reset(self):
        """Test reset drops all samples."""
        collector = MetricsCollector()
        collector.record(10.0)
        collector.reset()
        assert collector.snapshot().total_requests == 0

    def test_snapshot_wire_names(self):
        """Test snapshot serializes with camelCase keys."""
        collector = MetricsCollector()
        collector.record(10.0)
        assert set(collector.snapshot().model_dump(by_alias=True)) == {
            "averageTime",
            "p95Time",
            "p99Time",
            "totalRequests",
            "successRate",
        }

    def test_detailed_report(self):
        """Test the text report lists every figure."""
        collector = MetricsCollector(p95_threshold_ms=100, p99_threshold_ms=200)
        collector.record(150.0)

        report = collector.detailed_report()
        assert "P95: 150.0ms" in report
        assert "OVER" in report
        assert "Success Rate: 100.0%" in report

    def test_concurrent_recording(self):
        """Test recording from several threads loses no samples."""
        collector = MetricsCollector(max_samples=10_000)

        def worker():
            for _ in range(500):
                collector.record(1.0)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert collector.snapshot().total_requests == 4000
