"""Tests for the Prometheus metrics registry."""

from __future__ import annotations

import math

from sync_estimator.metrics import (
    REGISTRY,
    estimate_seconds,
    generate_metrics,
    resets,
    sync_status,
    tick_duration,
    tick_failures,
)


class TestMetricTypes:
    """Tests for metric type behavior."""

    def test_counter_increments_correctly(self) -> None:
        """Counter metrics increment by one on each call."""
        initial = resets._value.get()
        resets.inc()
        assert resets._value.get() == initial + 1.0

    def test_labelled_counter(self) -> None:
        """Failure counters are tracked per reason."""
        child = tick_failures.labels(reason="rpc")
        initial = child._value.get()
        child.inc()
        assert child._value.get() == initial + 1.0

    def test_gauge_accepts_nan(self) -> None:
        """Unknown estimates are exported as NaN."""
        estimate_seconds.set(math.nan)
        assert math.isnan(estimate_seconds._value.get())

    def test_histogram_observes_values(self) -> None:
        """Histogram metrics record observations."""
        initial_samples = list(tick_duration.collect())[0].samples
        initial_count = next(s.value for s in initial_samples if s.name.endswith("_count"))

        tick_duration.observe(0.05)

        new_samples = list(tick_duration.collect())[0].samples
        new_count = next(s.value for s in new_samples if s.name.endswith("_count"))
        assert new_count == initial_count + 1


class TestMetricExport:
    """Tests for the Prometheus text output."""

    def test_contains_all_metric_names(self) -> None:
        """Every sync metric appears in the exposition."""
        output = generate_metrics().decode()

        for name in (
            "sync_status",
            "sync_indexer_tip",
            "sync_cache_tip",
            "sync_best_known_block",
            "sync_index_rate",
            "sync_estimate_seconds",
            "sync_ticks_total",
            "sync_tick_failures_total",
            "sync_resets_total",
            "sync_tick_duration_seconds",
        ):
            assert name in output

    def test_gauge_value_is_exported(self) -> None:
        """Gauge values are visible in the text output."""
        sync_status.set(3)
        assert "sync_status 3.0" in generate_metrics().decode()

    def test_dedicated_registry(self) -> None:
        """Default process collectors are not registered."""
        assert "process_cpu_seconds_total" not in generate_metrics().decode()
        assert REGISTRY is not None
