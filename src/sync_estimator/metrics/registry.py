"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the sync estimator.
Exposes metrics in Prometheus text format via the /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for sync estimator metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Sync Progress
# -----------------------------------------------------------------------------

sync_status = Gauge(
    "sync_status",
    "Current sync status (0=not started, 1=pending, 2=syncing, 3=completed)",
    registry=REGISTRY,
)

indexer_tip = Gauge(
    "sync_indexer_tip",
    "Latest indexer tip height",
    registry=REGISTRY,
)

cache_tip = Gauge(
    "sync_cache_tip",
    "Latest cache tip height",
    registry=REGISTRY,
)

best_known_block = Gauge(
    "sync_best_known_block",
    "Best-known block height reported by the node",
    registry=REGISTRY,
)

index_rate = Gauge(
    "sync_index_rate",
    "Indexer throughput in blocks per second (NaN when unknown)",
    registry=REGISTRY,
)

estimate_seconds = Gauge(
    "sync_estimate_seconds",
    "Estimated seconds until the indexer catches up (NaN when unknown)",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Event Handling
# -----------------------------------------------------------------------------

ticks_processed = Counter(
    "sync_ticks_total",
    "Progress ticks that produced a sample",
    registry=REGISTRY,
)

tick_failures = Counter(
    "sync_tick_failures_total",
    "Progress ticks that failed or were discarded",
    ["reason"],
    registry=REGISTRY,
)

resets = Counter(
    "sync_resets_total",
    "Sample window resets caused by node changes",
    registry=REGISTRY,
)

tick_duration = Histogram(
    "sync_tick_duration_seconds",
    "Progress tick handling duration, including node queries",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 10.0),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
