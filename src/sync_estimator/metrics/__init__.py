"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking sync estimation.
Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    best_known_block,
    cache_tip,
    estimate_seconds,
    generate_metrics,
    index_rate,
    indexer_tip,
    resets,
    sync_status,
    tick_duration,
    tick_failures,
    ticks_processed,
)

__all__ = [
    "REGISTRY",
    "best_known_block",
    "cache_tip",
    "estimate_seconds",
    "generate_metrics",
    "index_rate",
    "indexer_tip",
    "resets",
    "sync_status",
    "tick_duration",
    "tick_failures",
    "ticks_processed",
]
