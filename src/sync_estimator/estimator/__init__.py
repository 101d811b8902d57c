"""
Sync progress estimator.

What Is Estimated?
------------------
While a wallet syncs against a node, two local heights advance: the cache
tip (block data materialized locally) and the indexer tip (an auxiliary
index built on top). The node reports the network's best-known block.
From periodic samples of these numbers the estimator derives:

1. **Status**: NOT_STARTED, PENDING, SYNCING or COMPLETED
2. **Rate**: indexer throughput over a rolling window
3. **Estimate**: time until the indexer reaches the best-known block

How It Works
------------
- Progress ticks arrive from the indexer
- Each tick queries the node and becomes a new sample
- Samples older than the horizon, or from another node, are pruned
- A node change resets everything to NOT_STARTED
"""

from __future__ import annotations

__all__ = [
    # Main service
    "SyncEstimator",
    # Samples and status
    "Sample",
    "SyncStatus",
    # Building blocks
    "SampleWindow",
    "EstimationCache",
    "SamplePublisher",
    "Subscriber",
    "Clock",
    "Debouncer",
    # Classification
    "TickObservation",
    "classify",
    "is_all_cached",
    "is_best_known_tip_stable",
    "status_for_cached_tip",
    "average_index_rate",
    "estimate_remaining_ms",
    # Events
    "ProgressTick",
    "NodeChangedEvent",
    "EstimatorEvent",
    "EstimatorEventSource",
    "JsonLinesEventSource",
    "TickParseError",
    # Node selection
    "ActiveNodeProvider",
    "NodeSelector",
    # Configuration
    "EstimatorConfig",
    "DEFAULT_CONFIG",
    "SAMPLE_HORIZON_MS",
    "INDEXER_TIP_DIFF_THRESHOLD",
    "CACHE_DIFF_THRESHOLD",
    "BEST_KNOWN_DIFF_THRESHOLD",
    "PENDING_TIP_AGE_MS",
    "MAX_TIP_BLOCK_DELAY_MS",
    "NODE_CHANGE_DEBOUNCE_SECONDS",
]

from .cache import EstimationCache
from .classifier import (
    TickObservation,
    classify,
    is_all_cached,
    is_best_known_tip_stable,
    status_for_cached_tip,
)
from .clock import Clock
from .config import (
    BEST_KNOWN_DIFF_THRESHOLD,
    CACHE_DIFF_THRESHOLD,
    DEFAULT_CONFIG,
    INDEXER_TIP_DIFF_THRESHOLD,
    MAX_TIP_BLOCK_DELAY_MS,
    NODE_CHANGE_DEBOUNCE_SECONDS,
    PENDING_TIP_AGE_MS,
    SAMPLE_HORIZON_MS,
    EstimatorConfig,
)
from .debounce import Debouncer
from .events import (
    EstimatorEvent,
    EstimatorEventSource,
    JsonLinesEventSource,
    NodeChangedEvent,
    ProgressTick,
    TickParseError,
)
from .nodes import ActiveNodeProvider, NodeSelector
from .publisher import SamplePublisher, Subscriber
from .rate import average_index_rate, estimate_remaining_ms
from .sample import Sample
from .service import SyncEstimator
from .states import SyncStatus
from .window import SampleWindow
