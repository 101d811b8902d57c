"""
Indexing rate calculation.

A secant-line estimator: the slope between the oldest retained sample and
the current observation. No smoothing, no filtering. It is undefined for
the first stretch of activity and whenever progress is too slow to clear
the threshold.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .config import INDEXER_TIP_DIFF_THRESHOLD
from .sample import Sample


def average_index_rate(
    samples: Sequence[Sample],
    current_indexer_tip: int,
    now: int,
    threshold: int = INDEXER_TIP_DIFF_THRESHOLD,
) -> float | None:
    """
    Average indexer throughput since the oldest sample.

    Args:
        samples: Fresh samples for the active node, oldest first.
        current_indexer_tip: Indexer tip of the observation being classified.
        now: Time of that observation, in milliseconds.
        threshold: Minimum indexer advance before a rate is trusted.

    Returns:
        Heights per millisecond, or None when there is no sample, too little
        progress, or no positive elapsed time.
    """
    if not samples:
        return None
    first = samples[0]

    advanced = current_indexer_tip - first.indexer_tip_number
    if advanced < threshold:
        return None

    # Clock skew or a same-millisecond tick. Undefined, not an error.
    elapsed = now - first.timestamp
    if elapsed <= 0:
        return None

    return advanced / elapsed


def estimate_remaining_ms(remaining: int, rate: float) -> int:
    """
    Milliseconds needed to cover `remaining` heights at `rate`.

    Halves round up, so 0.5 ms becomes 1 ms.
    """
    return math.floor(remaining / rate + 0.5)
