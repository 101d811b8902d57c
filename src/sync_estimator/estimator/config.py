"""
Sync estimator configuration constants.

Thresholds for sampling, rate estimation and status classification.
All durations are in milliseconds unless the name says otherwise.
"""

from __future__ import annotations

from typing import Final

from pydantic import Field

from sync_estimator.types import StrictBaseModel

SAMPLE_HORIZON_MS: Final[int] = 60_000
"""Rolling window over which samples are retained for rate computation."""

INDEXER_TIP_DIFF_THRESHOLD: Final[int] = 50
"""Minimum indexer advance across the window before a rate is trusted."""

CACHE_DIFF_THRESHOLD: Final[int] = 5
"""Cache tip within this many blocks of the best-known block counts as fully cached."""

BEST_KNOWN_DIFF_THRESHOLD: Final[int] = 50
"""Best-known block movement below this is considered stable."""

PENDING_TIP_AGE_MS: Final[int] = 600_000
"""Node tip older than this (ten minutes) means the node itself is stuck."""

MAX_TIP_BLOCK_DELAY_MS: Final[int] = 180_000
"""Node tip at most this old (three minutes) counts as live."""

NODE_CHANGE_DEBOUNCE_SECONDS: Final[float] = 0.5
"""Bursts of node-change notifications within this window coalesce into one."""


class EstimatorConfig(StrictBaseModel):
    """
    Thresholds for a single estimator instance.

    Built once when the application is composed and handed to the estimator.
    Every value must be strictly positive.
    """

    sample_horizon_ms: int = Field(default=SAMPLE_HORIZON_MS, gt=0)
    """Rolling sample retention window."""

    indexer_tip_diff_threshold: int = Field(default=INDEXER_TIP_DIFF_THRESHOLD, gt=0)
    """Minimum indexer advance required for a rate."""

    cache_diff_threshold: int = Field(default=CACHE_DIFF_THRESHOLD, gt=0)
    """Remaining-to-cache distance below which everything is cached."""

    best_known_diff_threshold: int = Field(default=BEST_KNOWN_DIFF_THRESHOLD, gt=0)
    """Best-known movement below which the network tip is stable."""

    pending_tip_age_ms: int = Field(default=PENDING_TIP_AGE_MS, gt=0)
    """Tip age beyond which status is forced to pending."""

    max_tip_block_delay_ms: int = Field(default=MAX_TIP_BLOCK_DELAY_MS, gt=0)
    """Tip age up to which a cached node is completed."""


DEFAULT_CONFIG: Final = EstimatorConfig()
"""Configuration built from the module defaults."""
