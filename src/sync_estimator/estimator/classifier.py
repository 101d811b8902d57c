"""
Status classification.

Turns one raw observation plus the retained window into a classified
sample. This module is pure: no I/O, no clock reads, no mutation.

Decision Table
--------------
::

    best-known tip stable?
      no  -> SYNCING, no rate, no estimate
      yes -> all cached?
               yes -> tip age <= max delay   -> COMPLETED
                      tip age >  ten minutes -> PENDING (checked last, wins)
                      otherwise              -> SYNCING (ambiguous middle band)
               no  -> SYNCING, plus rate and estimate when a rate exists

A fully cached sample never carries a numeric estimate.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sync_estimator.rpc import BestKnownBlock, TipHeader

from .config import DEFAULT_CONFIG, EstimatorConfig
from .rate import average_index_rate, estimate_remaining_ms
from .sample import Sample
from .states import SyncStatus


@dataclass(frozen=True, slots=True)
class TickObservation:
    """Everything gathered for one progress tick before classification."""

    node_url: str
    """Node the queries were issued against."""

    now: int
    """Time the tick was received, in milliseconds."""

    indexer_tip_number: int
    """Parsed indexer tip from the tick."""

    cache_tip_number: int
    """Parsed cache tip from the tick."""

    tip_header: TipHeader
    """The node's own tip, used for tip age."""

    best_known: BestKnownBlock
    """The network's best-known block, as reported by the node."""

    @property
    def tip_age(self) -> int:
        """Milliseconds since the node's tip block was produced."""
        return self.now - int(self.tip_header.timestamp)


def is_best_known_tip_stable(
    best_known_number: int,
    reference: Sample | None,
    threshold: int,
) -> bool:
    """
    Check that the network tip has stopped jumping.

    While a node is starting up, its best-known block leaps forward as it
    learns about peers. ETA math against a moving target is noise.

    Args:
        best_known_number: Best-known height just reported.
        reference: Oldest fresh sample for the active node, if any.
        threshold: Movement at or above which the tip is unstable.
    """
    if reference is None:
        return False
    return best_known_number - reference.best_known_block_number < threshold


def is_all_cached(best_known_number: int, cache_tip_number: int, threshold: int) -> bool:
    """Check that the cache tip is within `threshold` blocks of the best-known block."""
    return best_known_number - cache_tip_number < threshold


def status_for_cached_tip(tip_age: int, config: EstimatorConfig) -> SyncStatus:
    """
    Classify a fully cached node by how old its own tip is.

    The pending check runs after the completed check and overrides it.
    """
    status = SyncStatus.SYNCING
    if tip_age <= config.max_tip_block_delay_ms:
        status = SyncStatus.COMPLETED
    if tip_age > config.pending_tip_age_ms:
        status = SyncStatus.PENDING
    return status


def classify(
    observation: TickObservation,
    samples: Sequence[Sample],
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> Sample:
    """
    Build the classified sample for one tick.

    Args:
        observation: Parsed tick plus node query results.
        samples: Fresh samples for the active node, oldest first. Not mutated.
        config: Thresholds.

    Returns:
        A new sample carrying status and, when available, rate and estimate.
    """
    best_known_number = int(observation.best_known.number)
    reference = samples[0] if samples else None

    status = SyncStatus.SYNCING
    index_rate: float | None = None
    estimate: int | None = None

    if is_best_known_tip_stable(best_known_number, reference, config.best_known_diff_threshold):
        if is_all_cached(
            best_known_number, observation.cache_tip_number, config.cache_diff_threshold
        ):
            status = status_for_cached_tip(observation.tip_age, config)
        else:
            index_rate = average_index_rate(
                samples,
                observation.indexer_tip_number,
                observation.now,
                config.indexer_tip_diff_threshold,
            )
            if index_rate is not None:
                remaining = best_known_number - observation.indexer_tip_number
                estimate = estimate_remaining_ms(remaining, index_rate)

    return Sample(
        node_url=observation.node_url,
        timestamp=observation.now,
        indexer_tip_number=observation.indexer_tip_number,
        cache_tip_number=observation.cache_tip_number,
        best_known_block_number=best_known_number,
        best_known_block_timestamp=int(observation.best_known.timestamp),
        index_rate=index_rate,
        estimate=estimate,
        status=status,
    )
