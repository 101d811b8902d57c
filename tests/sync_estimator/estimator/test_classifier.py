"""Tests for status classification."""

from __future__ import annotations

import pytest

from sync_estimator.estimator import (
    DEFAULT_CONFIG,
    EstimatorConfig,
    SyncStatus,
    classify,
    is_all_cached,
    is_best_known_tip_stable,
    status_for_cached_tip,
)
from tests.sync_estimator.helpers import BASE_MS, NODE_A, make_observation, make_sample


class TestBestKnownTipStable:
    """Tests for the moving-target guard."""

    def test_no_reference(self) -> None:
        """Without a prior sample the network tip is never trusted."""
        assert not is_best_known_tip_stable(1000, None, 50)

    def test_small_movement_is_stable(self) -> None:
        """Movement below the threshold is stable."""
        reference = make_sample(best_known=1000)
        assert is_best_known_tip_stable(1049, reference, 50)

    def test_threshold_movement_is_unstable(self) -> None:
        """Movement of exactly the threshold is unstable."""
        reference = make_sample(best_known=1000)
        assert not is_best_known_tip_stable(1050, reference, 50)

    def test_backwards_movement_is_stable(self) -> None:
        """A best-known block that moves back is not a leap forward."""
        reference = make_sample(best_known=1000)
        assert is_best_known_tip_stable(900, reference, 50)


class TestAllCached:
    """Tests for the cache completeness check."""

    def test_within_threshold(self) -> None:
        """Fewer than the threshold blocks left means all cached."""
        assert is_all_cached(1000, 996, 5)

    def test_at_threshold(self) -> None:
        """Exactly the threshold blocks left is not all cached."""
        assert not is_all_cached(1000, 995, 5)

    def test_cache_ahead(self) -> None:
        """A cache ahead of the best-known block is all cached."""
        assert is_all_cached(1000, 1010, 5)


class TestStatusForCachedTip:
    """Tests for tip-age bands of a fully cached node."""

    @pytest.mark.parametrize(
        ("tip_age", "expected"),
        [
            (0, SyncStatus.COMPLETED),
            (60_000, SyncStatus.COMPLETED),
            (180_000, SyncStatus.COMPLETED),
            (180_001, SyncStatus.SYNCING),
            (600_000, SyncStatus.SYNCING),
            (600_001, SyncStatus.PENDING),
            (700_000, SyncStatus.PENDING),
        ],
    )
    def test_bands(self, tip_age: int, expected: SyncStatus) -> None:
        """Live tips complete, stuck tips pend, the middle band keeps syncing."""
        assert status_for_cached_tip(tip_age, DEFAULT_CONFIG) is expected

    def test_pending_wins_when_bands_overlap(self) -> None:
        """The pending check runs last and overrides completed."""
        config = EstimatorConfig(max_tip_block_delay_ms=900_000, pending_tip_age_ms=600_000)
        assert status_for_cached_tip(700_000, config) is SyncStatus.PENDING


class TestClassify:
    """Tests for building a classified sample from a tick."""

    def test_first_tick_is_syncing_without_estimate(self) -> None:
        """With no prior sample the tip is unstable: SYNCING, no rate."""
        observation = make_observation(now=BASE_MS, indexer_tip=100, cache_tip=90, best_known=1000)

        sample = classify(observation, [])

        assert sample.status is SyncStatus.SYNCING
        assert sample.index_rate is None
        assert sample.estimate is None
        assert sample.node_url == NODE_A
        assert sample.timestamp == BASE_MS
        assert sample.indexer_tip_number == 100
        assert sample.cache_tip_number == 90
        assert sample.best_known_block_number == 1000
        assert sample.best_known_block_timestamp == BASE_MS

    def test_worked_example(self) -> None:
        """Two ticks ten seconds apart give rate 0.006 and about 140833 ms."""
        first = make_sample(timestamp=BASE_MS, indexer_tip=100, cache_tip=90, best_known=1000)
        observation = make_observation(
            now=BASE_MS + 10_000, indexer_tip=160, cache_tip=95, best_known=1005
        )

        sample = classify(observation, [first])

        assert sample.status is SyncStatus.SYNCING
        assert sample.index_rate == pytest.approx(0.006)
        assert sample.estimate == 140_833
        assert sample.cache_rate is None

    def test_unstable_tip_suppresses_estimate(self) -> None:
        """A leaping network tip yields SYNCING without a rate."""
        first = make_sample(timestamp=BASE_MS, indexer_tip=100, best_known=1000)
        observation = make_observation(
            now=BASE_MS + 10_000, indexer_tip=160, cache_tip=95, best_known=1100
        )

        sample = classify(observation, [first])

        assert sample.status is SyncStatus.SYNCING
        assert sample.index_rate is None
        assert sample.estimate is None

    def test_slow_progress_has_no_estimate(self) -> None:
        """Below the indexer threshold the sample is SYNCING without a rate."""
        first = make_sample(timestamp=BASE_MS, indexer_tip=100, best_known=1000)
        observation = make_observation(
            now=BASE_MS + 10_000, indexer_tip=120, cache_tip=95, best_known=1005
        )

        sample = classify(observation, [first])

        assert sample.status is SyncStatus.SYNCING
        assert sample.estimate is None

    def test_completed_with_live_tip(self) -> None:
        """All cached with a minute-old tip is COMPLETED."""
        now = BASE_MS + 10_000
        first = make_sample(timestamp=BASE_MS, best_known=1000)
        observation = make_observation(
            now=now, indexer_tip=1000, cache_tip=998, best_known=1000, tip_timestamp=now - 60_000
        )

        sample = classify(observation, [first])

        assert sample.status is SyncStatus.COMPLETED
        assert sample.estimate is None
        assert sample.index_rate is None

    def test_pending_with_stuck_tip(self) -> None:
        """All cached with a tip older than ten minutes is PENDING."""
        now = BASE_MS + 10_000
        first = make_sample(timestamp=BASE_MS, best_known=1000)
        observation = make_observation(
            now=now, indexer_tip=1000, cache_tip=998, best_known=1000, tip_timestamp=now - 700_000
        )

        sample = classify(observation, [first])

        assert sample.status is SyncStatus.PENDING
        assert sample.estimate is None

    def test_middle_band_stays_syncing_without_estimate(self) -> None:
        """All cached with a tip between three and ten minutes old stays SYNCING."""
        now = BASE_MS + 10_000
        first = make_sample(timestamp=BASE_MS, indexer_tip=0, best_known=1000)
        observation = make_observation(
            now=now, indexer_tip=500, cache_tip=998, best_known=1000, tip_timestamp=now - 300_000
        )

        sample = classify(observation, [first])

        assert sample.status is SyncStatus.SYNCING
        assert sample.estimate is None
        assert sample.index_rate is None

    def test_does_not_mutate_samples(self) -> None:
        """Classification is pure."""
        samples = [make_sample(timestamp=BASE_MS)]
        snapshot = list(samples)
        observation = make_observation(
            now=BASE_MS + 10_000, indexer_tip=160, cache_tip=95, best_known=1005
        )

        classify(observation, samples)

        assert samples == snapshot
