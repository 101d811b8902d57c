"""Tests for the estimation cache."""

from __future__ import annotations

from sync_estimator.estimator import EstimationCache, Sample, SampleWindow
from tests.sync_estimator.helpers import BASE_MS, NODE_A, NODE_B, make_sample


def _window_with(*samples_and_times: tuple[Sample, int]) -> SampleWindow:
    window = SampleWindow()
    for sample, now in samples_and_times:
        window.push(sample, now)
    return window


class TestEstimationCache:
    """Tests for the debounced estimate handed to polling consumers."""

    def test_empty_window(self) -> None:
        """Nothing to report while the window is empty."""
        cache = EstimationCache()
        assert cache.current(SampleWindow(), NODE_A, BASE_MS) is None

    def test_first_read_adopts_latest(self) -> None:
        """The first read caches the newest sample."""
        sample = make_sample(timestamp=BASE_MS)
        window = _window_with((sample, BASE_MS))
        cache = EstimationCache()

        assert cache.current(window, NODE_A, BASE_MS) is sample
        assert cache.cached is sample

    def test_same_reference_between_changes(self) -> None:
        """Repeated reads without a genuine change return the same object."""
        first = make_sample(timestamp=BASE_MS, cache_tip=90)
        window = _window_with((first, BASE_MS))
        cache = EstimationCache()
        cache.current(window, NODE_A, BASE_MS)

        # Cache progress advances; the cached value is still fresh.
        second = make_sample(timestamp=BASE_MS + 5_000, cache_tip=95)
        window.push(second, BASE_MS + 5_000)

        assert cache.current(window, NODE_A, BASE_MS + 5_000) is first
        assert cache.current(window, NODE_A, BASE_MS + 6_000) is first

    def test_refreshes_when_cache_tip_stalls(self) -> None:
        """Two newest samples with equal cache tips refresh to the latest."""
        first = make_sample(timestamp=BASE_MS, cache_tip=90)
        window = _window_with((first, BASE_MS))
        cache = EstimationCache()
        cache.current(window, NODE_A, BASE_MS)

        second = make_sample(timestamp=BASE_MS + 5_000, cache_tip=90)
        window.push(second, BASE_MS + 5_000)

        assert cache.current(window, NODE_A, BASE_MS + 5_000) is second

    def test_refreshes_when_stale(self) -> None:
        """A cached value older than the horizon is replaced."""
        first = make_sample(timestamp=BASE_MS, cache_tip=90)
        window = _window_with((first, BASE_MS))
        cache = EstimationCache()
        cache.current(window, NODE_A, BASE_MS)

        second = make_sample(timestamp=BASE_MS + 30_000, cache_tip=95)
        window.push(second, BASE_MS + 30_000)
        third = make_sample(timestamp=BASE_MS + 59_000, cache_tip=99)
        window.push(third, BASE_MS + 59_000)

        assert cache.current(window, NODE_A, BASE_MS + 59_000) is first
        assert cache.current(window, NODE_A, BASE_MS + 60_000) is third

    def test_refreshes_after_node_switch(self) -> None:
        """A cached value from another node is replaced immediately."""
        first = make_sample(node_url=NODE_A, timestamp=BASE_MS)
        window = _window_with((first, BASE_MS))
        cache = EstimationCache()
        cache.current(window, NODE_A, BASE_MS)

        bootstrap = window.reset(NODE_B)

        assert cache.current(window, NODE_B, BASE_MS + 1_000) is bootstrap

    def test_clear(self) -> None:
        """Clearing forgets the cached sample."""
        sample = make_sample(timestamp=BASE_MS)
        window = _window_with((sample, BASE_MS))
        cache = EstimationCache()
        cache.current(window, NODE_A, BASE_MS)

        cache.clear()

        assert cache.cached is None
