"""
Estimation cache for polling consumers.

A UI polls far more often than progress ticks arrive. Handing back the
same sample reference between genuine changes keeps the displayed estimate
from flickering, while node switches and stale values still replace it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .sample import Sample
from .window import SampleWindow


@dataclass(slots=True)
class EstimationCache:
    """
    Debounced, change-detecting view of the newest sample.

    This is a staleness and identity guard, not a computation: callers
    always converge on the latest sample eventually.
    """

    _cached: Sample | None = None
    """Sample last handed to a consumer."""

    @property
    def cached(self) -> Sample | None:
        """The currently cached sample, without refreshing it."""
        return self._cached

    def current(self, window: SampleWindow, node_url: str, now: int) -> Sample | None:
        """
        Return the estimate a polling consumer should see.

        Args:
            window: The estimator's sample window.
            node_url: The currently active node.
            now: Current time in milliseconds.

        Returns:
            The cached sample, refreshed to the newest one when required.
            None only while the window is empty.
        """
        latest = window.latest

        # First read: adopt whatever is newest.
        if self._cached is None:
            self._cached = latest
            return self._cached

        # No cache progress since the previous tick: refresh to keep the
        # timestamp current even though the numbers are the same.
        previous = window.previous
        if (
            previous is not None
            and latest is not None
            and previous.cache_tip_number == latest.cache_tip_number
        ):
            self._cached = latest
            return self._cached

        # The cached value belongs to another node or has aged out.
        if (
            self._cached.node_url != node_url
            or self._cached.timestamp + window.horizon_ms <= now
        ):
            self._cached = latest

        return self._cached

    def clear(self) -> None:
        """Forget the cached sample."""
        self._cached = None
