"""
Sample window for the active node.

Retains recent progress samples, pruned by a fixed time horizon.

How It Works
------------
There is no background pruning timer. Every push first re-filters the
window down to fresh samples for the pushed sample's node, then appends.
Pruning is therefore a pure function of "now", and the window heals itself
after a node switch or a long gap between ticks.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .config import SAMPLE_HORIZON_MS
from .sample import Sample


@dataclass(slots=True)
class SampleWindow:
    """
    Ordered samples, oldest first, scoped to one node at a time.

    The window is owned by the estimator. Nothing else mutates it.
    """

    horizon_ms: int = SAMPLE_HORIZON_MS
    """Maximum sample age retained, in milliseconds."""

    _samples: list[Sample] = field(default_factory=list)
    """Samples in insertion order."""

    def __len__(self) -> int:
        """Return the number of retained samples, fresh or not."""
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        """Iterate retained samples, oldest first."""
        return iter(self._samples)

    @property
    def latest(self) -> Sample | None:
        """Newest sample, or None if the window is empty."""
        return self._samples[-1] if self._samples else None

    @property
    def previous(self) -> Sample | None:
        """Second newest sample, or None if fewer than two are retained."""
        return self._samples[-2] if len(self._samples) > 1 else None

    def is_fresh(self, sample: Sample, now: int) -> bool:
        """Check if a sample is within the horizon at time `now`."""
        return sample.age(now) <= self.horizon_ms

    def samples_for(self, node_url: str, now: int) -> list[Sample]:
        """
        Select fresh samples belonging to a node.

        Pure filter: the window itself is left untouched.

        Args:
            node_url: The active node.
            now: Current time in milliseconds.

        Returns:
            Matching samples, oldest first.
        """
        return [s for s in self._samples if s.node_url == node_url and self.is_fresh(s, now)]

    def push(self, sample: Sample, now: int) -> None:
        """
        Append a sample after dropping stale and foreign ones.

        Args:
            sample: The newly classified sample. Its node is the active node.
            now: Current time in milliseconds, used for pruning.
        """
        self._samples = self.samples_for(sample.node_url, now)
        self._samples.append(sample)

    def reset(self, node_url: str) -> Sample:
        """
        Replace the window with a single bootstrap sample.

        Args:
            node_url: The newly active node.

        Returns:
            The bootstrap sample now held by the window.
        """
        bootstrap = Sample.bootstrap(node_url)
        self._samples = [bootstrap]
        return bootstrap
