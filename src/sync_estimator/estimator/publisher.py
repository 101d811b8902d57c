"""
Sample publication.

Subscribers register a callback and receive every newly computed sample,
including the bootstrap sample published on node reset.

Delivery is synchronous and ordered: samples arrive in publication order,
and within one publication subscribers are called in registration order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .sample import Sample

logger = logging.getLogger(__name__)

Subscriber = Callable[[Sample], None]
"""Callback invoked with each published sample."""


@dataclass(slots=True)
class SamplePublisher:
    """Broadcasts samples to registered subscribers."""

    _subscribers: list[Subscriber] = field(default_factory=list)
    """Registered callbacks in registration order."""

    _published: int = field(default=0, repr=False)
    """Count of samples published."""

    @property
    def subscriber_count(self) -> int:
        """Number of registered subscribers."""
        return len(self._subscribers)

    @property
    def published(self) -> int:
        """Total samples published since creation."""
        return self._published

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback.

        Args:
            callback: Called with every subsequently published sample.

        Returns:
            A function that unsubscribes this callback when called.
        """
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove a callback. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, sample: Sample) -> None:
        """
        Deliver a sample to every subscriber.

        The sample is already committed to the window when this runs, so a
        failing subscriber is logged and skipped rather than aborting the
        publication for everyone else.
        """
        self._published += 1

        # Snapshot: a callback may unsubscribe itself while being called.
        for callback in list(self._subscribers):
            try:
                callback(sample)
            except Exception:
                logger.exception("Sample subscriber %r failed", callback)
