"""
Progress samples.

A sample is one observation of sync progress at a point in time. Samples
are immutable: every tick creates a new one, never edits an older one.
"""

from __future__ import annotations

from pydantic import Field

from sync_estimator.types import StrictBaseModel

from .states import SyncStatus


class Sample(StrictBaseModel):
    """
    Sync progress observed for one node at one instant.

    Serializes with camel case keys, which is the shape published to
    subscribers and served over the API.
    """

    node_url: str
    """Node the observation was made against."""

    timestamp: int
    """Wall-clock time of the observation, in milliseconds."""

    indexer_tip_number: int = Field(ge=0)
    """Local height up to which the auxiliary index has been built."""

    cache_tip_number: int = Field(ge=0)
    """Local height up to which block data has been cached."""

    best_known_block_number: int = Field(ge=0)
    """Highest height the node claims the network has reached."""

    best_known_block_timestamp: int = Field(ge=0)
    """Block timestamp of the best-known block, in milliseconds."""

    index_rate: float | None = None
    """Indexer throughput in heights per millisecond, when computable."""

    cache_rate: float | None = None
    """Reserved for a cache throughput estimate. Never populated."""

    estimate: int | None = None
    """Estimated milliseconds until the indexer reaches the best-known block."""

    status: SyncStatus = SyncStatus.SYNCING
    """Classified lifecycle status."""

    @classmethod
    def bootstrap(cls, node_url: str) -> Sample:
        """
        Create the zeroed sample that seeds a freshly reset window.

        Its timestamp is zero, so it never counts as fresh for rate math.
        It only anchors the status at NOT_STARTED until the first real tick.
        """
        return cls(
            node_url=node_url,
            timestamp=0,
            indexer_tip_number=0,
            cache_tip_number=0,
            best_known_block_number=0,
            best_known_block_timestamp=0,
            status=SyncStatus.NOT_STARTED,
        )

    def age(self, now: int) -> int:
        """Milliseconds elapsed between this sample and `now`."""
        return now - self.timestamp
