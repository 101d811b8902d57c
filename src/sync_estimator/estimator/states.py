"""Sync status state machine."""

from __future__ import annotations

from enum import Enum


class SyncStatus(Enum):
    """
    Lifecycle states of overall synchronization.

    Unlike a driven state machine, the status is recomputed from scratch on
    every progress tick. The transition table below documents which jumps are
    expected so the estimator can flag surprising ones in its logs.

    State Machine Diagram
    ---------------------
    ::

        NOT_STARTED --> PENDING <--> SYNCING
                           |  ^       |  ^
                           v  |       v  |
                           COMPLETED --+

    The Lifecycle
    -------------
    1. **NOT_STARTED**: No samples yet, or the active node just changed
    2. **SYNCING**: Blocks are being cached; the network tip may still move
    3. **COMPLETED**: Cache caught up and the node's own tip is recent
    4. **PENDING**: Cache caught up but the node's tip is long stale

    Transitions
    -----------
    NOT_STARTED -> SYNCING | PENDING
        - Triggered when: The first tick after a reset is classified

    SYNCING <-> PENDING, SYNCING <-> COMPLETED, PENDING <-> COMPLETED
        - Triggered when: Cache progress or tip age crosses a threshold

    Any started state -> NOT_STARTED
        - Triggered when: The active node changes
    """

    NOT_STARTED = 0
    """No progress observed for the active node."""

    PENDING = 1
    """
    Everything the node knows is cached, but the node is behind.

    The node's own tip is older than ten minutes, so the node is not
    receiving new blocks. Claiming completion would be a lie.
    """

    SYNCING = 2
    """
    Actively catching up.

    Also the conservative default whenever the network tip is not trusted
    yet, or the node tip sits in the ambiguous middle age band.
    """

    COMPLETED = 3
    """
    Caught up with a live node.

    Not terminal: a moving chain tip can push the status back.
    """

    def can_transition_to(self, target: "SyncStatus") -> bool:
        """
        Check if moving to target is an expected lifecycle step.

        Args:
            target: The newly classified status.

        Returns:
            True if the transition appears in the lifecycle graph.
        """
        return target in _VALID_TRANSITIONS.get(self, set())

    @property
    def is_started(self) -> bool:
        """Check if any progress has been observed."""
        return self != SyncStatus.NOT_STARTED

    @property
    def is_completed(self) -> bool:
        """Check if synchronization is complete."""
        return self == SyncStatus.COMPLETED


_VALID_TRANSITIONS: dict[SyncStatus, set[SyncStatus]] = {
    SyncStatus.NOT_STARTED: {SyncStatus.PENDING, SyncStatus.SYNCING},
    SyncStatus.SYNCING: {SyncStatus.PENDING, SyncStatus.COMPLETED, SyncStatus.NOT_STARTED},
    SyncStatus.PENDING: {SyncStatus.SYNCING, SyncStatus.COMPLETED, SyncStatus.NOT_STARTED},
    SyncStatus.COMPLETED: {SyncStatus.PENDING, SyncStatus.SYNCING, SyncStatus.NOT_STARTED},
}
"""Expected transitions between consecutive classified statuses."""
