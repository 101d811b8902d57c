"""
Abstract interface for the persisted synced-block cursor.

After each successful tick the estimator records the cache tip as the next
block to sync from, so a restarted process can resume where it stopped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sync_estimator.types import Uint64


class CursorStore(Protocol):
    """
    Protocol for cursor storage.

    Uses structural subtyping - any class with matching methods satisfies the protocol.
    """

    def get_next_block(self) -> Uint64 | None:
        """
        Retrieve the stored cursor.

        Returns:
            Next block number to sync, or None if never set.
        """
        ...

    def set_next_block(self, block_number: Uint64) -> None:
        """
        Store the cursor, replacing any previous value.

        Args:
            block_number: Next block number to sync.
        """
        ...
