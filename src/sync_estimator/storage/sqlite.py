"""
SQLite implementation of the cursor store.

Keeps the synced-block cursor in a single-row key-value table so that it
survives process restarts.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from sync_estimator.types import Uint64

from .namespaces import CURSORS

logger = logging.getLogger(__name__)


class SQLiteCursorStore:
    """
    SQLite implementation of the CursorStore protocol.

    Each write commits immediately. Callers can rely on the cursor being
    persisted once `set_next_block` returns.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize SQLite storage.

        Creates the database file and table if they don't exist.

        Args:
            path: Path to SQLite database file.
                  Use ":memory:" for in-memory database.
        """
        self._path = Path(path) if isinstance(path, str) else path

        # The estimator runs on one event loop thread, but the API server
        # may be hosted elsewhere. SQLite serializes writes internally.
        self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

        self._conn.execute(CURSORS.CREATE_TABLE)
        self._conn.commit()

    def get_next_block(self) -> Uint64 | None:
        """Retrieve the stored cursor."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT value FROM {CURSORS.TABLE_NAME} WHERE key = ?",
            (CURSORS.KEY_SYNCED_BLOCK,),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return Uint64(row["value"])

    def set_next_block(self, block_number: Uint64) -> None:
        """Store the cursor, replacing any previous value."""
        self._conn.execute(
            f"""
            INSERT OR REPLACE INTO {CURSORS.TABLE_NAME} (key, value)
            VALUES (?, ?)
            """,
            (CURSORS.KEY_SYNCED_BLOCK, int(block_number)),
        )
        self._conn.commit()
        logger.debug("Persisted synced block cursor %d", int(block_number))

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()


class MemoryCursorStore:
    """Process-local cursor store. Nothing survives a restart."""

    def __init__(self) -> None:
        self._value: Uint64 | None = None

    def get_next_block(self) -> Uint64 | None:
        """Retrieve the stored cursor."""
        return self._value

    def set_next_block(self, block_number: Uint64) -> None:
        """Store the cursor, replacing any previous value."""
        self._value = Uint64(block_number)
