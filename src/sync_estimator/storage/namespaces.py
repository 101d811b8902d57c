"""
Database namespace definitions for storage tables.

Defines table names and schema constants for SQLite storage.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CursorNamespace:
    """
    Namespace for sync cursors.

    Uses a key-value pattern with fixed keys. Values are plain integers,
    which SQLite stores as signed 64-bit. Block numbers stay far below 2**63.
    """

    TABLE_NAME: str = "cursors"
    """Table name for cursor storage."""

    KEY_SYNCED_BLOCK: str = "synced_block_number"
    """Key for the next block number to sync."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS cursors (
            key TEXT PRIMARY KEY,
            value INTEGER NOT NULL
        )
    """
    """SQL to create cursors table."""


CURSORS = CursorNamespace()
