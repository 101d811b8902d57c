"""
Storage module for the persisted synced-block cursor.

Uses SQLite for durability, with an in-memory variant for tests.
"""

from .cursor import CursorStore
from .namespaces import CURSORS, CursorNamespace
from .sqlite import MemoryCursorStore, SQLiteCursorStore

__all__ = [
    "CURSORS",
    "CursorNamespace",
    "CursorStore",
    "MemoryCursorStore",
    "SQLiteCursorStore",
]
