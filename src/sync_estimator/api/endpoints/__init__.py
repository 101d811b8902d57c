"""API endpoint handlers."""

from . import health, metrics, sync

__all__ = [
    "health",
    "metrics",
    "sync",
]
