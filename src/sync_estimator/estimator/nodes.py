"""
Active node selection.

The estimator scopes its samples to one node at a time. It needs two
things from the node layer: the current node URL, read synchronously on
every tick, and a (debounced) notification when that URL changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .config import NODE_CHANGE_DEBOUNCE_SECONDS
from .debounce import Debouncer

logger = logging.getLogger(__name__)

NodeListener = Callable[[str], None]
"""Callback invoked with the new node URL."""


@runtime_checkable
class ActiveNodeProvider(Protocol):
    """Exposes the currently active node."""

    @property
    def current_url(self) -> str:
        """URL of the node all queries should go to."""
        ...


@dataclass(slots=True)
class NodeSelector:
    """
    Holds the active node URL and announces changes.

    The URL itself switches immediately, so any tick in flight sees the
    mismatch and discards its result. Listeners are only told once a burst
    of switches settles.
    """

    url: str
    """Currently active node URL."""

    debounce_seconds: float = NODE_CHANGE_DEBOUNCE_SECONDS
    """Quiet period before listeners are notified."""

    _listeners: list[NodeListener] = field(default_factory=list)
    """Registered change listeners."""

    _debouncer: Debouncer | None = field(default=None, repr=False)
    """Created on first use so construction needs no event loop."""

    @property
    def current_url(self) -> str:
        """URL of the node all queries should go to."""
        return self.url

    def add_listener(self, listener: NodeListener) -> None:
        """Register a callback for settled node changes."""
        self._listeners.append(listener)

    def select(self, url: str) -> None:
        """
        Make `url` the active node.

        Selecting the node that is already active does nothing.
        Requires a running event loop for the debounced notification.
        """
        if url == self.url:
            return

        logger.info("Active node switched: %s -> %s", self.url, url)
        self.url = url

        if self._debouncer is None:
            self._debouncer = Debouncer(self._notify, self.debounce_seconds)
        self._debouncer.trigger()

    def _notify(self) -> None:
        """Tell every listener about the node that is active now."""
        for listener in list(self._listeners):
            listener(self.url)
