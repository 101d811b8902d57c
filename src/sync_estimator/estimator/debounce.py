"""
Trailing-edge debouncer.

Coalesces a burst of triggers into a single callback that fires once the
burst has been quiet for the configured delay. The last trigger's arguments
win.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from .config import NODE_CHANGE_DEBOUNCE_SECONDS


class Debouncer:
    """
    Delay a callback until triggers stop arriving.

    Uses the running event loop's timer. Must be triggered from inside a
    running loop.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        delay_seconds: float = NODE_CHANGE_DEBOUNCE_SECONDS,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            callback: Invoked with the arguments of the last trigger.
            delay_seconds: Quiet period required before firing.
        """
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative, got {delay_seconds}")
        self._callback = callback
        self._delay = delay_seconds
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Check if a callback is scheduled but has not fired yet."""
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        """
        Restart the quiet period.

        Any previously scheduled invocation is dropped in favor of this one.
        """
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire, args)

    def cancel(self) -> None:
        """Drop the scheduled invocation, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple[Any, ...]) -> None:
        self._handle = None
        self._callback(*args)
