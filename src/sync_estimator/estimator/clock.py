"""
Estimator Clock
===============

Wall-clock source for sample timestamps.

Every age and rate computation is a function of "now". Routing all reads
through one injectable clock lets tests advance time deterministically.
"""

from dataclasses import dataclass
from time import time as wall_time
from typing import Callable


@dataclass(frozen=True, slots=True)
class Clock:
    """Reads wall-clock time in whole milliseconds."""

    time_fn: Callable[[], float] = wall_time
    """Time source in seconds (injectable for testing)."""

    def now_ms(self) -> int:
        """Get current wall-clock time as Unix milliseconds."""
        # Round rather than truncate: 1.001 s is 1000.9999... ms in binary floats.
        return round(self.time_fn() * 1000)
