"""
Estimator Event Types and Source Protocol.

Two kinds of events drive the estimator:

- Progress ticks from the local indexer and block cache
- Active-node changes from the node selection layer

Event Flow
----------
::

    Event Source (async iterator)
           |
    SyncEstimator.run (pattern matching dispatch)
           |
           +-- ProgressTick      --> on_progress_tick
           +-- NodeChangedEvent  --> on_node_changed

Raw tick payloads are loosely typed (numbers may arrive as strings). They
are parsed into :class:`ProgressTick` at the boundary, and anything that is
not a clean 64-bit unsigned integer is rejected with :class:`TickParseError`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sync_estimator.types import Uint64, parse_quantity


class TickParseError(ValueError):
    """
    A raw progress payload could not be parsed.

    Attributes:
        field: The offending field, or None when the whole payload is bad.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


def _read_height(payload: Mapping[str, Any], camel: str, snake: str) -> int:
    """Read one height from a payload, accepting camel or snake case keys."""
    if camel in payload:
        raw = payload[camel]
    elif snake in payload:
        raw = payload[snake]
    else:
        raise TickParseError("missing", field=camel)

    try:
        return int(Uint64(parse_quantity(raw)))
    except (TypeError, ValueError, OverflowError) as exc:
        raise TickParseError(str(exc), field=camel) from exc


@dataclass(frozen=True, slots=True)
class ProgressTick:
    """
    Local progress reported by the indexer and block cache.

    Fired whenever the cache tip block is updated.
    """

    indexer_tip_number: int
    """Height the auxiliary index has reached."""

    cache_tip_number: int
    """Height block data has been cached up to."""

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> ProgressTick:
        """
        Parse a raw tick payload.

        Args:
            payload: Mapping with `indexerTipNumber` and `cacheTipNumber`
                     (snake case also accepted), as ints or numeric strings.

        Raises:
            TickParseError: If a field is missing or not a 64-bit unsigned integer.
        """
        if not isinstance(payload, Mapping):
            raise TickParseError(f"expected an object, got {type(payload).__name__}")
        return cls(
            indexer_tip_number=_read_height(payload, "indexerTipNumber", "indexer_tip_number"),
            cache_tip_number=_read_height(payload, "cacheTipNumber", "cache_tip_number"),
        )


@dataclass(frozen=True, slots=True)
class NodeChangedEvent:
    """
    The active node changed.

    Fired (already debounced) by the node selection layer.
    """

    node_url: str
    """URL of the newly active node."""


EstimatorEvent = ProgressTick | NodeChangedEvent
"""Union of all estimator event types for pattern matching dispatch."""


@runtime_checkable
class EstimatorEventSource(Protocol):
    """
    Abstract source of estimator events.

    Any async iterator over EstimatorEvent objects qualifies.

    Usage
    -----
    ::

        async for event in source:
            await handle_event(event)
    """

    def __aiter__(self) -> EstimatorEventSource:
        """Return self as async iterator."""
        ...

    async def __anext__(self) -> EstimatorEvent:
        """
        Yield the next event.

        Raises:
            StopAsyncIteration: When no more events will arrive.
            TickParseError: When the next raw event is malformed.
        """
        ...


class LineReader(Protocol):
    """Anything with an async `readline`, such as asyncio.StreamReader."""

    async def readline(self) -> bytes:
        """Read one line, or b"" at end of stream."""
        ...


class JsonLinesEventSource:
    """
    Events decoded from a stream of JSON objects, one per line.

    A line carrying `nodeUrl` becomes a NodeChangedEvent. Every other line is
    a progress tick. Blank lines are skipped.

    A malformed line raises TickParseError from `__anext__`. The stream
    itself stays usable, so the consumer may log the error and keep iterating.
    """

    def __init__(self, reader: LineReader) -> None:
        """
        Initialize the source.

        Args:
            reader: Stream to read lines from.
        """
        self._reader = reader
        self._lines_read = 0

    @property
    def lines_read(self) -> int:
        """Number of lines consumed, including blank and malformed ones."""
        return self._lines_read

    def __aiter__(self) -> JsonLinesEventSource:
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> EstimatorEvent:
        """Decode the next non-blank line."""
        while True:
            raw = await self._reader.readline()
            if not raw:
                raise StopAsyncIteration
            self._lines_read += 1

            try:
                line = raw.decode("utf-8").strip()
            except UnicodeDecodeError as exc:
                raise TickParseError(f"line {self._lines_read} is not valid UTF-8: {exc}") from exc
            if line:
                return self._decode(line)

    def _decode(self, line: str) -> EstimatorEvent:
        """Turn one JSON line into an event."""
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise TickParseError(f"line {self._lines_read} is not valid JSON: {exc}") from exc

        if isinstance(payload, Mapping) and "nodeUrl" in payload:
            node_url = payload["nodeUrl"]
            if not isinstance(node_url, str) or not node_url:
                raise TickParseError("must be a non-empty string", field="nodeUrl")
            return NodeChangedEvent(node_url=node_url)

        return ProgressTick.parse(payload)
