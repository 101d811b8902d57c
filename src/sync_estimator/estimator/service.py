"""
Sync estimator service.

This is the main entry point for sync progress estimation.

The Core Problem
----------------
A wallet caches blocks from a node while an indexer builds an auxiliary
index. A UI wants to show "how far along are we" without flicker, and
without re-deriving it from raw block numbers on every tick. Raw numbers
are noisy:

1. **Moving target**: A starting node's best-known block leaps around
2. **Jitter**: Ticks arrive irregularly; instant rates are meaningless
3. **Node switches**: Samples from another node poison every average

How It Works
------------
- Each progress tick queries the node for its tip header and best-known block
- The tick is folded into a new sample and classified
- The sample is pushed into the window, the cursor is persisted, and the
  sample is published
- A node change resets the window and republishes NOT_STARTED

Concurrency
-----------
Ticks are serialized by a lock, but resets never wait on it. A tick that
was in flight when the node changed notices the mismatch once its queries
return and discards its result instead of committing it.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sync_estimator import metrics
from sync_estimator.rpc import BestKnownBlock, NodeRpc, RpcError
from sync_estimator.storage import CursorStore
from sync_estimator.types import Uint64

from .cache import EstimationCache
from .classifier import TickObservation, classify
from .clock import Clock
from .config import DEFAULT_CONFIG, EstimatorConfig
from .events import (
    EstimatorEvent,
    EstimatorEventSource,
    NodeChangedEvent,
    ProgressTick,
    TickParseError,
)
from .nodes import ActiveNodeProvider, NodeSelector
from .publisher import SamplePublisher
from .sample import Sample
from .states import SyncStatus
from .window import SampleWindow

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncEstimator:
    """
    Classifies sync progress and estimates time to completion.

    Owns the sample window and the estimation cache. Everything else
    (node queries, node selection, persistence, publication) is injected.
    """

    rpc: NodeRpc
    """Node query interface."""

    nodes: ActiveNodeProvider
    """Source of the currently active node URL."""

    config: EstimatorConfig = field(default=DEFAULT_CONFIG)
    """Thresholds."""

    clock: Clock = field(default_factory=Clock)
    """Time source."""

    publisher: SamplePublisher = field(default_factory=SamplePublisher)
    """Broadcast point for every new sample."""

    cursor: CursorStore | None = field(default=None)
    """Optional store receiving the cache tip after every committed tick."""

    _window: SampleWindow = field(init=False)
    """Retained samples for the active node."""

    _cache: EstimationCache = field(default_factory=EstimationCache, init=False)
    """Debounced view handed to polling consumers."""

    _tick_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)
    """Serializes tick handling."""

    _running: bool = field(default=False, init=False, repr=False)
    """Whether the event loop is running."""

    _events_processed: int = field(default=0, init=False, repr=False)
    """Counter for dispatched events."""

    def __post_init__(self) -> None:
        """Create the window with the configured horizon."""
        self._window = SampleWindow(horizon_ms=self.config.sample_horizon_ms)

    @property
    def window(self) -> SampleWindow:
        """The sample window (read access for inspection)."""
        return self._window

    @property
    def is_running(self) -> bool:
        """Check if the event loop is currently running."""
        return self._running

    @property
    def events_processed(self) -> int:
        """Total events dispatched since creation."""
        return self._events_processed

    # -------------------------------------------------------------------------
    # Produced interface
    # -------------------------------------------------------------------------

    def get_sync_status(self) -> SyncStatus:
        """
        Status of the newest sample.

        Returns:
            NOT_STARTED while the window is empty.
        """
        latest = self._window.latest
        if latest is None:
            return SyncStatus.NOT_STARTED
        return latest.status

    def get_cached_estimation(self) -> Sample | None:
        """
        The debounced estimate for polling consumers.

        Returns:
            A stable sample reference between genuine changes, or None
            while the window is empty.
        """
        return self._cache.current(self._window, self.nodes.current_url, self.clock.now_ms())

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    async def on_progress_tick(self, tick: ProgressTick) -> Sample | None:
        """
        Fold a progress tick into a new classified sample.

        Nothing is mutated unless the whole computation succeeds.

        Args:
            tick: Parsed local progress.

        Returns:
            The committed sample, or None if the active node changed while
            the node queries were in flight.

        Raises:
            RpcError: If the tip header query fails.
        """
        async with self._tick_lock:
            with metrics.tick_duration.time():
                observation = await self._observe(tick)

            # The node switched under us. The reset already happened (or is
            # about to), so committing would mix nodes in the window.
            if observation.node_url != self.nodes.current_url:
                logger.debug(
                    "Discarding tick for %s: active node is now %s",
                    observation.node_url,
                    self.nodes.current_url,
                )
                metrics.tick_failures.labels(reason="node_changed").inc()
                return None

            samples = self._window.samples_for(observation.node_url, observation.now)
            sample = classify(observation, samples, self.config)
            self._commit(sample, observation.now)
            return sample

    async def on_raw_tick(self, payload: Mapping[str, Any]) -> Sample | None:
        """
        Parse a loosely typed tick payload and handle it.

        Raises:
            TickParseError: If the payload is malformed.
            RpcError: If the tip header query fails.
        """
        return await self.on_progress_tick(ProgressTick.parse(payload))

    def on_node_changed(self, node_url: str | None = None) -> Sample:
        """
        Reset the window for a newly active node.

        Immediate and idempotent. Does not wait for in-flight ticks.

        Args:
            node_url: The new node. Defaults to the provider's current node.

        Returns:
            The published bootstrap sample.
        """
        url = node_url if node_url is not None else self.nodes.current_url
        if url != self.nodes.current_url:
            logger.warning(
                "Resetting for %s but the active node reports %s", url, self.nodes.current_url
            )

        bootstrap = self._window.reset(url)
        self._cache.clear()
        metrics.resets.inc()
        self._record_metrics(bootstrap)
        logger.info("Sync estimation reset for node %s", url)

        self.publisher.publish(bootstrap)
        return bootstrap

    def attach(self, selector: NodeSelector) -> None:
        """Reset automatically whenever the selector announces a new node."""
        selector.add_listener(self.on_node_changed)

    # -------------------------------------------------------------------------
    # Event loop
    # -------------------------------------------------------------------------

    async def run(self, source: EstimatorEventSource) -> None:
        """
        Main event loop - dispatch events until stopped.

        A failed tick is logged and counted; the next tick is the natural
        retry. The loop exits when stop() is called or the source is exhausted.
        """
        self._running = True
        events = aiter(source)

        try:
            while self._running:
                try:
                    event = await anext(events)
                except StopAsyncIteration:
                    break
                except TickParseError as exc:
                    logger.warning("Skipping malformed event: %s", exc)
                    metrics.tick_failures.labels(reason="parse").inc()
                    continue

                await self._handle_event(event)
                self._events_processed += 1

        finally:
            self._running = False

    def stop(self) -> None:
        """Signal the event loop to stop after the current event."""
        self._running = False

    async def _handle_event(self, event: EstimatorEvent) -> None:
        """Route one event to its handler."""
        match event:
            case ProgressTick():
                try:
                    await self.on_progress_tick(event)
                except RpcError as exc:
                    logger.warning("Progress tick failed: %s", exc)
                    metrics.tick_failures.labels(reason="rpc").inc()

            case NodeChangedEvent(node_url=node_url):
                self.on_node_changed(node_url)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _observe(self, tick: ProgressTick) -> TickObservation:
        """Query the node and bundle the results with the tick."""
        node_url = self.nodes.current_url
        now = self.clock.now_ms()

        tip_header = await self.rpc.get_tip_header(node_url)
        best_known = await self._fetch_best_known(node_url)

        return TickObservation(
            node_url=node_url,
            now=now,
            indexer_tip_number=tick.indexer_tip_number,
            cache_tip_number=tick.cache_tip_number,
            tip_header=tip_header,
            best_known=best_known,
        )

    async def _fetch_best_known(self, node_url: str) -> BestKnownBlock:
        """
        Best-known block, falling back to the node's own tip.

        Nodes without extended sync state (or with it temporarily failing)
        are treated as if their tip were the best-known block. A failure of
        the fallback query propagates.
        """
        try:
            return await self.rpc.get_best_known_sync(node_url)
        except RpcError as exc:
            logger.debug("Best-known sync unavailable, using tip header: %s", exc)
            return BestKnownBlock.from_tip_header(await self.rpc.get_tip_header(node_url))

    def _commit(self, sample: Sample, now: int) -> None:
        """Push, persist, publish and observe a classified sample."""
        # Everything that can reject the sample runs before the window changes.
        next_block = Uint64(sample.cache_tip_number)
        previous_status = self.get_sync_status()
        self._window.push(sample, now)

        if self.cursor is not None:
            self.cursor.set_next_block(next_block)

        metrics.ticks_processed.inc()
        self._record_metrics(sample)
        self._log_sample(sample, previous_status)

        self.publisher.publish(sample)

    def _log_sample(self, sample: Sample, previous_status: SyncStatus) -> None:
        logger.debug(
            "Sample: node=%s indexer=%d cache=%d best_known=%d rate=%s estimate=%s status=%s",
            sample.node_url,
            sample.indexer_tip_number,
            sample.cache_tip_number,
            sample.best_known_block_number,
            sample.index_rate,
            sample.estimate,
            sample.status.name,
        )

        if sample.status == previous_status:
            return
        if previous_status.can_transition_to(sample.status):
            logger.info("Sync status: %s -> %s", previous_status.name, sample.status.name)
        else:
            logger.warning(
                "Unexpected sync status jump: %s -> %s", previous_status.name, sample.status.name
            )

    @staticmethod
    def _record_metrics(sample: Sample) -> None:
        metrics.sync_status.set(sample.status.value)
        metrics.indexer_tip.set(sample.indexer_tip_number)
        metrics.cache_tip.set(sample.cache_tip_number)
        metrics.best_known_block.set(sample.best_known_block_number)

        # Rate is heights per millisecond; dashboards read blocks per second.
        rate = sample.index_rate
        metrics.index_rate.set(rate * 1000 if rate is not None else math.nan)
        estimate = sample.estimate
        metrics.estimate_seconds.set(estimate / 1000 if estimate is not None else math.nan)
