"""
Sync estimator CLI entry point.

Reads progress events as JSON lines, estimates sync progress against a
node, and prints every published sample as one JSON line.

Usage::

    python -m sync_estimator --node-url http://127.0.0.1:8114 < ticks.jsonl
    python -m sync_estimator --node-url http://127.0.0.1:8114 --input ticks.jsonl --api-port 5053
    python -m sync_estimator --node-url http://127.0.0.1:8114 --database cursor.db --no-api

Input lines::

    {"indexerTipNumber": "1024", "cacheTipNumber": "1000"}
    {"nodeUrl": "http://127.0.0.1:8115"}

Options:
    --node-url             Initial node JSON-RPC URL (required)
    --input                JSON lines file to read events from (default: stdin)
    --database             SQLite file for the synced-block cursor (default: in memory)
    --api-port             Port for the HTTP API (default: 5053)
    --no-api               Do not start the HTTP API
    --rpc-timeout          Node request timeout in seconds
    --log-level            Logging level (default: INFO)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import BinaryIO, TextIO

from sync_estimator.api import ApiServer, ApiServerConfig
from sync_estimator.estimator import (
    BEST_KNOWN_DIFF_THRESHOLD,
    CACHE_DIFF_THRESHOLD,
    INDEXER_TIP_DIFF_THRESHOLD,
    MAX_TIP_BLOCK_DELAY_MS,
    PENDING_TIP_AGE_MS,
    SAMPLE_HORIZON_MS,
    EstimatorConfig,
    EstimatorEvent,
    EstimatorEventSource,
    JsonLinesEventSource,
    NodeChangedEvent,
    NodeSelector,
    Sample,
    SyncEstimator,
)
from sync_estimator.rpc import DEFAULT_TIMEOUT, JsonRpcClient, NodeRpc
from sync_estimator.storage import CursorStore, MemoryCursorStore, SQLiteCursorStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
"""Format for all log records emitted by the CLI."""


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the CLI.

    Records go to stderr. Stdout is reserved for published samples.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sync_estimator",
        description="Estimate blockchain sync progress from indexer progress ticks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--node-url", required=True, help="Initial node JSON-RPC URL")
    parser.add_argument(
        "--input", type=Path, default=None, help="JSON lines event file (default: stdin)"
    )
    parser.add_argument(
        "--database", type=Path, default=None, help="SQLite file for the synced-block cursor"
    )
    parser.add_argument("--api-port", type=int, default=ApiServerConfig().port)
    parser.add_argument("--no-api", action="store_true", help="Do not start the HTTP API")
    parser.add_argument("--rpc-timeout", type=float, default=DEFAULT_TIMEOUT)
    parser.add_argument("--sample-horizon-ms", type=int, default=SAMPLE_HORIZON_MS)
    parser.add_argument("--indexer-tip-diff", type=int, default=INDEXER_TIP_DIFF_THRESHOLD)
    parser.add_argument("--cache-diff", type=int, default=CACHE_DIFF_THRESHOLD)
    parser.add_argument("--best-known-diff", type=int, default=BEST_KNOWN_DIFF_THRESHOLD)
    parser.add_argument("--pending-tip-age-ms", type=int, default=PENDING_TIP_AGE_MS)
    parser.add_argument("--max-tip-delay-ms", type=int, default=MAX_TIP_BLOCK_DELAY_MS)
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> EstimatorConfig:
    """
    Build the estimator thresholds from parsed arguments.

    Raises:
        pydantic.ValidationError: If a threshold is not positive.
    """
    return EstimatorConfig(
        sample_horizon_ms=args.sample_horizon_ms,
        indexer_tip_diff_threshold=args.indexer_tip_diff,
        cache_diff_threshold=args.cache_diff,
        best_known_diff_threshold=args.best_known_diff,
        pending_tip_age_ms=args.pending_tip_age_ms,
        max_tip_block_delay_ms=args.max_tip_delay_ms,
    )


def create_estimator(
    node_url: str,
    rpc: NodeRpc,
    config: EstimatorConfig,
    cursor: CursorStore | None = None,
    *,
    attach: bool = True,
) -> tuple[SyncEstimator, NodeSelector]:
    """
    Compose an estimator with its node selector.

    Args:
        node_url: Initially active node.
        rpc: Node query interface.
        config: Thresholds.
        cursor: Optional synced-block cursor store.
        attach: Reset the estimator on the selector's debounced change
                notifications. Disable when node changes are delivered
                as events instead.

    Returns:
        The estimator and the selector that drives its active node.
    """
    selector = NodeSelector(url=node_url)
    estimator = SyncEstimator(rpc=rpc, nodes=selector, config=config, cursor=cursor)
    if attach:
        estimator.attach(selector)
    return estimator, selector


class SwitchingEventSource:
    """
    Apply node switches from the input before the estimator sees them.

    The input is already a settled stream of events, so the switch is applied
    immediately and the event is forwarded for an immediate reset. Parse
    errors from the wrapped source pass through without ending iteration.
    """

    def __init__(self, source: EstimatorEventSource, selector: NodeSelector) -> None:
        self._source = source
        self._selector = selector

    def __aiter__(self) -> SwitchingEventSource:
        return self

    async def __anext__(self) -> EstimatorEvent:
        event = await anext(self._source)
        if isinstance(event, NodeChangedEvent):
            self._selector.select(event.node_url)
        return event


def print_sample(sample: Sample, out: TextIO | None = None) -> None:
    """Write a sample as one JSON line to `out` (default: stdout)."""
    stream = out if out is not None else sys.stdout
    stream.write(json.dumps(sample.to_json_dict()) + "\n")
    stream.flush()


class ThreadedLineReader:
    """
    Async line reader over a blocking binary stream.

    Pipe transports reject regular files, and stdin is often redirected
    from one, so each read runs in a worker thread instead.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    async def readline(self) -> bytes:
        """Read one line, or b"" at end of stream."""
        return await asyncio.to_thread(self._stream.readline)


async def run(args: argparse.Namespace) -> int:
    """
    Run the estimator until the input is exhausted.

    Returns:
        Process exit code.
    """
    config = config_from_args(args)
    cursor: CursorStore = (
        SQLiteCursorStore(args.database) if args.database is not None else MemoryCursorStore()
    )

    async with JsonRpcClient(timeout=args.rpc_timeout) as rpc:
        # Node switches arrive through the input itself and reset immediately.
        estimator, selector = create_estimator(args.node_url, rpc, config, cursor, attach=False)
        estimator.publisher.subscribe(print_sample)

        api_server: ApiServer | None = None
        if not args.no_api:
            api_server = ApiServer(
                config=ApiServerConfig(port=args.api_port),
                estimator_getter=lambda: estimator,
            )
            await api_server.start()

        stream = args.input.open("rb") if args.input is not None else sys.stdin.buffer
        try:
            estimator.on_node_changed(args.node_url)
            source = JsonLinesEventSource(ThreadedLineReader(stream))
            await estimator.run(SwitchingEventSource(source, selector))
        finally:
            if args.input is not None:
                stream.close()
            if api_server is not None:
                await api_server.aclose()
            if isinstance(cursor, SQLiteCursorStore):
                cursor.close()

    logger.info(
        "Input exhausted after %d events and %d published samples; final status %s",
        estimator.events_processed,
        estimator.publisher.published,
        estimator.get_sync_status().name,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
