"""
Node RPC types and protocol.

The estimator never talks to a node directly. It goes through the
:class:`NodeRpc` protocol, which any transport (HTTP JSON-RPC, IPC, a test
double) can satisfy by structural subtyping.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sync_estimator.types import StrictBaseModel, Uint64


class RpcError(Exception):
    """
    A node query failed.

    Covers transport failures, HTTP errors, JSON-RPC error objects and
    results that do not have the expected shape.

    Attributes:
        method: The RPC method that failed.
        node_url: The node that was queried.
    """

    def __init__(self, message: str, *, method: str, node_url: str) -> None:
        self.method = method
        self.node_url = node_url
        super().__init__(f"{method} on {node_url}: {message}")


class TipHeader(StrictBaseModel):
    """The node's own current chain tip."""

    number: Uint64
    """Height of the tip block."""

    timestamp: Uint64
    """Block timestamp of the tip, in milliseconds."""


class BestKnownBlock(StrictBaseModel):
    """The highest block the node believes the network has reached."""

    number: Uint64
    """Best-known block height."""

    timestamp: Uint64
    """Block timestamp of the best-known block, in milliseconds."""

    @classmethod
    def from_tip_header(cls, header: TipHeader) -> BestKnownBlock:
        """Treat the node's own tip as the best-known block."""
        return cls(number=header.number, timestamp=header.timestamp)


@runtime_checkable
class NodeRpc(Protocol):
    """Queries the estimator needs from a node."""

    async def get_tip_header(self, node_url: str) -> TipHeader:
        """
        Fetch the node's current tip header.

        Raises:
            RpcError: If the query fails.
        """
        ...

    async def get_best_known_sync(self, node_url: str) -> BestKnownBlock:
        """
        Fetch the node's best-known block from its extended sync state.

        Not every node exposes this. Callers fall back to the tip header.

        Raises:
            RpcError: If the query fails.
        """
        ...
