"""
Node RPC boundary.

Provides the protocol the estimator queries nodes through, the value
types it returns, and an HTTP JSON-RPC implementation.
"""

from .client import DEFAULT_TIMEOUT, JsonRpcClient
from .types import BestKnownBlock, NodeRpc, RpcError, TipHeader

__all__ = [
    "BestKnownBlock",
    "DEFAULT_TIMEOUT",
    "JsonRpcClient",
    "NodeRpc",
    "RpcError",
    "TipHeader",
]
