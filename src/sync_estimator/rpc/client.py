"""
JSON-RPC client for node queries.

Talks JSON-RPC 2.0 over HTTP to a CKB-style node:

- ``get_tip_header`` returns the node's own tip (``number``, ``timestamp``)
- ``sync_state`` returns extended sync info, including the best-known block

Quantities are ``0x``-prefixed hex strings on the wire.

Every failure mode surfaces as :class:`RpcError`. The estimator decides what
is recoverable; this layer never retries.
"""

from __future__ import annotations

import itertools
import logging
from types import TracebackType
from typing import Any

import httpx

from sync_estimator.types import Uint64, parse_quantity

from .types import BestKnownBlock, RpcError, TipHeader

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
"""HTTP request timeout in seconds. Both queries are small and fast."""

TIP_HEADER_METHOD = "get_tip_header"
"""JSON-RPC method returning the node's tip header."""

SYNC_STATE_METHOD = "sync_state"
"""JSON-RPC method returning the node's extended sync state."""


class JsonRpcClient:
    """
    Node RPC over HTTP JSON-RPC.

    Satisfies the NodeRpc protocol. One client serves any number of nodes:
    the node URL is passed per call, so switching nodes needs no new client.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            timeout: Per-request timeout in seconds.
            http_client: Optional pre-built client (e.g. with a mock transport).
                         A client passed in is not closed by `aclose`.
        """
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> JsonRpcClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def get_tip_header(self, node_url: str) -> TipHeader:
        """Fetch the node's current tip header."""
        result = await self._call(node_url, TIP_HEADER_METHOD)
        try:
            return TipHeader(
                number=Uint64(parse_quantity(result["number"])),
                timestamp=Uint64(parse_quantity(result["timestamp"])),
            )
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise RpcError(
                f"malformed tip header: {exc}", method=TIP_HEADER_METHOD, node_url=node_url
            ) from exc

    async def get_best_known_sync(self, node_url: str) -> BestKnownBlock:
        """Fetch the best-known block from the node's sync state."""
        result = await self._call(node_url, SYNC_STATE_METHOD)
        try:
            return BestKnownBlock(
                number=Uint64(parse_quantity(result["best_known_block_number"])),
                timestamp=Uint64(parse_quantity(result["best_known_block_timestamp"])),
            )
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise RpcError(
                f"malformed sync state: {exc}", method=SYNC_STATE_METHOD, node_url=node_url
            ) from exc

    async def _call(self, node_url: str, method: str, params: list[Any] | None = None) -> Any:
        """
        Issue one JSON-RPC request and return its `result` member.

        Raises:
            RpcError: On transport, HTTP, protocol or server-reported errors.
        """
        payload = {
            "id": next(self._ids),
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
        }
        logger.debug("RPC %s -> %s", method, node_url)

        try:
            response = await self._http.post(node_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.RequestError as exc:
            raise RpcError(f"network error: {exc}", method=method, node_url=node_url) from exc
        except httpx.HTTPStatusError as exc:
            raise RpcError(
                f"HTTP error {exc.response.status_code}: {exc.response.text[:200]}",
                method=method,
                node_url=node_url,
            ) from exc
        except ValueError as exc:
            # JSONDecodeError is a ValueError subclass.
            raise RpcError(
                f"invalid JSON response: {exc}", method=method, node_url=node_url
            ) from exc

        if not isinstance(body, dict):
            raise RpcError("response is not a JSON object", method=method, node_url=node_url)

        error = body.get("error")
        if error is not None:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RpcError(f"server error: {message}", method=method, node_url=node_url)

        result = body.get("result")
        if not isinstance(result, dict):
            raise RpcError("missing or non-object result", method=method, node_url=node_url)

        return result
