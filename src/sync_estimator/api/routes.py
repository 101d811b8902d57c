"""API route definitions."""

from collections.abc import Awaitable, Callable

from aiohttp import web

from .endpoints import health, metrics, sync

ROUTES: dict[str, Callable[[web.Request], Awaitable[web.Response]]] = {
    "/sync/v0/health": health.handle,
    "/sync/v0/status": sync.handle_status,
    "/sync/v0/estimation": sync.handle_estimation,
    "/metrics": metrics.handle,
}
"""All API routes mapped to their handlers."""
