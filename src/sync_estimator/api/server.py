"""
API server for sync status, estimation, health and metrics endpoints.

Provides HTTP endpoints for:
- /sync/v0/status - Current sync status
- /sync/v0/estimation - Debounced sync estimation for polling UIs
- /sync/v0/health - Health check endpoint
- /metrics - Prometheus metrics endpoint
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aiohttp import web

from .endpoints.sync import ESTIMATOR_GETTER, EstimatorGetter
from .routes import ROUTES

if TYPE_CHECKING:
    from sync_estimator.estimator import SyncEstimator

logger = logging.getLogger(__name__)


def _no_estimator() -> SyncEstimator | None:
    """Default estimator getter that returns None."""
    return None


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Configuration for the API server."""

    host: str = "127.0.0.1"
    """Host address to bind to. Local only: the API is for the host application."""

    port: int = 5053
    """Port to listen on."""

    enabled: bool = True
    """Whether the API server is enabled."""


@dataclass(slots=True)
class ApiServer:
    """
    HTTP API server exposing the estimator to other processes.

    Uses aiohttp to handle HTTP protocol details efficiently.
    """

    config: ApiServerConfig
    """Server configuration."""

    estimator_getter: EstimatorGetter = _no_estimator
    """Callable that returns the current estimator instance."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    _site: web.TCPSite | None = field(default=None, init=False)
    """The TCP site for the server."""

    @property
    def estimator(self) -> SyncEstimator | None:
        """Get the current estimator instance."""
        return self.estimator_getter()

    def build_app(self) -> web.Application:
        """Create the aiohttp application with all routes registered."""
        app = web.Application()
        app[ESTIMATOR_GETTER] = self.estimator_getter
        app.add_routes([web.get(path, handler) for path, handler in ROUTES.items()])
        return app

    async def start(self) -> None:
        """Start the API server in the background."""
        if not self.config.enabled:
            logger.info("API server is disabled")
            return

        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()

        logger.info("API server listening on %s:%d", self.config.host, self.config.port)

    async def aclose(self) -> None:
        """Gracefully stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("API server stopped")
