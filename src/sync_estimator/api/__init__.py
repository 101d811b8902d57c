"""
API server module for sync status endpoints.

Provides HTTP endpoints for:
- /sync/v0/status - Current sync status
- /sync/v0/estimation - Cached sync estimation
- /sync/v0/health - Health check endpoint
- /metrics - Prometheus metrics
"""

from .routes import ROUTES
from .server import ApiServer, ApiServerConfig

__all__ = [
    "ApiServer",
    "ApiServerConfig",
    "ROUTES",
]
