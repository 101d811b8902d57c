"""Sync status and estimation endpoint handlers."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from sync_estimator.estimator import SyncEstimator

EstimatorGetter = Callable[[], "SyncEstimator | None"]
"""Returns the estimator to serve, or None before it is composed."""

ESTIMATOR_GETTER = web.AppKey("estimator_getter", EstimatorGetter)
"""Application key under which the server stores its estimator getter."""


def _require_estimator(request: web.Request) -> SyncEstimator:
    """Resolve the estimator or answer 503."""
    getter = request.app.get(ESTIMATOR_GETTER)
    estimator = getter() if getter else None

    if estimator is None:
        raise web.HTTPServiceUnavailable(reason="Estimator not initialized")
    return estimator


async def handle_status(request: web.Request) -> web.Response:
    """
    Handle sync status request.

    Response: JSON object with fields:
        - status (string): NOT_STARTED, PENDING, SYNCING or COMPLETED.
        - code (integer): Numeric status value (0 to 3).

    Status Codes:
        200 OK: Status returned.
        503 Service Unavailable: Estimator not initialized.
    """
    status = _require_estimator(request).get_sync_status()

    return web.Response(
        body=json.dumps({"status": status.name, "code": status.value}),
        content_type="application/json",
    )


async def handle_estimation(request: web.Request) -> web.Response:
    """
    Handle cached estimation request.

    Response: The cached sample as a camel case JSON object
    (nodeUrl, timestamp, indexerTipNumber, cacheTipNumber,
    bestKnownBlockNumber, bestKnownBlockTimestamp, indexRate, cacheRate,
    estimate, status).

    Status Codes:
        200 OK: Estimation returned.
        404 Not Found: No sample observed yet.
        503 Service Unavailable: Estimator not initialized.
    """
    sample = _require_estimator(request).get_cached_estimation()

    if sample is None:
        raise web.HTTPNotFound(reason="No sync estimation available")

    return web.Response(
        body=json.dumps(sample.to_json_dict()),
        content_type="application/json",
    )
