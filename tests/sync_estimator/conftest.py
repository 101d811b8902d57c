"""
Shared pytest fixtures for all sync_estimator tests.

Provides the fake time source, the scripted node and a wired estimator.
"""

from __future__ import annotations

import pytest

from sync_estimator.estimator import Clock, NodeSelector, SyncEstimator
from sync_estimator.storage import MemoryCursorStore
from tests.sync_estimator.helpers import NODE_A, FakeTime, MockNodeRpc


@pytest.fixture
def fake_time() -> FakeTime:
    """Time source starting at the test epoch."""
    return FakeTime()


@pytest.fixture
def clock(fake_time: FakeTime) -> Clock:
    """Clock driven by the fake time source."""
    return Clock(time_fn=fake_time)


@pytest.fixture
def rpc() -> MockNodeRpc:
    """Scripted node."""
    return MockNodeRpc()


@pytest.fixture
def selector() -> NodeSelector:
    """Selector on the default node with no debounce delay."""
    return NodeSelector(url=NODE_A, debounce_seconds=0.0)


@pytest.fixture
def cursor() -> MemoryCursorStore:
    """In-memory cursor store."""
    return MemoryCursorStore()


@pytest.fixture
def estimator(
    rpc: MockNodeRpc, selector: NodeSelector, clock: Clock, cursor: MemoryCursorStore
) -> SyncEstimator:
    """Estimator wired to the scripted node and fake clock."""
    return SyncEstimator(rpc=rpc, nodes=selector, clock=clock, cursor=cursor)
