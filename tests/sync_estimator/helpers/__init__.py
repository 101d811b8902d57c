"""Test helpers for sync_estimator unit tests."""

from __future__ import annotations

from .builders import (
    BASE_MS,
    NODE_A,
    NODE_B,
    make_best_known,
    make_observation,
    make_sample,
    make_tip_header,
)
from .mocks import FakeTime, MockNodeRpc, QueueLineReader, StaticNode

__all__ = [
    "BASE_MS",
    "FakeTime",
    "MockNodeRpc",
    "NODE_A",
    "NODE_B",
    "QueueLineReader",
    "StaticNode",
    "make_best_known",
    "make_observation",
    "make_sample",
    "make_tip_header",
]
