"""Reusable type definitions for the sync estimator."""

from .base import CamelModel, StrictBaseModel
from .quantity import parse_quantity
from .uint import BaseUint, Uint64

__all__ = [
    "BaseUint",
    "CamelModel",
    "StrictBaseModel",
    "Uint64",
    "parse_quantity",
]
