"""Boundary models for pool records, views and snapshots."""

from cpamm.models.records import (
    OperationKind,
    OperationRecord,
    PoolSnapshot,
    PoolSummary,
    PositionValue,
)
from cpamm.models.types import Identity, Uint256, validate_uint256

__all__ = [
    "Identity",
    "OperationKind",
    "OperationRecord",
    "PoolSnapshot",
    "PoolSummary",
    "PositionValue",
    "Uint256",
    "validate_uint256",
]
