"""Constant-product liquidity pool - accounting and pricing engine."""

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import PoolError, PoolErrorKind
from cpamm.ledger import InMemoryTokenLedger
from cpamm.pool import LiquidityPool

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_POOL_CONFIG",
    "InMemoryTokenLedger",
    "LiquidityPool",
    "PoolConfig",
    "PoolError",
    "PoolErrorKind",
    "__version__",
]
