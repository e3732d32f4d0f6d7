"""Pool configuration."""

import os
from dataclasses import dataclass

from cpamm.constants import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    LOCK_HOLDER,
    MINIMUM_LOCK,
    PRICE_SCALE,
)


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for a pool instance.

    Fixed when the pool is built; nothing changes it afterwards. Tests use
    it to exercise smaller locks without patching module constants.

    Attributes:
        minimum_lock: Shares locked to lock_holder at genesis (default: 1000)
        fee_numerator: Priced share of swap input, numerator (default: 997)
        fee_denominator: Priced share of swap input, denominator (default: 1000)
        price_scale: Fixed-point factor for spot prices (default: 1e18)
        lock_holder: Ledger key that owns the locked shares
    """

    minimum_lock: int = MINIMUM_LOCK
    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    price_scale: int = PRICE_SCALE
    lock_holder: str = LOCK_HOLDER

    def __post_init__(self) -> None:
        if self.minimum_lock < 0:
            raise ValueError(f"minimum_lock must be non-negative: {self.minimum_lock}")
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"fee must satisfy 0 < numerator <= denominator: "
                f"{self.fee_numerator}/{self.fee_denominator}"
            )
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")

    @classmethod
    def from_env(cls) -> "PoolConfig":
        """Build a config from environment variables.

        - CPAMM_MINIMUM_LOCK: Shares locked at genesis (default: 1000)
        - CPAMM_LOCK_HOLDER: Ledger key of the lock sink (default: zero address)
        """
        return cls(
            minimum_lock=int(os.environ.get("CPAMM_MINIMUM_LOCK", str(MINIMUM_LOCK))),
            lock_holder=os.environ.get("CPAMM_LOCK_HOLDER", LOCK_HOLDER),
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
