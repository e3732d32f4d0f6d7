"""Pydantic models for data that crosses the pool boundary.

Operation records go to the notifier, summaries and positions go to
readers, and snapshots go to whatever persists the pool.
"""

from enum import Enum

from pydantic import BaseModel, Field

from cpamm.models.types import Identity, Uint256


class OperationKind(str, Enum):
    """The kind of mutating operation."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    SWAP = "swap"


class OperationRecord(BaseModel):
    """One completed mutating operation.

    Amounts are keyed by asset identifier. For a deposit `amounts_in` holds
    both assets and `shares` is the amount minted; for a withdrawal
    `amounts_out` holds both assets and `shares` is the amount burned; for a
    swap each side holds one asset and `shares` is zero.
    """

    kind: OperationKind
    actor: Identity
    amounts_in: dict[str, Uint256] = Field(default_factory=dict)
    amounts_out: dict[str, Uint256] = Field(default_factory=dict)
    shares: Uint256 = 0
    timestamp: int = Field(description="Clock reading when the operation committed")

    model_config = {"frozen": True}


class PoolSummary(BaseModel):
    """Reserves, supply and both directional prices.

    Prices are scaled by the pool's price scale (1e18) and are zero when the
    pool holds no liquidity.
    """

    asset_a: Identity
    asset_b: Identity
    reserve_a: Uint256
    reserve_b: Uint256
    total_shares: Uint256
    price_a: Uint256 = Field(description="Price of one unit of asset_a in asset_b, scaled")
    price_b: Uint256 = Field(description="Price of one unit of asset_b in asset_a, scaled")

    model_config = {"frozen": True}


class PositionValue(BaseModel):
    """A holder's shares and what they would redeem for right now."""

    holder: Identity
    shares: Uint256
    amount_a: Uint256
    amount_b: Uint256

    model_config = {"frozen": True}


class PoolSnapshot(BaseModel):
    """Durable form of a pool: reserves, supply and the share ledger."""

    asset_a: Identity
    asset_b: Identity
    reserve_a: Uint256 = 0
    reserve_b: Uint256 = 0
    total_shares: Uint256 = 0
    ledger: dict[str, Uint256] = Field(default_factory=dict)

    model_config = {"frozen": True}
