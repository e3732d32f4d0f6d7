"""Pool error classes.

Every failure of a pool operation is one of these. Each carries the data a
caller needs to react (for example the computed output on a slippage
failure) and a `kind` tag that stays stable across releases.

A raised PoolError always means the operation left the pool unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class PoolErrorKind(str, Enum):
    """Stable tags for pool errors."""

    ZERO_AMOUNT = "zero_amount"
    INVALID_RESERVES = "invalid_reserves"
    INSUFFICIENT_SHARES_MINTED = "insufficient_shares_minted"
    INSUFFICIENT_INITIAL_LIQUIDITY = "insufficient_initial_liquidity"
    INSUFFICIENT_SHARES_OWNED = "insufficient_shares_owned"
    INSUFFICIENT_SHARES_BURNED = "insufficient_shares_burned"
    INVALID_ASSET = "invalid_asset"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    NO_LIQUIDITY = "no_liquidity"
    SLIPPAGE_EXCEEDED = "slippage_exceeded"
    INSUFFICIENT_OUTPUT = "insufficient_output"
    TRANSACTION_EXPIRED = "transaction_expired"
    REENTRANT_CALL = "reentrant_call"
    TRANSFER_FAILED = "transfer_failed"
    INVARIANT_VIOLATION = "invariant_violation"


class PoolError(Exception):
    """Base error for pool operations."""

    kind: PoolErrorKind

    def details(self) -> dict[str, Any]:
        """Structured fields of this error, for logging."""
        return {}

    def __str__(self) -> str:
        fields = ", ".join(f"{k}={v}" for k, v in self.details().items())
        return f"{self.kind.value}({fields})"


class ZeroAmount(PoolError):
    """An amount that must be strictly positive was not."""

    kind = PoolErrorKind.ZERO_AMOUNT

    def __init__(self, field: str, value: int) -> None:
        super().__init__(field, value)
        self.field = field
        self.value = value

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "value": self.value}


class InvalidReserves(PoolError):
    """Shares exist but a reserve is zero."""

    kind = PoolErrorKind.INVALID_RESERVES

    def __init__(self, reserve_a: int, reserve_b: int) -> None:
        super().__init__(reserve_a, reserve_b)
        self.reserve_a = reserve_a
        self.reserve_b = reserve_b

    def details(self) -> dict[str, Any]:
        return {"reserve_a": self.reserve_a, "reserve_b": self.reserve_b}


class InsufficientSharesMinted(PoolError):
    """Deposit too small to mint a single share."""

    kind = PoolErrorKind.INSUFFICIENT_SHARES_MINTED

    def __init__(self, shares: int) -> None:
        super().__init__(shares)
        self.shares = shares

    def details(self) -> dict[str, Any]:
        return {"shares": self.shares}


class InsufficientInitialLiquidity(PoolError):
    """Genesis deposit does not clear the minimum lock."""

    kind = PoolErrorKind.INSUFFICIENT_INITIAL_LIQUIDITY

    def __init__(self, raw_shares: int, minimum: int) -> None:
        super().__init__(raw_shares, minimum)
        self.raw_shares = raw_shares
        self.minimum = minimum

    def details(self) -> dict[str, Any]:
        return {"raw_shares": self.raw_shares, "minimum": self.minimum}


class InsufficientSharesOwned(PoolError):
    """Holder tried to burn more shares than it can redeem."""

    kind = PoolErrorKind.INSUFFICIENT_SHARES_OWNED

    def __init__(self, holder: str, owned: int, requested: int) -> None:
        super().__init__(holder, owned, requested)
        self.holder = holder
        self.owned = owned
        self.requested = requested

    def details(self) -> dict[str, Any]:
        return {"holder": self.holder, "owned": self.owned, "requested": self.requested}


class InsufficientSharesBurned(PoolError):
    """Withdrawal would pay out zero of at least one asset."""

    kind = PoolErrorKind.INSUFFICIENT_SHARES_BURNED

    def __init__(self, amount_a: int, amount_b: int) -> None:
        super().__init__(amount_a, amount_b)
        self.amount_a = amount_a
        self.amount_b = amount_b

    def details(self) -> dict[str, Any]:
        return {"amount_a": self.amount_a, "amount_b": self.amount_b}


class InvalidAsset(PoolError):
    """Asset is not one of the pool's two assets."""

    kind = PoolErrorKind.INVALID_ASSET

    def __init__(self, asset: str) -> None:
        super().__init__(asset)
        self.asset = asset

    def details(self) -> dict[str, Any]:
        return {"asset": self.asset}


class InsufficientLiquidity(PoolError):
    """Swap against an empty reserve, or for more than the reserve holds."""

    kind = PoolErrorKind.INSUFFICIENT_LIQUIDITY

    def __init__(self, reserve_in: int, reserve_out: int) -> None:
        super().__init__(reserve_in, reserve_out)
        self.reserve_in = reserve_in
        self.reserve_out = reserve_out

    def details(self) -> dict[str, Any]:
        return {"reserve_in": self.reserve_in, "reserve_out": self.reserve_out}


class NoLiquidity(PoolError):
    """Price query on a pool with an empty reserve."""

    kind = PoolErrorKind.NO_LIQUIDITY

    def __init__(self, reserve_a: int, reserve_b: int) -> None:
        super().__init__(reserve_a, reserve_b)
        self.reserve_a = reserve_a
        self.reserve_b = reserve_b

    def details(self) -> dict[str, Any]:
        return {"reserve_a": self.reserve_a, "reserve_b": self.reserve_b}


class SlippageExceeded(PoolError):
    """Computed output is below the caller's minimum."""

    kind = PoolErrorKind.SLIPPAGE_EXCEEDED

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        super().__init__(amount_out, min_amount_out)
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out

    def details(self) -> dict[str, Any]:
        return {"amount_out": self.amount_out, "min_amount_out": self.min_amount_out}


class InsufficientOutput(PoolError):
    """Swap input too small to produce any output."""

    kind = PoolErrorKind.INSUFFICIENT_OUTPUT

    def __init__(self, amount_in: int) -> None:
        super().__init__(amount_in)
        self.amount_in = amount_in

    def details(self) -> dict[str, Any]:
        return {"amount_in": self.amount_in}


class TransactionExpired(PoolError):
    """Swap arrived after its deadline."""

    kind = PoolErrorKind.TRANSACTION_EXPIRED

    def __init__(self, deadline: int, now: int) -> None:
        super().__init__(deadline, now)
        self.deadline = deadline
        self.now = now

    def details(self) -> dict[str, Any]:
        return {"deadline": self.deadline, "now": self.now}


class ReentrantCall(PoolError):
    """A mutating operation was entered while another was in flight."""

    kind = PoolErrorKind.REENTRANT_CALL

    def __init__(self, operation: str, active_operation: str | None) -> None:
        super().__init__(operation, active_operation)
        self.operation = operation
        self.active_operation = active_operation

    def details(self) -> dict[str, Any]:
        return {"operation": self.operation, "active_operation": self.active_operation}


class TransferFailed(PoolError):
    """The transfer collaborator refused or crashed; the operation was rolled back."""

    kind = PoolErrorKind.TRANSFER_FAILED

    def __init__(
        self,
        asset: str,
        direction: str,
        amount: int,
        compensation_failed: bool = False,
    ) -> None:
        super().__init__(asset, direction, amount)
        self.asset = asset
        self.direction = direction
        self.amount = amount
        self.compensation_failed = compensation_failed

    def details(self) -> dict[str, Any]:
        return {
            "asset": self.asset,
            "direction": self.direction,
            "amount": self.amount,
            "compensation_failed": self.compensation_failed,
        }


class InvariantViolation(PoolError):
    """Internal fault: a computed state broke a pool invariant and was discarded."""

    kind = PoolErrorKind.INVARIANT_VIOLATION

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def details(self) -> dict[str, Any]:
        return {"detail": self.detail}
