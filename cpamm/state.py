"""Pool state: reserves, share supply and the share ledger.

PoolState is immutable. Engines build a new state with `apply()` and the
pool swaps its single reference to it, so a reader holding a state can
never observe reserves from one operation and shares from another.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cpamm.errors import InvalidAsset, InvariantViolation
from cpamm.safe_int import S, SafeInt


def _frozen_ledger(entries: Mapping[str, int]) -> Mapping[str, int]:
    return MappingProxyType({holder: amount for holder, amount in entries.items() if amount})


@dataclass(frozen=True, eq=False)
class PoolState:
    """Reserves of both assets, total share supply and per-holder balances.

    Holders with a zero balance are not kept in the ledger.
    """

    reserve_a: int = 0
    reserve_b: int = 0
    total_shares: int = 0
    ledger: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def empty(cls) -> PoolState:
        """The state of a freshly created pool."""
        return cls()

    @classmethod
    def from_parts(
        cls,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
        ledger: Mapping[str, int],
    ) -> PoolState:
        """Build a state from raw parts (used when restoring a snapshot)."""
        return cls(
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            total_shares=total_shares,
            ledger=_frozen_ledger(ledger),
        )

    @property
    def has_liquidity(self) -> bool:
        """True if both reserves are non-zero."""
        return self.reserve_a > 0 and self.reserve_b > 0

    @property
    def product(self) -> int:
        """The constant-product value k = reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    def balance_of(self, holder: str) -> int:
        """Share balance of a holder (0 if unknown)."""
        return self.ledger.get(holder, 0)

    def apply(
        self,
        delta_a: int,
        delta_b: int,
        share_changes: Mapping[str, int] | None = None,
    ) -> PoolState:
        """Return a new state with signed deltas applied.

        Args:
            delta_a: Signed change to reserve_a
            delta_b: Signed change to reserve_b
            share_changes: Signed change per holder; total_shares moves by
                their sum

        Raises:
            Underflow: If any reserve, balance or the supply would go negative
            Uint256Overflow: If any resulting amount exceeds uint256
        """
        share_changes = share_changes or {}
        reserve_a = _shift(self.reserve_a, delta_a).to_uint256()
        reserve_b = _shift(self.reserve_b, delta_b).to_uint256()
        total_shares = _shift(self.total_shares, sum(share_changes.values())).to_uint256()

        ledger = dict(self.ledger)
        for holder, delta in share_changes.items():
            ledger[holder] = _shift(ledger.get(holder, 0), delta).to_uint256()

        return PoolState(
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            total_shares=total_shares,
            ledger=_frozen_ledger(ledger),
        )

    def check_invariants(self, minimum_lock: int, lock_holder: str) -> None:
        """Verify the invariants every committed state must satisfy.

        Raises:
            InvariantViolation: If any invariant does not hold
        """
        if (self.reserve_a > 0) != (self.reserve_b > 0):
            raise InvariantViolation(
                f"reserves must be both zero or both positive: "
                f"({self.reserve_a}, {self.reserve_b})"
            )

        ledger_sum = sum(self.ledger.values())
        if ledger_sum != self.total_shares:
            raise InvariantViolation(
                f"ledger sum {ledger_sum} != total_shares {self.total_shares}"
            )

        if self.total_shares == 0:
            if self.reserve_a or self.reserve_b:
                raise InvariantViolation("reserves present without any shares")
            return

        if self.total_shares < minimum_lock:
            raise InvariantViolation(
                f"total_shares {self.total_shares} below minimum lock {minimum_lock}"
            )
        if self.balance_of(lock_holder) < minimum_lock:
            raise InvariantViolation(
                f"lock holder balance {self.balance_of(lock_holder)} below {minimum_lock}"
            )


def _shift(amount: int, delta: int) -> SafeInt:
    # Negative deltas go through checked subtraction so they raise Underflow
    if delta >= 0:
        return S(amount) + delta
    return S(amount) - (-delta)


@dataclass(frozen=True)
class AssetPair:
    """The two assets a pool trades, in ledger order (a, b)."""

    asset_a: str
    asset_b: str

    def __post_init__(self) -> None:
        if not self.asset_a or not self.asset_b:
            raise ValueError("Asset identifiers must be non-empty")
        if self.asset_a == self.asset_b:
            raise ValueError(f"A pool needs two distinct assets, got {self.asset_a} twice")

    def __contains__(self, asset: object) -> bool:
        return asset == self.asset_a or asset == self.asset_b

    def is_a(self, asset: str) -> bool:
        """True if `asset` is asset_a, False if asset_b.

        Raises:
            InvalidAsset: If the asset is not in the pair
        """
        if asset == self.asset_a:
            return True
        if asset == self.asset_b:
            return False
        raise InvalidAsset(asset)

    def other(self, asset: str) -> str:
        """The asset on the other side of the pair."""
        return self.asset_b if self.is_a(asset) else self.asset_a

    def get_reserves(self, state: PoolState, asset_in: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        if self.is_a(asset_in):
            return state.reserve_a, state.reserve_b
        return state.reserve_b, state.reserve_a


class StateStore:
    """Holds the current PoolState.

    Commits replace the reference in one assignment; readers take the
    reference once and work on that snapshot.
    """

    def __init__(self, state: PoolState | None = None) -> None:
        self._current = state or PoolState.empty()

    @property
    def current(self) -> PoolState:
        return self._current

    def commit(self, state: PoolState) -> None:
        self._current = state
