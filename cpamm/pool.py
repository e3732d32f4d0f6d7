"""LiquidityPool: one two-asset constant-product pool.

Wires the state store, transaction guard, both engines and the price view
around a single transfer collaborator.

Usage:
    ledger = InMemoryTokenLedger()
    ledger.mint("TKA", "alice", 10_000 * 10**18)
    ledger.mint("TKB", "alice", 20_000 * 10**18)

    pool = LiquidityPool("TKA", "TKB", ledger)
    pool.deposit("alice", 1_000 * 10**18, 2_000 * 10**18)
    out = pool.quote_output(10**18, "TKA")
    pool.swap("alice", 10**18, out, "TKA", deadline=int(time.time()) + 60)
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.engine import EngineContext
from cpamm.events import Notifier, log_operation
from cpamm.guard import TransactionGuard
from cpamm.liquidity import DepositResult, LiquidityEngine, WithdrawResult
from cpamm.models import PoolSnapshot, PoolSummary, PositionValue
from cpamm.price_view import PriceView
from cpamm.state import AssetPair, PoolState, StateStore
from cpamm.swap import SwapEngine, SwapResult
from cpamm.transfer import TransferCollaborator

logger = structlog.get_logger()


def system_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


class LiquidityPool:
    """A constant-product pool over `asset_a` and `asset_b`.

    Mutating operations (deposit, withdraw, swap) are serialized by the
    transaction guard. Read operations go straight to the price view.
    """

    def __init__(
        self,
        asset_a: str,
        asset_b: str,
        transfers: TransferCollaborator,
        *,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        clock: Callable[[], int] = system_clock,
        notifier: Notifier = log_operation,
        state: PoolState | None = None,
    ) -> None:
        self.assets = AssetPair(asset_a, asset_b)
        self.config = config
        self.guard = TransactionGuard()

        initial = state or PoolState.empty()
        initial.check_invariants(config.minimum_lock, config.lock_holder)
        self._store = StateStore(initial)

        context = EngineContext(
            store=self._store,
            assets=self.assets,
            guard=self.guard,
            transfers=transfers,
            clock=clock,
            notifier=notifier,
            config=config,
        )
        self.liquidity = LiquidityEngine(context)
        self.swaps = SwapEngine(context)
        self.view = PriceView(self._store, self.assets, config)

    @property
    def state(self) -> PoolState:
        """The current committed state."""
        return self._store.current

    # --- Mutating operations ---

    def deposit(self, actor: str, amount_a: int, amount_b: int) -> DepositResult:
        return self.liquidity.deposit(actor, amount_a, amount_b)

    def withdraw(self, actor: str, shares: int) -> WithdrawResult:
        return self.liquidity.withdraw(actor, shares)

    def swap(
        self,
        actor: str,
        amount_in: int,
        min_amount_out: int,
        input_asset: str,
        deadline: int,
    ) -> SwapResult:
        return self.swaps.swap(actor, amount_in, min_amount_out, input_asset, deadline)

    # --- Read operations ---

    def quote_output(self, amount_in: int, input_asset: str) -> int:
        return self.view.quote_output(amount_in, input_asset)

    def quote_input(self, amount_out: int, output_asset: str) -> int:
        return self.view.quote_input(amount_out, output_asset)

    def reserves(self) -> tuple[int, int]:
        return self.view.reserves()

    def price_of(self, asset: str) -> int:
        return self.view.price_of(asset)

    def pool_summary(self) -> PoolSummary:
        return self.view.pool_summary()

    def position_value(self, holder: str) -> PositionValue:
        return self.view.position_value(holder)

    # --- Persistence ---

    def snapshot(self) -> PoolSnapshot:
        """Durable form of the current state."""
        state = self._store.current
        return PoolSnapshot(
            asset_a=self.assets.asset_a,
            asset_b=self.assets.asset_b,
            reserve_a=state.reserve_a,
            reserve_b=state.reserve_b,
            total_shares=state.total_shares,
            ledger=dict(state.ledger),
        )

    @classmethod
    def restore(
        cls,
        snapshot: PoolSnapshot,
        transfers: TransferCollaborator,
        **kwargs,
    ) -> LiquidityPool:
        """Rebuild a pool from a snapshot.

        Raises:
            InvariantViolation: The snapshot does not describe a valid pool
        """
        state = PoolState.from_parts(
            snapshot.reserve_a,
            snapshot.reserve_b,
            snapshot.total_shares,
            snapshot.ledger,
        )
        pool = cls(snapshot.asset_a, snapshot.asset_b, transfers, state=state, **kwargs)
        logger.info(
            "pool_restored",
            asset_a=snapshot.asset_a,
            asset_b=snapshot.asset_b,
            total_shares=snapshot.total_shares,
            holders=len(snapshot.ledger),
        )
        return pool
