"""Liquidity engine: deposits mint shares, withdrawals burn them."""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.engine import Engine, Plan
from cpamm.errors import (
    InsufficientInitialLiquidity,
    InsufficientSharesBurned,
    InsufficientSharesMinted,
    InsufficientSharesOwned,
    InvalidReserves,
    ZeroAmount,
)
from cpamm.models import OperationKind
from cpamm.pricing import burn_amounts, genesis_shares, mint_shares
from cpamm.state import PoolState
from cpamm.transfer import Transfer, TransferDirection


@dataclass(frozen=True)
class DepositResult:
    """Outcome of a deposit."""

    shares: int
    amount_a: int
    amount_b: int
    # True for the first deposit into an empty pool
    genesis: bool = False


@dataclass(frozen=True)
class WithdrawResult:
    """Outcome of a withdrawal."""

    shares: int
    amount_a: int
    amount_b: int


class LiquidityEngine(Engine):
    """Mints shares against deposits and burns them against withdrawals.

    Genesis deposits are priced by geometric mean and lock
    `config.minimum_lock` shares to `config.lock_holder` forever. Later
    deposits mint proportionally to the weaker side of the pair.
    """

    def deposit(self, actor: str, amount_a: int, amount_b: int) -> DepositResult:
        """Deposit both assets and receive shares.

        Raises:
            ZeroAmount: If either amount is not positive
            InsufficientInitialLiquidity: Genesis deposit too small to cover the lock
            InvalidReserves: Shares exist but a reserve is zero
            InsufficientSharesMinted: Deposit too small to mint a share
            TransferFailed: The assets could not be pulled in
        """

        def plan(state: PoolState) -> Plan[DepositResult]:
            return self._plan_deposit(state, actor, amount_a, amount_b)

        return self._execute(OperationKind.DEPOSIT, actor, plan)

    def withdraw(self, actor: str, shares: int) -> WithdrawResult:
        """Burn shares and receive both assets.

        Raises:
            ZeroAmount: If shares is not positive
            InsufficientSharesOwned: Actor cannot redeem that many shares
            InsufficientSharesBurned: Payout of either asset would be zero
            TransferFailed: The assets could not be paid out
        """

        def plan(state: PoolState) -> Plan[WithdrawResult]:
            return self._plan_withdraw(state, actor, shares)

        return self._execute(OperationKind.WITHDRAW, actor, plan)

    def redeemable_shares(self, state: PoolState, holder: str) -> int:
        """Shares `holder` may burn; the lock holder's locked amount is excluded."""
        balance = state.balance_of(holder)
        if holder == self.config.lock_holder and state.total_shares > 0:
            return max(0, balance - self.config.minimum_lock)
        return balance

    # --- Planning ---

    def _plan_deposit(
        self,
        state: PoolState,
        actor: str,
        amount_a: int,
        amount_b: int,
    ) -> Plan[DepositResult]:
        if amount_a <= 0:
            raise ZeroAmount("amount_a", amount_a)
        if amount_b <= 0:
            raise ZeroAmount("amount_b", amount_b)

        share_changes: dict[str, int]
        if state.total_shares == 0:
            raw_shares = genesis_shares(amount_a, amount_b)
            minimum_lock = self.config.minimum_lock
            if raw_shares <= minimum_lock:
                raise InsufficientInitialLiquidity(raw_shares, minimum_lock)
            shares = raw_shares - minimum_lock
            share_changes = {self.config.lock_holder: minimum_lock}
            share_changes[actor] = share_changes.get(actor, 0) + shares
            genesis = True
        else:
            if state.reserve_a == 0 or state.reserve_b == 0:
                raise InvalidReserves(state.reserve_a, state.reserve_b)
            shares = mint_shares(
                amount_a, amount_b, state.reserve_a, state.reserve_b, state.total_shares
            )
            share_changes = {actor: shares}
            genesis = False

        if shares <= 0:
            raise InsufficientSharesMinted(shares)

        assets = self.context.assets
        return Plan(
            state=state.apply(amount_a, amount_b, share_changes),
            transfers=(
                Transfer(TransferDirection.IN, assets.asset_a, actor, amount_a),
                Transfer(TransferDirection.IN, assets.asset_b, actor, amount_b),
            ),
            result=DepositResult(
                shares=shares, amount_a=amount_a, amount_b=amount_b, genesis=genesis
            ),
            amounts_in={assets.asset_a: amount_a, assets.asset_b: amount_b},
            shares=shares,
        )

    def _plan_withdraw(self, state: PoolState, actor: str, shares: int) -> Plan[WithdrawResult]:
        if shares <= 0:
            raise ZeroAmount("shares", shares)

        owned = self.redeemable_shares(state, actor)
        if owned < shares:
            raise InsufficientSharesOwned(actor, owned, shares)

        amount_a, amount_b = burn_amounts(
            shares, state.reserve_a, state.reserve_b, state.total_shares
        )
        if amount_a == 0 or amount_b == 0:
            raise InsufficientSharesBurned(amount_a, amount_b)

        assets = self.context.assets
        return Plan(
            state=state.apply(-amount_a, -amount_b, {actor: -shares}),
            transfers=(
                Transfer(TransferDirection.OUT, assets.asset_a, actor, amount_a),
                Transfer(TransferDirection.OUT, assets.asset_b, actor, amount_b),
            ),
            result=WithdrawResult(shares=shares, amount_a=amount_a, amount_b=amount_b),
            amounts_out={assets.asset_a: amount_a, assets.asset_b: amount_b},
            shares=shares,
        )
