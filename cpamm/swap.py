"""Swap engine: exact-input exchange of one pool asset for the other."""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.engine import Engine, Plan
from cpamm.errors import (
    InsufficientLiquidity,
    InsufficientOutput,
    InvariantViolation,
    SlippageExceeded,
    TransactionExpired,
    ZeroAmount,
)
from cpamm.models import OperationKind
from cpamm.pricing import ConstantProduct
from cpamm.state import PoolState
from cpamm.transfer import Transfer, TransferDirection


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap."""

    amount_in: int
    amount_out: int
    asset_in: str
    asset_out: str


class SwapEngine(Engine):
    """Prices swaps with the fee-inclusive constant-product formula.

    Rounding always leaves the pool the remainder, so the reserve product
    never decreases and grows strictly with every fee-paying swap.
    """

    @property
    def curve(self) -> ConstantProduct:
        return ConstantProduct(self.config.fee_numerator, self.config.fee_denominator)

    def swap(
        self,
        actor: str,
        amount_in: int,
        min_amount_out: int,
        input_asset: str,
        deadline: int,
    ) -> SwapResult:
        """Swap an exact amount of `input_asset` for the other asset.

        A deadline equal to the current clock reading is still valid.

        Raises:
            TransactionExpired: The clock is past `deadline` (checked first)
            ZeroAmount: amount_in is not positive
            InvalidAsset: input_asset is not in the pool
            InsufficientLiquidity: Either reserve is empty
            SlippageExceeded: Output below min_amount_out (carries the output)
            InsufficientOutput: Output rounds down to zero
            TransferFailed: Input could not be pulled or output not paid
        """

        def plan(state: PoolState) -> Plan[SwapResult]:
            return self._plan_swap(state, actor, amount_in, min_amount_out, input_asset, deadline)

        return self._execute(OperationKind.SWAP, actor, plan)

    def _plan_swap(
        self,
        state: PoolState,
        actor: str,
        amount_in: int,
        min_amount_out: int,
        input_asset: str,
        deadline: int,
    ) -> Plan[SwapResult]:
        now = self.context.clock()
        if now > deadline:
            raise TransactionExpired(deadline, now)
        if amount_in <= 0:
            raise ZeroAmount("amount_in", amount_in)

        assets = self.context.assets
        input_is_a = assets.is_a(input_asset)
        reserve_in, reserve_out = assets.get_reserves(state, input_asset)
        if reserve_in == 0 or reserve_out == 0:
            raise InsufficientLiquidity(reserve_in, reserve_out)

        amount_out = self.curve.get_amount_out(amount_in, reserve_in, reserve_out)
        if amount_out < min_amount_out:
            raise SlippageExceeded(amount_out, min_amount_out)
        if amount_out == 0:
            raise InsufficientOutput(amount_in)

        if input_is_a:
            new_state = state.apply(amount_in, -amount_out)
        else:
            new_state = state.apply(-amount_out, amount_in)

        if new_state.product < state.product:
            raise InvariantViolation(
                f"swap would shrink the reserve product: {state.product} -> {new_state.product}"
            )

        output_asset = assets.other(input_asset)
        return Plan(
            state=new_state,
            transfers=(
                Transfer(TransferDirection.IN, input_asset, actor, amount_in),
                Transfer(TransferDirection.OUT, output_asset, actor, amount_out),
            ),
            result=SwapResult(
                amount_in=amount_in,
                amount_out=amount_out,
                asset_in=input_asset,
                asset_out=output_asset,
            ),
            amounts_in={input_asset: amount_in},
            amounts_out={output_asset: amount_out},
        )
