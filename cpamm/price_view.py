"""Read-only projections of pool state.

Nothing here takes the transaction guard. Each call reads the current
state reference once and computes from that snapshot only.
"""

from __future__ import annotations

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import InsufficientLiquidity, NoLiquidity, ZeroAmount
from cpamm.models import PoolSummary, PositionValue
from cpamm.pricing import ConstantProduct, burn_amounts, quote, spot_price
from cpamm.state import AssetPair, PoolState, StateStore


class PriceView:
    """Quotes, prices and position values for one pool."""

    def __init__(
        self,
        store: StateStore,
        assets: AssetPair,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self._store = store
        self.assets = assets
        self.config = config
        self.curve = ConstantProduct(config.fee_numerator, config.fee_denominator)

    def _liquid_state(self) -> PoolState:
        state = self._store.current
        if not state.has_liquidity:
            raise NoLiquidity(state.reserve_a, state.reserve_b)
        return state

    def quote_output(self, amount_in: int, input_asset: str) -> int:
        """Output a swap of `amount_in` would produce right now.

        Uses the same formula as SwapEngine, so an immediately following
        swap with the same inputs returns exactly this amount.

        Raises:
            ZeroAmount: amount_in is not positive
            InvalidAsset: input_asset is not in the pool
            NoLiquidity: Either reserve is empty
        """
        if amount_in <= 0:
            raise ZeroAmount("amount_in", amount_in)
        self.assets.is_a(input_asset)
        state = self._liquid_state()
        reserve_in, reserve_out = self.assets.get_reserves(state, input_asset)
        return self.curve.get_amount_out(amount_in, reserve_in, reserve_out)

    def quote_input(self, amount_out: int, output_asset: str) -> int:
        """Smallest input that makes a swap return at least `amount_out`.

        Raises:
            ZeroAmount: amount_out is not positive
            InvalidAsset: output_asset is not in the pool
            NoLiquidity: Either reserve is empty
            InsufficientLiquidity: amount_out would drain the output reserve
        """
        if amount_out <= 0:
            raise ZeroAmount("amount_out", amount_out)
        input_asset = self.assets.other(output_asset)
        state = self._liquid_state()
        reserve_in, reserve_out = self.assets.get_reserves(state, input_asset)
        amount_in = self.curve.get_amount_in(amount_out, reserve_in, reserve_out)
        if amount_in is None:
            raise InsufficientLiquidity(reserve_in, reserve_out)
        return amount_in

    def quote(self, amount: int, asset: str) -> int:
        """Fee-less amount of the other asset matching `amount` at the current ratio."""
        if amount <= 0:
            raise ZeroAmount("amount", amount)
        self.assets.is_a(asset)
        state = self._liquid_state()
        reserve_from, reserve_to = self.assets.get_reserves(state, asset)
        return quote(amount, reserve_from, reserve_to)

    def reserves(self) -> tuple[int, int]:
        """Current (reserve_a, reserve_b)."""
        state = self._store.current
        return state.reserve_a, state.reserve_b

    def total_shares(self) -> int:
        return self._store.current.total_shares

    def share_balance(self, holder: str) -> int:
        return self._store.current.balance_of(holder)

    def price_of(self, asset: str) -> int:
        """Price of one unit of `asset` in the other asset, scaled by 1e18.

        Raises:
            InvalidAsset: asset is not in the pool
            NoLiquidity: Either reserve is empty
        """
        self.assets.is_a(asset)
        state = self._liquid_state()
        reserve_this, reserve_other = self.assets.get_reserves(state, asset)
        return spot_price(reserve_this, reserve_other, self.config.price_scale)

    def pool_summary(self) -> PoolSummary:
        """Reserves, supply and both prices; prices are zero for an empty pool."""
        state = self._store.current
        price_a = price_b = 0
        if state.has_liquidity:
            scale = self.config.price_scale
            price_a = spot_price(state.reserve_a, state.reserve_b, scale)
            price_b = spot_price(state.reserve_b, state.reserve_a, scale)
        return PoolSummary(
            asset_a=self.assets.asset_a,
            asset_b=self.assets.asset_b,
            reserve_a=state.reserve_a,
            reserve_b=state.reserve_b,
            total_shares=state.total_shares,
            price_a=price_a,
            price_b=price_b,
        )

    def position_value(self, holder: str) -> PositionValue:
        """Shares held and their pro-rata claim on each reserve."""
        state = self._store.current
        shares = state.balance_of(holder)
        amount_a = amount_b = 0
        if shares and state.total_shares:
            amount_a, amount_b = burn_amounts(
                shares, state.reserve_a, state.reserve_b, state.total_shares
            )
        return PositionValue(holder=holder, shares=shares, amount_a=amount_a, amount_b=amount_b)
