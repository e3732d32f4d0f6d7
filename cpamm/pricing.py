"""Constant-product pricing and share math.

Swaps hold x * y = k with a 0.3% fee on the input amount:

    amount_out = (in * 997 * reserve_out) / (reserve_in * 1000 + in * 997)

Shares are priced by geometric mean at genesis and proportionally after:

    genesis:     shares = floor(sqrt(amount_a * amount_b))
    subsequent:  shares = min(amount_a * T / reserve_a, amount_b * T / reserve_b)
    burn:        amount_x = shares * reserve_x / T

All formulas multiply before they divide and floor the result, so rounding
always favors the pool. Reordering any of them changes results.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE
from cpamm.safe_int import S


@dataclass(frozen=True)
class ConstantProduct:
    """Constant-product swap math for one fee tier.

    Formula: amount_out = (amount_in * fee_num * reserve_out)
                          / (reserve_in * fee_den + amount_in * fee_num)
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for an exact input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, rounded down (0 for non-positive inputs)
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * self.fee_numerator
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * self.fee_denominator + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int | None:
        """Calculate the minimum input that yields at least amount_out.

        Formula: amount_in = (res_in * out * fee_den) / ((res_out - out) * fee_num) + 1

        Returns:
            Required input amount, 0 for non-positive inputs, or None if
            amount_out cannot be reached (it would drain the reserve)
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            return None

        numerator = S(reserve_in) * S(amount_out) * self.fee_denominator
        denominator = (S(reserve_out) - S(amount_out)) * self.fee_numerator

        return ((numerator // denominator) + 1).value


def quote(amount: int, reserve_from: int, reserve_to: int) -> int:
    """Fee-less proportional equivalent of `amount` at the current ratio.

    Used to size the second leg of a balanced deposit.
    """
    return ((S(amount) * S(reserve_to)) // S(reserve_from)).value


def spot_price(reserve_this: int, reserve_other: int, scale: int = PRICE_SCALE) -> int:
    """Price of one unit of an asset in the other asset, fixed-point scaled."""
    return ((S(reserve_other) * scale) // S(reserve_this)).value


def genesis_shares(amount_a: int, amount_b: int) -> int:
    """Shares created by the first deposit: floor(sqrt(a * b))."""
    return (S(amount_a) * S(amount_b)).isqrt().value


def mint_shares(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """Shares minted by a deposit into a live pool.

    The weaker side decides; whatever the other side contributes beyond the
    current ratio stays in the reserves without being credited.
    """
    shares_a = (S(amount_a) * S(total_shares)) // S(reserve_a)
    shares_b = (S(amount_b) * S(total_shares)) // S(reserve_b)
    return shares_a.min(shares_b).value


def burn_amounts(
    shares: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Assets paid out for burning `shares`, rounded down."""
    amount_a = (S(shares) * S(reserve_a)) // S(total_shares)
    amount_b = (S(shares) * S(reserve_b)) // S(total_shares)
    return amount_a.value, amount_b.value
