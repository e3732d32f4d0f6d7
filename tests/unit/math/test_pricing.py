"""Tests for constant-product pricing and share math."""

import pytest

from cpamm.pricing import (
    ConstantProduct,
    burn_amounts,
    genesis_shares,
    mint_shares,
    quote,
    spot_price,
)
from tests.helpers import E18, GENESIS_TOTAL_SHARES

# Default 0.3% fee tier
constant_product = ConstantProduct()


class TestGetAmountOut:
    """Tests for the fee-inclusive output formula."""

    def test_reference_swap_is_exact(self):
        """100 A into 1000 A / 2000 B matches the closed form exactly."""
        amount_in = 100 * E18
        reserve_in = 1000 * E18
        reserve_out = 2000 * E18

        expected = (amount_in * 997 * reserve_out) // (reserve_in * 1000 + amount_in * 997)
        assert constant_product.get_amount_out(amount_in, reserve_in, reserve_out) == expected

    def test_output_below_fee_free_output(self):
        """Fee makes output strictly less than the fee-free constant-product output."""
        amount_out = constant_product.get_amount_out(10 * E18, 1000 * E18, 1000 * E18)
        fee_free = (10 * E18 * 1000 * E18) // (1000 * E18 + 10 * E18)
        assert amount_out < fee_free

    def test_zero_input_returns_zero(self):
        assert constant_product.get_amount_out(0, 100, 100) == 0

    def test_zero_reserves_returns_zero(self):
        assert constant_product.get_amount_out(100, 0, 100) == 0
        assert constant_product.get_amount_out(100, 100, 0) == 0

    def test_dust_input_rounds_to_zero(self):
        """Tiny input against a deep pool produces no output."""
        assert constant_product.get_amount_out(1, 10**30, 10**18) == 0

    def test_never_drains_reserve(self):
        """Even a huge input leaves part of the output reserve."""
        reserve_out = 2000 * E18
        assert constant_product.get_amount_out(10**40, 1000 * E18, reserve_out) < reserve_out

    @pytest.mark.parametrize(
        "amount_in,reserve_in,reserve_out",
        [
            (1, 1_000, 1_000),
            (997, 1_000_000, 3),
            (10**18, 10**21, 2 * 10**21),
            (123_456_789, 987_654_321, 555_555_555),
            (10**25, 10**18, 10**30),
        ],
    )
    def test_product_never_decreases(self, amount_in, reserve_in, reserve_out):
        """(reserve_in + in) * (reserve_out - out) >= reserve_in * reserve_out."""
        amount_out = constant_product.get_amount_out(amount_in, reserve_in, reserve_out)
        assert (reserve_in + amount_in) * (reserve_out - amount_out) > reserve_in * reserve_out

    def test_custom_fee_tier(self):
        """A fee-free curve prices by pure constant product."""
        curve = ConstantProduct(fee_numerator=1000, fee_denominator=1000)
        assert curve.get_amount_out(100, 900, 1000) == 100


class TestGetAmountIn:
    """Tests for the inverse formula."""

    def test_input_is_sufficient(self):
        """Quoted input always produces at least the desired output."""
        reserve_in, reserve_out = 1000 * E18, 2000 * E18
        desired = 150 * E18
        amount_in = constant_product.get_amount_in(desired, reserve_in, reserve_out)
        assert constant_product.get_amount_out(amount_in, reserve_in, reserve_out) >= desired

    def test_input_is_minimal(self):
        """One unit less of the quoted input falls short of the desired output."""
        reserve_in, reserve_out = 1000 * E18, 2000 * E18
        desired = 150 * E18
        amount_in = constant_product.get_amount_in(desired, reserve_in, reserve_out)
        assert constant_product.get_amount_out(amount_in - 1, reserve_in, reserve_out) < desired

    def test_draining_output_returns_none(self):
        assert constant_product.get_amount_in(100, 1000, 100) is None
        assert constant_product.get_amount_in(101, 1000, 100) is None

    def test_non_positive_returns_zero(self):
        assert constant_product.get_amount_in(0, 100, 100) == 0
        assert constant_product.get_amount_in(10, 0, 100) == 0


class TestShareMath:
    """Tests for genesis, mint and burn formulas."""

    def test_genesis_reference_value(self):
        assert genesis_shares(1000 * E18, 2000 * E18) == GENESIS_TOTAL_SHARES

    def test_genesis_floors(self):
        assert genesis_shares(2, 3) == 2  # sqrt(6) = 2.449...

    def test_mint_proportional(self):
        """Same-ratio deposit of half the reserves mints half the supply (floored)."""
        total = GENESIS_TOTAL_SHARES
        shares = mint_shares(500 * E18, 1000 * E18, 1000 * E18, 2000 * E18, total)
        assert shares == total // 2

    def test_mint_takes_weaker_side(self):
        """Excess on one side earns nothing."""
        total = 10_000
        balanced = mint_shares(100, 200, 1_000, 2_000, total)
        lopsided = mint_shares(100, 2_000_000, 1_000, 2_000, total)
        assert balanced == lopsided == 1_000

    def test_burn_pro_rata(self):
        assert burn_amounts(250, 1_000, 3_000, 1_000) == (250, 750)

    def test_burn_floors(self):
        assert burn_amounts(1, 10, 10, 3) == (3, 3)


class TestQuoteAndSpotPrice:
    """Tests for fee-less helpers."""

    def test_quote(self):
        assert quote(10 * E18, 1000 * E18, 2000 * E18) == 20 * E18

    def test_spot_price_scaled(self):
        assert spot_price(1000 * E18, 2000 * E18) == 2 * 10**18
        assert spot_price(2000 * E18, 1000 * E18) == 5 * 10**17

    def test_spot_price_custom_scale(self):
        assert spot_price(3, 1, scale=10**6) == 333_333
