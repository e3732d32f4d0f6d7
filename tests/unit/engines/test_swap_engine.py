"""Tests for swaps."""

import pytest

from cpamm.errors import (
    InsufficientLiquidity,
    InsufficientOutput,
    InvalidAsset,
    SlippageExceeded,
    TransactionExpired,
    ZeroAmount,
)
from cpamm.models import OperationKind
from tests.helpers import BOB, E18, FUNDING, GENESIS_A, GENESIS_B, NOW, TKA, TKB, TKC


def reference_output() -> int:
    """Exact output of 100 A into the 1000 A / 2000 B reference pool."""
    amount_in = 100 * E18
    return (amount_in * 997 * GENESIS_B) // (GENESIS_A * 1000 + amount_in * 997)


class TestSwapPricing:
    """Tests for swap output and state effects."""

    def test_reference_swap_exact(self, seeded_pool):
        result = seeded_pool.swap(BOB, 100 * E18, 0, TKA, NOW)

        assert result.amount_out == reference_output()
        assert result.asset_in == TKA
        assert result.asset_out == TKB
        assert seeded_pool.reserves() == (GENESIS_A + 100 * E18, GENESIS_B - reference_output())

    def test_swap_b_for_a(self, seeded_pool):
        amount_in = 50 * E18
        expected = (amount_in * 997 * GENESIS_A) // (GENESIS_B * 1000 + amount_in * 997)

        result = seeded_pool.swap(BOB, amount_in, 0, TKB, NOW)

        assert result.amount_out == expected
        assert result.asset_out == TKA
        assert seeded_pool.reserves() == (GENESIS_A - expected, GENESIS_B + amount_in)

    def test_swap_moves_assets(self, seeded_pool, ledger):
        result = seeded_pool.swap(BOB, 100 * E18, 0, TKA, NOW)

        assert ledger.balance_of(TKA, BOB) == FUNDING - 100 * E18
        assert ledger.balance_of(TKB, BOB) == FUNDING + result.amount_out
        assert ledger.custody_of(TKB) == GENESIS_B - result.amount_out

    def test_shares_untouched(self, seeded_pool):
        ledger_before = dict(seeded_pool.state.ledger)
        seeded_pool.swap(BOB, 100 * E18, 0, TKA, NOW)
        assert dict(seeded_pool.state.ledger) == ledger_before

    def test_product_strictly_increases(self, seeded_pool):
        for amount_in, asset in [(E18, TKA), (3 * E18, TKB), (12345, TKA), (250 * E18, TKB)]:
            product_before = seeded_pool.state.product
            seeded_pool.swap(BOB, amount_in, 0, asset, NOW)
            assert seeded_pool.state.product > product_before

    def test_swap_emits_record(self, seeded_pool, notifier):
        result = seeded_pool.swap(BOB, 100 * E18, 0, TKA, NOW)

        record = notifier.of_kind(OperationKind.SWAP)[0]
        assert record.actor == BOB
        assert record.amounts_in == {TKA: 100 * E18}
        assert record.amounts_out == {TKB: result.amount_out}
        assert record.shares == 0


class TestSlippage:
    """Tests for the minimum-output boundary."""

    def test_min_equal_to_output_succeeds(self, seeded_pool):
        result = seeded_pool.swap(BOB, 100 * E18, reference_output(), TKA, NOW)
        assert result.amount_out == reference_output()

    def test_min_one_above_output_fails(self, seeded_pool):
        reserves_before = seeded_pool.reserves()

        with pytest.raises(SlippageExceeded) as exc_info:
            seeded_pool.swap(BOB, 100 * E18, reference_output() + 1, TKA, NOW)

        assert exc_info.value.amount_out == reference_output()
        assert exc_info.value.min_amount_out == reference_output() + 1
        assert seeded_pool.reserves() == reserves_before

    def test_zero_output_fails(self, seeded_pool):
        """1 wei of B buys nothing at a 2:1 ratio with the fee applied."""
        reserves_before = seeded_pool.reserves()
        with pytest.raises(InsufficientOutput) as exc_info:
            seeded_pool.swap(BOB, 1, 0, TKB, NOW)
        assert seeded_pool.reserves() == reserves_before
        assert exc_info.value.amount_in == 1

    def test_zero_output_with_minimum_reports_slippage(self, seeded_pool):
        with pytest.raises(SlippageExceeded) as exc_info:
            seeded_pool.swap(BOB, 1, 1, TKB, NOW)
        assert exc_info.value.amount_out == 0


class TestDeadline:
    """Tests for the swap deadline."""

    def test_deadline_equal_to_now_succeeds(self, seeded_pool):
        seeded_pool.swap(BOB, E18, 0, TKA, NOW)

    def test_deadline_before_now_fails(self, seeded_pool):
        reserves_before = seeded_pool.reserves()

        with pytest.raises(TransactionExpired) as exc_info:
            seeded_pool.swap(BOB, E18, 0, TKA, NOW - 1)

        assert exc_info.value.deadline == NOW - 1
        assert exc_info.value.now == NOW
        assert seeded_pool.reserves() == reserves_before

    def test_deadline_checked_first(self, pool):
        """An expired swap reports expiry even when every other input is bad."""
        with pytest.raises(TransactionExpired):
            pool.swap(BOB, 0, 0, TKC, NOW - 1)

    def test_clock_advance_expires(self, seeded_pool, clock):
        deadline = NOW + 30
        seeded_pool.swap(BOB, E18, 0, TKA, deadline)
        clock.advance(31)
        with pytest.raises(TransactionExpired):
            seeded_pool.swap(BOB, E18, 0, TKA, deadline)


class TestSwapValidation:
    """Tests for input validation order and errors."""

    def test_zero_amount(self, seeded_pool):
        with pytest.raises(ZeroAmount) as exc_info:
            seeded_pool.swap(BOB, 0, 0, TKA, NOW)
        assert exc_info.value.field == "amount_in"

    def test_invalid_asset(self, seeded_pool):
        with pytest.raises(InvalidAsset) as exc_info:
            seeded_pool.swap(BOB, E18, 0, TKC, NOW)
        assert exc_info.value.asset == TKC

    def test_empty_pool(self, pool):
        with pytest.raises(InsufficientLiquidity) as exc_info:
            pool.swap(BOB, E18, 0, TKA, NOW)
        assert (exc_info.value.reserve_in, exc_info.value.reserve_out) == (0, 0)

    def test_zero_amount_before_invalid_asset(self, seeded_pool):
        with pytest.raises(ZeroAmount):
            seeded_pool.swap(BOB, 0, 0, TKC, NOW)

    def test_rejections_emit_no_record(self, seeded_pool, notifier):
        with pytest.raises(InvalidAsset):
            seeded_pool.swap(BOB, E18, 0, TKC, NOW)
        assert notifier.of_kind(OperationKind.SWAP) == []
