"""Tests for ECLPPool.on_swap against a scripted math engine."""

from decimal import Decimal

import pytest

from eclp.curve import AssetBoundsExceeded, InvariantBracket
from eclp.models.requests import SwapKind
from eclp.oracle import OracleState
from eclp.pool import InvalidTokenPair, PoolControls, PoolPaused
from tests.helpers import (
    OTHER_TOKEN,
    TOKEN_A,
    TOKEN_B,
    ScriptedMathEngine,
    make_block,
    make_pool,
    make_swap_request,
)


@pytest.fixture
def swap_engine() -> ScriptedMathEngine:
    return ScriptedMathEngine(invariant=500, error=3, amount_out=97, amount_in=99)


class TestSwapGivenIn:
    def test_fee_deducted_before_curve(self, swap_engine):
        """Exact-in 100 with a 1% fee routes 99 into the curve."""
        pool = make_pool(engine=swap_engine, swap_fee="0.01")
        amount_out = pool.on_swap(make_swap_request(100), 1000, 1000, make_block())

        [call] = swap_engine.calls_to("calc_out_given_in")
        assert call["amount_in"] == 99
        assert call["token_in_is_first"] is True
        assert amount_out == 97

    def test_fee_rounds_up(self, swap_engine):
        """0.3% of 10 is 0.03, charged as a whole unit."""
        pool = make_pool(engine=swap_engine, swap_fee="0.003")
        pool.on_swap(make_swap_request(10), 1000, 1000, make_block())
        [call] = swap_engine.calls_to("calc_out_given_in")
        assert call["amount_in"] == 9

    def test_bracket_pads_upper_side_only(self, swap_engine):
        pool = make_pool(engine=swap_engine)
        pool.on_swap(make_swap_request(100), 1000, 1000, make_block())
        [call] = swap_engine.calls_to("calc_out_given_in")
        assert call["invariant"] == InvariantBracket(upper=506, lower=500)

    def test_reversed_pair_orders_balances(self, swap_engine):
        pool = make_pool(engine=swap_engine)
        request = make_swap_request(100, token_in=TOKEN_B, token_out=TOKEN_A)
        pool.on_swap(request, 700, 300, make_block())

        [call] = swap_engine.calls_to("calc_out_given_in")
        assert call["token_in_is_first"] is False
        assert call["balances"] == [300, 700]
        [invariant_call] = swap_engine.calls_to("calculate_invariant_with_error")
        assert invariant_call["balances"] == [300, 700]

    def test_output_scaled_down_rounding_down(self):
        """Token B has 6 decimals: 18-decimal output is floored to native units."""
        engine = ScriptedMathEngine(invariant=500, amount_out=5 * 10**12 - 1)
        pool = make_pool(engine=engine, scaling_factors=(1, 10**12))
        amount_out = pool.on_swap(make_swap_request(10**18), 10**21, 10**9, make_block())

        [call] = engine.calls_to("calc_out_given_in")
        assert call["balances"] == [10**21, 10**21]
        assert amount_out == 4


class TestSwapGivenOut:
    def test_fee_grossed_up(self, swap_engine):
        """99 before fees at 1% is exactly 100 after."""
        pool = make_pool(engine=swap_engine, swap_fee="0.01")
        request = make_swap_request(97, kind=SwapKind.GIVEN_OUT)
        amount_in = pool.on_swap(request, 1000, 1000, make_block())

        [call] = swap_engine.calls_to("calc_in_given_out")
        assert call["amount_out"] == 97
        assert amount_in == 100

    def test_gross_up_rounds_up(self):
        engine = ScriptedMathEngine(invariant=500, amount_in=100)
        pool = make_pool(engine=engine, swap_fee="0.01")
        request = make_swap_request(97, kind=SwapKind.GIVEN_OUT)
        # 100 / 0.99 = 101.01...
        assert pool.on_swap(request, 1000, 1000, make_block()) == 102

    def test_input_scaled_down_rounding_up(self):
        """Token A has 6 decimals: 18-decimal input is rounded up to native units."""
        engine = ScriptedMathEngine(invariant=500, amount_in=4 * 10**12 + 1)
        pool = make_pool(engine=engine, scaling_factors=(10**12, 1))
        request = make_swap_request(10**18, kind=SwapKind.GIVEN_OUT)
        assert pool.on_swap(request, 10**9, 10**21, make_block()) == 5


class TestSwapFailures:
    @pytest.mark.parametrize(
        "token_in, token_out",
        [
            (TOKEN_A, OTHER_TOKEN),
            (OTHER_TOKEN, TOKEN_B),
            (TOKEN_A, TOKEN_A),
        ],
    )
    def test_invalid_token_pair(self, swap_engine, token_in, token_out):
        pool = make_pool(engine=swap_engine)
        request = make_swap_request(100, token_in=token_in, token_out=token_out)
        with pytest.raises(InvalidTokenPair):
            pool.on_swap(request, 1000, 1000, make_block())
        assert swap_engine.calls_to("calculate_invariant_with_error") == []

    def test_paused_pool_rejects_swaps(self, swap_engine):
        pool = make_pool(engine=swap_engine, controls=PoolControls(paused=True))
        with pytest.raises(PoolPaused):
            pool.on_swap(make_swap_request(100), 1000, 1000, make_block())
        assert swap_engine.calls_to("calculate_invariant_with_error") == []

    def test_engine_failure_leaves_oracle_untouched(self, swap_engine):
        swap_engine.fail_with = AssetBoundsExceeded("past the end of the curve")
        pool = make_pool(engine=swap_engine, oracle_enabled=True)
        before = pool.oracle_state

        with pytest.raises(AssetBoundsExceeded):
            pool.on_swap(make_swap_request(100, last_change_block=1), 1000, 1000, make_block())

        assert pool.oracle_state == before
        assert pool.samples[0].timestamp == 0
        assert pool.samples[1].timestamp == 0


class TestSwapOracle:
    def test_swap_samples_pre_swap_state(self, swap_engine):
        pool = make_pool(engine=swap_engine, oracle_enabled=True)
        block = make_block(number=10)
        pool.on_swap(make_swap_request(100, last_change_block=9), 1000, 1000, block)

        [price_call] = swap_engine.calls_to("calculate_price")
        # Point invariant, not the padded upper bound
        assert price_call["invariant"] == 500
        assert price_call["balances"] == [1000, 1000]
        assert pool.oracle_state.index == 1
        assert pool.oracle_state.sample_creation_timestamp == block.timestamp
        assert pool.samples[1].timestamp == block.timestamp

    def test_same_block_samples_once(self, swap_engine):
        pool = make_pool(engine=swap_engine, oracle_enabled=True)
        block = make_block(number=10)
        pool.on_swap(make_swap_request(100, last_change_block=9), 1000, 1000, block)
        state_after_first = pool.oracle_state
        sample_after_first = pool.samples[1]

        # The first swap changed balances in block 10
        pool.on_swap(make_swap_request(100, last_change_block=10), 1100, 903, block)

        assert pool.oracle_state == state_after_first
        assert pool.samples[1] == sample_after_first
        assert len(swap_engine.calls_to("calculate_price")) == 1

    def test_disabled_oracle_never_mutates(self, swap_engine):
        pool = make_pool(engine=swap_engine, swap_fee=Decimal(0))
        pool.on_swap(make_swap_request(100, last_change_block=1), 1000, 1000, make_block())
        assert pool.oracle_state == OracleState()
        assert swap_engine.calls_to("calculate_price") == []
