"""Tests for the weighted-rate price impact calculator."""

from fractions import Fraction

import pytest

from cashswap.domain.enums import NATIVE_TOKEN_ID
from cashswap.exceptions import DataIntegrityError, UndefinedPriceImpactError
from cashswap.trading.price_impact import apply_entries, measure_price_impact, weighted_average_rate
from conftest import TOKEN_X, make_entry, make_pool


class TestWeightedAverageRate:
    def test_single_pool(self):
        pool = make_pool(native=1000, tokens=4000)
        assert weighted_average_rate([pool]) == Fraction(1000 * 4000, 4000)

    def test_weighted_by_token_reserve(self):
        pools = [make_pool(0, native=100, tokens=10), make_pool(1, native=300, tokens=30)]
        # (100*10 + 300*30) / (10 + 30)
        assert weighted_average_rate(pools) == Fraction(10_000, 40)

    def test_exact_for_huge_reserves(self):
        big = 10**30 + 7
        pools = [make_pool(0, native=big, tokens=3), make_pool(1, native=1, tokens=big)]
        expected = Fraction(big * 3 + big, 3 + big)
        assert weighted_average_rate(pools) == expected

    def test_empty_pool_set_is_undefined(self):
        with pytest.raises(UndefinedPriceImpactError):
            weighted_average_rate([])

    def test_zero_token_reserve_is_undefined(self):
        with pytest.raises(UndefinedPriceImpactError):
            weighted_average_rate([make_pool(native=500, tokens=0)])

    def test_undefined_is_a_data_integrity_error(self):
        with pytest.raises(DataIntegrityError):
            weighted_average_rate([])


class TestApplyEntries:
    def test_token_sold_into_pool(self):
        pool = make_pool(native=1000, tokens=2000)
        entry = make_entry(pool, TOKEN_X, NATIVE_TOKEN_ID, supply=200, demand=90)
        [after] = apply_entries([pool], [entry])
        assert after.native_amount == 910
        assert after.token_amount == 2200

    def test_native_sold_into_pool(self):
        pool = make_pool(native=1000, tokens=2000)
        entry = make_entry(pool, NATIVE_TOKEN_ID, TOKEN_X, supply=100, demand=180)
        [after] = apply_entries([pool], [entry])
        assert after.native_amount == 1100
        assert after.token_amount == 1820

    def test_untouched_pools_unchanged_and_inputs_not_mutated(self):
        touched = make_pool(0, native=1000, tokens=2000)
        untouched = make_pool(1, native=500, tokens=700)
        entry = make_entry(touched, NATIVE_TOKEN_ID, TOKEN_X, supply=100, demand=180)

        after = apply_entries([touched, untouched], [entry])
        assert after[1] == untouched
        assert touched.native_amount == 1000
        assert touched.token_amount == 2000

    def test_match_requires_same_txhash_and_index(self):
        pool = make_pool(0, native=1000, tokens=2000)
        other = make_pool(1, native=1000, tokens=2000)
        # same output index, different txhash
        lookalike = other.model_copy(update={"outpoint": other.outpoint.model_copy(update={"index": 0})})
        entry = make_entry(lookalike, NATIVE_TOKEN_ID, TOKEN_X, supply=100, demand=180)
        assert apply_entries([pool], [entry]) == [pool]

    def test_first_entry_for_a_pool_wins(self):
        pool = make_pool(native=1000, tokens=2000)
        first = make_entry(pool, NATIVE_TOKEN_ID, TOKEN_X, supply=100, demand=180)
        second = make_entry(pool, NATIVE_TOKEN_ID, TOKEN_X, supply=300, demand=500)
        [after] = apply_entries([pool], [first, second])
        assert after.native_amount == 1100
        assert after.token_amount == 1820

    def test_overdrawn_pool_is_rejected(self):
        pool = make_pool(native=100, tokens=2000)
        entry = make_entry(pool, TOKEN_X, NATIVE_TOKEN_ID, supply=10, demand=101)
        with pytest.raises(DataIntegrityError):
            apply_entries([pool], [entry])


class TestMeasurePriceImpact:
    def test_no_entries_no_impact(self):
        assert measure_price_impact([make_pool()], []) == 0.0

    def test_buying_tokens_raises_rate(self):
        pool = make_pool(native=1000, tokens=2000)
        entry = make_entry(pool, NATIVE_TOKEN_ID, TOKEN_X, supply=100, demand=180)
        # before: 1000, after: 1100*1820/1820 = 1100
        assert measure_price_impact([pool], [entry]) == pytest.approx(0.1)

    def test_selling_tokens_lowers_rate(self):
        pool = make_pool(native=1000, tokens=2000)
        entry = make_entry(pool, TOKEN_X, NATIVE_TOKEN_ID, supply=200, demand=90)
        assert measure_price_impact([pool], [entry]) < 0

    def test_impact_invariant_under_uniform_scaling(self):
        pools = [make_pool(0, native=1000, tokens=2000), make_pool(1, native=3000, tokens=5000)]
        entries = [make_entry(pools[0], NATIVE_TOKEN_ID, TOKEN_X, supply=100, demand=180)]

        doubled_pools = [p.with_reserves(native_amount=p.native_amount * 2, token_amount=p.token_amount * 2) for p in pools]
        doubled_entries = [make_entry(doubled_pools[0], NATIVE_TOKEN_ID, TOKEN_X, supply=200, demand=360)]

        assert measure_price_impact(doubled_pools, doubled_entries) == measure_price_impact(pools, entries)
