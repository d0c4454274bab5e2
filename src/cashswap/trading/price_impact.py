"""Price impact of a trade proposal: pure functions over a pool set.

The global rate is the token-reserve weighted average of ``native × token``
across all pools, kept as an exact ``Fraction``. Only the final impact ratio
is turned into a float, for display.
"""

from collections.abc import Sequence
from fractions import Fraction

from cashswap.domain.enums import NATIVE_TOKEN_ID
from cashswap.domain.models.pool import Pool
from cashswap.domain.models.trade import TradeEntry
from cashswap.exceptions import UndefinedPriceImpactError


def weighted_average_rate(pools: Sequence[Pool]) -> Fraction:
    """Σ(native_i × token_i) / Σ(token_i) over the pool set."""
    numerator = sum(p.native_amount * p.token_amount for p in pools)
    denominator = sum(p.token_amount for p in pools)
    if denominator == 0:
        raise UndefinedPriceImpactError(
            f"Aggregate token reserve is zero across {len(pools)} pools, rate is undefined"
        )
    return Fraction(numerator, denominator)


def apply_entries(pools: Sequence[Pool], entries: Sequence[TradeEntry]) -> list[Pool]:
    """Notional post-trade pool set. Input pools are left untouched."""
    by_outpoint: dict[tuple[bytes, int], TradeEntry] = {}
    for e in entries:
        # first entry for a pool wins
        by_outpoint.setdefault((e.pool.outpoint.txhash, e.pool.outpoint.index), e)
    result: list[Pool] = []
    for pool in pools:
        entry = by_outpoint.get((pool.outpoint.txhash, pool.outpoint.index))
        if entry is None:
            result.append(pool)
        elif entry.demand_token_id == NATIVE_TOKEN_ID:
            # token sold into the pool
            result.append(pool.with_reserves(
                native_amount=pool.native_amount - entry.demand,
                token_amount=pool.token_amount + entry.supply,
            ))
        else:
            # native sold into the pool
            result.append(pool.with_reserves(
                native_amount=pool.native_amount + entry.supply,
                token_amount=pool.token_amount - entry.demand,
            ))
    return result


def measure_price_impact(pools: Sequence[Pool], entries: Sequence[TradeEntry]) -> float:
    """(R_after − R_before) / R_before, as a signed float."""
    before = weighted_average_rate(pools)
    after = weighted_average_rate(apply_entries(pools, entries))
    if before == 0:
        raise UndefinedPriceImpactError("Pool set has no native reserve, rate is zero")
    return float((after - before) / before)
