"""Balance netting: per-pair trade sums and per-token net balances of a proposal.

Pure functions, no wallet or network access.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from cashswap.domain.enums import NATIVE_TOKEN_ID
from cashswap.domain.models.trade import TradeEntry
from cashswap.exceptions import OpposingEntriesError


@dataclass(frozen=True)
class FeeReserve:
    """Native amount held back for tx fees: ``per_entry × entries + base``.

    A rough estimate. The oracle computes the real fee; this only has to be
    large enough that funding does not come up short.
    """

    per_entry: int = 200
    base: int = 1000

    def estimate(self, entry_count: int) -> int:
        return self.per_entry * entry_count + self.base


@dataclass
class TradeSum:
    supply_token_id: str
    demand_token_id: str
    supply: int = 0
    demand: int = 0


@dataclass
class NettingResult:
    trade_sums: list[TradeSum] = field(default_factory=list)
    # Insertion ordered, native first. Negative = the wallet must supply it.
    balances: dict[str, int] = field(default_factory=lambda: {NATIVE_TOKEN_ID: 0})

    def find_by_supply(self, token_id: str) -> TradeSum | None:
        return next((s for s in self.trade_sums if s.supply_token_id == token_id), None)

    def find_by_demand(self, token_id: str) -> TradeSum | None:
        return next((s for s in self.trade_sums if s.demand_token_id == token_id), None)


def _check_not_opposed(result: NettingResult, entry: TradeEntry) -> None:
    for ts in result.trade_sums:
        if ts.supply_token_id == entry.supply_token_id and ts.demand_token_id == entry.demand_token_id:
            continue
        if ts.demand_token_id == entry.supply_token_id or ts.supply_token_id == entry.demand_token_id:
            raise OpposingEntriesError(entry.supply_token_id, entry.demand_token_id)


def net_entries(entries: Sequence[TradeEntry], fee_reserve: FeeReserve | None = None) -> NettingResult:
    """Accumulate trade sums and balances for ``entries``.

    Demand is credited, supply debited. The native balance is finally debited
    by the fee reserve. Raises ``OpposingEntriesError`` if two entries trade
    the same tokens in opposite directions.
    """
    fee_reserve = fee_reserve or FeeReserve()
    result = NettingResult()

    for entry in entries:
        _check_not_opposed(result, entry)

        trade_sum = next(
            (
                s for s in result.trade_sums
                if s.supply_token_id == entry.supply_token_id and s.demand_token_id == entry.demand_token_id
            ),
            None,
        )
        if trade_sum is None:
            trade_sum = TradeSum(entry.supply_token_id, entry.demand_token_id)
            result.trade_sums.append(trade_sum)
        trade_sum.supply += entry.supply
        trade_sum.demand += entry.demand

        result.balances[entry.demand_token_id] = result.balances.get(entry.demand_token_id, 0) + entry.demand
        result.balances[entry.supply_token_id] = result.balances.get(entry.supply_token_id, 0) - entry.supply

    result.balances[NATIVE_TOKEN_ID] -= fee_reserve.estimate(len(entries))
    return result
