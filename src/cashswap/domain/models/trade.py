"""Trade proposal, payout rules and constructed trade transactions."""

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from cashswap.domain.enums import BurnDecision, PayoutAmountRuleType, SpendableCoinType
from cashswap.domain.models.coin import SpendableCoin
from cashswap.domain.models.pool import ActivePoolsResult, Pool


class TradeEntry(BaseModel):
    """One matched conversion against one pool. Produced by the construction oracle."""

    model_config = ConfigDict(frozen=True)

    pool: Pool
    supply_token_id: str
    demand_token_id: str
    supply: int = Field(ge=0)
    demand: int = Field(ge=0)


class TradeProposal(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: tuple[TradeEntry, ...]
    price_impact: float = 0.0

    @property
    def total_supply(self) -> int:
        return sum(e.supply for e in self.entries)

    @property
    def total_demand(self) -> int:
        return sum(e.demand for e in self.entries)


class TradeRequest(BaseModel):
    """What the caller wants to trade. ``demand_amount`` wins when both amounts are given."""

    supply_token_id: str
    demand_token_id: str
    demand_amount: int | None = None
    supply_amount: int | None = None
    tx_fee_per_byte: int | None = None
    no_cache: bool = False
    active_pools: ActivePoolsResult | None = None


class SpendingParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: SpendableCoinType = SpendableCoinType.P2PKH
    key: bytes


class PayoutRule(BaseModel):
    """Where leftover value goes. ``should_burn`` is asked for each token change output."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: PayoutAmountRuleType = PayoutAmountRuleType.CHANGE
    locking_bytecode: bytes
    spending_parameters: SpendingParameters
    allow_mixing_native_and_token: bool = False
    should_burn: Callable[[str, int], BurnDecision] | None = None

    def evaluate(self, token_id: str, amount: int) -> BurnDecision:
        if self.should_burn is None:
            return BurnDecision.KEEP
        return self.should_burn(token_id, amount)


class TradeTxResult(BaseModel):
    """A signed trade transaction and the coins it consumed."""

    model_config = ConfigDict(frozen=True)

    txbin: bytes
    txid: str = ""
    input_coins: tuple[SpendableCoin, ...] = ()
    entries: tuple[TradeEntry, ...] = ()
    txfee: int = 0


class FundedTrade(BaseModel):
    """Verified chain of trade transactions ready for broadcast."""

    transactions: list[TradeTxResult]
    input_coins: list[SpendableCoin]
    consumed_coins: list[SpendableCoin]
