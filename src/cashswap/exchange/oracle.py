"""Interface of the trade construction oracle (pool matching, tx writer, tx verifier)."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from cashswap.domain.models.coin import SpendableCoin
from cashswap.domain.models.pool import Pool
from cashswap.domain.models.trade import PayoutRule, TradeEntry, TradeProposal, TradeTxResult

# Called by the oracle once per transaction it writes, with that transaction.
StepHook = Callable[[TradeTxResult], None]


class ExchangeOracle(ABC):
    """Opaque exchange backend. Owns the pricing formula and the tx encoding/signing.

    Implementations raise on failure; the orchestration layer never inspects
    the pricing internals.
    """

    @property
    @abstractmethod
    def rate_denominator(self) -> int:
        """Fixed denominator used for integer exchange rates."""

    @abstractmethod
    def generate_pool_locking_bytecode(self, owner_pkh: bytes) -> bytes:
        """Locking bytecode of a v0 pool owned by ``owner_pkh``."""

    @abstractmethod
    def construct_trade_best_rate_for_target_demand(
        self,
        supply_token_id: str,
        demand_token_id: str,
        demand: int,
        pools: Sequence[Pool],
        txfee_per_byte: int,
    ) -> TradeProposal:
        """Cheapest set of entries yielding ``demand`` units of the demand token."""

    @abstractmethod
    def construct_trade_best_rate_for_target_supply(
        self,
        supply_token_id: str,
        demand_token_id: str,
        supply: int,
        pools: Sequence[Pool],
        txfee_per_byte: int,
    ) -> TradeProposal:
        """Best set of entries spending exactly ``supply`` units of the supply token."""

    @abstractmethod
    def write_chained_trade_tx(
        self,
        entries: Sequence[TradeEntry],
        input_coins: Sequence[SpendableCoin],
        payout_rules: Sequence[PayoutRule],
        data_locking_bytecode: bytes | None,
        txfee_per_byte: int,
        on_step: StepHook | None = None,
    ) -> list[TradeTxResult]:
        """Write and sign one or more linked transactions, in dependency order."""

    @abstractmethod
    def verify_trade_tx(self, tx: TradeTxResult) -> None:
        """Raise if ``tx`` is structurally invalid."""
