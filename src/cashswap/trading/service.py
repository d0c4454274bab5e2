"""TradeService: propose, fund and broadcast a Cauldron trade."""

import logging
from collections.abc import Sequence

from cashswap.config import Settings
from cashswap.domain.enums import NATIVE_TOKEN_ID, PayoutAmountRuleType, SpendableCoinType, TradeTarget
from cashswap.domain.models.pool import ActivePoolEntry, Pool, build_pools
from cashswap.domain.models.trade import (
    FundedTrade,
    PayoutRule,
    SpendingParameters,
    TradeProposal,
    TradeRequest,
    TradeTxResult,
)
from cashswap.exceptions import InvalidTradeInputError, NoLiquidityError
from cashswap.exchange.oracle import ExchangeOracle
from cashswap.infra.indexer.cauldron_client import CauldronIndexerClient
from cashswap.infra.wallet.base import TradeWallet
from cashswap.trading.chain import ChainBroadcaster, ChainBuilder, ConsumedCoinsCollector, validate_fee_rate
from cashswap.trading.coin_selection import CoinSelector
from cashswap.trading.dust import DustBurnPolicy
from cashswap.trading.netting import FeeReserve, net_entries
from cashswap.trading.price_impact import measure_price_impact

logger = logging.getLogger(__name__)


def _resolve_target(request: TradeRequest) -> tuple[TradeTarget, int]:
    if request.demand_amount is not None:
        target, amount = TradeTarget.DEMAND, request.demand_amount
    elif request.supply_amount is not None:
        target, amount = TradeTarget.SUPPLY, request.supply_amount
    else:
        raise InvalidTradeInputError("Either demand_amount or supply_amount is required")
    if amount <= 0:
        raise InvalidTradeInputError(f"{target.value}_amount must be positive, got {amount}")
    return target, amount


def _non_native_token(request: TradeRequest) -> str:
    if request.supply_token_id == request.demand_token_id:
        raise InvalidTradeInputError("Supply and demand tokens must differ")
    if NATIVE_TOKEN_ID not in (request.supply_token_id, request.demand_token_id):
        raise InvalidTradeInputError(f"One side of the trade must be {NATIVE_TOKEN_ID}")
    if request.supply_token_id == NATIVE_TOKEN_ID:
        return request.demand_token_id
    return request.supply_token_id


class TradeService:
    """Orchestrator: indexer → oracle → netting → coin selection → chain build → broadcast."""

    def __init__(
        self,
        oracle: ExchangeOracle,
        indexer: CauldronIndexerClient | None,
        settings: Settings,
    ) -> None:
        self._oracle = oracle
        self._indexer = indexer
        self._settings = settings

    def fee_reserve(self) -> FeeReserve:
        return FeeReserve(
            per_entry=self._settings.fee_reserve_per_entry,
            base=self._settings.fee_reserve_base,
        )

    async def load_pools(self, token_id: str, no_cache: bool = False) -> list[Pool]:
        if self._indexer is None:
            raise InvalidTradeInputError("No indexer configured, active_pools must be supplied")
        entries = await self._indexer.get_active_pools(token_id, no_cache=no_cache)
        return self.build_pools(entries)

    def build_pools(self, entries: Sequence[ActivePoolEntry]) -> list[Pool]:
        return build_pools(entries, self._oracle.generate_pool_locking_bytecode)

    async def propose_trade(self, request: TradeRequest) -> TradeProposal:
        target, amount = _resolve_target(request)
        token_id = _non_native_token(request)
        txfee_per_byte = request.tx_fee_per_byte
        if txfee_per_byte is None:
            txfee_per_byte = self._settings.tx_fee_per_byte
        validate_fee_rate(txfee_per_byte)

        if request.active_pools is not None:
            pools = self.build_pools(request.active_pools.active)
        else:
            pools = await self.load_pools(token_id, no_cache=request.no_cache)
        if not pools:
            raise NoLiquidityError(token_id)

        if target is TradeTarget.DEMAND:
            proposal = self._oracle.construct_trade_best_rate_for_target_demand(
                request.supply_token_id, request.demand_token_id, amount, pools, txfee_per_byte,
            )
        else:
            proposal = self._oracle.construct_trade_best_rate_for_target_supply(
                request.supply_token_id, request.demand_token_id, amount, pools, txfee_per_byte,
            )

        impact = measure_price_impact(pools, proposal.entries)
        logger.info(
            "Proposed %s -> %s over %d pools: supply=%d demand=%d impact=%.6f",
            request.supply_token_id, request.demand_token_id, len(proposal.entries),
            proposal.total_supply, proposal.total_demand, impact,
        )
        return proposal.model_copy(update={"price_impact": impact})

    async def fund_proposed_trade(
        self,
        wallet: TradeWallet,
        proposal: TradeProposal,
        txfee_per_byte: int | None = None,
        burn_dust_tokens: bool | None = None,
    ) -> FundedTrade:
        """Select wallet coins for ``proposal`` and write the verified tx chain. Nothing is broadcast."""
        if txfee_per_byte is None:
            txfee_per_byte = self._settings.tx_fee_per_byte
        if burn_dust_tokens is None:
            burn_dust_tokens = self._settings.burn_dust_tokens
        validate_fee_rate(txfee_per_byte)

        netting = net_entries(proposal.entries, self.fee_reserve())

        utxos = await wallet.get_address_utxos(wallet.cashaddr)
        selector = CoinSelector(utxos, wallet.locking_bytecode, wallet.private_key, wallet_name=wallet.name)
        selection = selector.select(netting.balances)
        logger.info(
            "Funding trade of %d entries with %d of %d wallet coins",
            len(proposal.entries), len(selection.coins), len(utxos),
        )

        dust_policy = DustBurnPolicy(
            netting,
            burn_dust=burn_dust_tokens,
            dust_threshold=self._settings.dust_token_min_native,
            rate_denominator=self._oracle.rate_denominator,
        )
        payout_rules = [
            PayoutRule(
                type=PayoutAmountRuleType.CHANGE,
                allow_mixing_native_and_token=False,
                locking_bytecode=wallet.locking_bytecode,
                spending_parameters=SpendingParameters(type=SpendableCoinType.P2PKH, key=wallet.private_key),
                should_burn=dust_policy.decide,
            ),
        ]

        builder = ChainBuilder(self._oracle)
        collector = ConsumedCoinsCollector()
        txs = builder.build(proposal.entries, selection.coins, payout_rules, txfee_per_byte, observer=collector)
        builder.verify(txs)

        return FundedTrade(
            transactions=txs,
            input_coins=selection.coins,
            consumed_coins=collector.consumed_coins,
        )

    async def broadcast_trade(self, wallet: TradeWallet, txs: Sequence[TradeTxResult]) -> list[str]:
        return await ChainBroadcaster(wallet).broadcast(txs)
