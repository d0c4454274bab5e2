"""Building, verifying and broadcasting chained trade transactions.

A trade that does not fit in one transaction is written as a chain where
each transaction spends outputs of the previous one, so the chain must be
verified as a whole and submitted strictly in construction order.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from cashswap.domain.models.coin import SpendableCoin
from cashswap.domain.models.trade import PayoutRule, TradeEntry, TradeTxResult
from cashswap.exceptions import ChainVerificationError, InvalidFeeRateError, PartialBroadcastError
from cashswap.exchange.oracle import ExchangeOracle
from cashswap.infra.wallet.base import TradeWallet

logger = logging.getLogger(__name__)


class ChainStepObserver(ABC):
    """Post-step extension point, called once per transaction the oracle writes."""

    @abstractmethod
    def on_step(self, tx: TradeTxResult, consumed_coins: Sequence[SpendableCoin]) -> None:
        ...


class ConsumedCoinsCollector(ChainStepObserver):
    """Accumulates the coins each step actually consumed."""

    def __init__(self) -> None:
        self.consumed_coins: list[SpendableCoin] = []
        self.steps = 0

    def on_step(self, tx: TradeTxResult, consumed_coins: Sequence[SpendableCoin]) -> None:
        self.steps += 1
        self.consumed_coins.extend(consumed_coins)


def validate_fee_rate(txfee_per_byte: int) -> None:
    if isinstance(txfee_per_byte, bool) or not isinstance(txfee_per_byte, int) or txfee_per_byte <= 0:
        raise InvalidFeeRateError(txfee_per_byte)


class ChainBuilder:
    """Drives the oracle's chained tx writer and verifies its output."""

    def __init__(self, oracle: ExchangeOracle) -> None:
        self._oracle = oracle

    def build(
        self,
        entries: Sequence[TradeEntry],
        input_coins: Sequence[SpendableCoin],
        payout_rules: Sequence[PayoutRule],
        txfee_per_byte: int,
        observer: ChainStepObserver | None = None,
    ) -> list[TradeTxResult]:
        validate_fee_rate(txfee_per_byte)

        def _on_step(tx: TradeTxResult) -> None:
            if observer is not None:
                observer.on_step(tx, tx.input_coins)

        txs = self._oracle.write_chained_trade_tx(
            entries, input_coins, payout_rules, None, txfee_per_byte, on_step=_on_step,
        )
        logger.info("Oracle wrote %d trade tx(s) for %d entries", len(txs), len(entries))
        return list(txs)

    def verify(self, txs: Sequence[TradeTxResult]) -> None:
        """Verify every tx. One failure rejects the whole chain."""
        for index, tx in enumerate(txs):
            try:
                self._oracle.verify_trade_tx(tx)
            except Exception as e:
                raise ChainVerificationError(index, str(e)) from e


class ChainBroadcaster:
    """Submits a verified chain one tx at a time, parents first."""

    def __init__(self, wallet: TradeWallet) -> None:
        self._wallet = wallet

    async def broadcast(self, txs: Sequence[TradeTxResult]) -> list[str]:
        txids: list[str] = []
        for index, tx in enumerate(txs):
            try:
                txid = await self._wallet.submit_transaction(tx.txbin)
            except Exception as e:
                logger.error(
                    "Submission of trade tx #%d failed, %d tx(s) already broadcast", index, len(txids),
                )
                raise PartialBroadcastError(txids, index, str(e)) from e
            logger.info("Broadcast trade tx #%d: %s", index, txid)
            txids.append(txid)
        return txids
