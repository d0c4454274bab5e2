from collections.abc import Sequence

import pytest

from cashswap.domain.enums import NATIVE_TOKEN_ID, BurnDecision
from cashswap.domain.models.coin import SpendableCoin, TokenPayload, Utxo
from cashswap.domain.models.pool import Outpoint, Pool
from cashswap.domain.models.trade import PayoutRule, TradeEntry, TradeProposal, TradeTxResult
from cashswap.exchange.oracle import ExchangeOracle, StepHook
from cashswap.infra.wallet.base import TradeWallet

TOKEN_X = "aa" * 32
TOKEN_Y = "bb" * 32


def make_pool(index: int = 0, native: int = 1_000_000, tokens: int = 2_000_000, token_id: str = TOKEN_X) -> Pool:
    return Pool(
        owner_pkh=bytes([index]) * 20,
        outpoint=Outpoint(txhash=bytes([index + 1]) * 32, index=index),
        locking_bytecode=b"\xaa" + bytes([index]) * 20,
        token_id=token_id,
        token_amount=tokens,
        native_amount=native,
    )


def make_entry(pool: Pool, supply_token: str, demand_token: str, supply: int, demand: int) -> TradeEntry:
    return TradeEntry(
        pool=pool,
        supply_token_id=supply_token,
        demand_token_id=demand_token,
        supply=supply,
        demand=demand,
    )


def make_utxo(n: int, sats: int, token_id: str | None = None, amount: int = 0, **token_kw) -> Utxo:
    token = TokenPayload(token_id=token_id, amount=amount, **token_kw) if token_id else None
    return Utxo(txid=f"{n:064x}", vout=0, satoshis=sats, token=token)


class FakeOracle(ExchangeOracle):
    """Deterministic oracle: 2 token units per sat, one entry per transaction."""

    def __init__(self, entries_per_tx: int = 1) -> None:
        self.entries_per_tx = entries_per_tx
        self.invalid_txids: set[str] = set()
        self.write_calls: list[dict] = []
        self.burn_decisions: list[tuple[str, int, BurnDecision]] = []

    @property
    def rate_denominator(self) -> int:
        return 10**13

    def generate_pool_locking_bytecode(self, owner_pkh: bytes) -> bytes:
        return b"\xaa" + owner_pkh

    def _entry(self, pools, supply_token_id, demand_token_id, supply, demand) -> TradeProposal:
        entry = make_entry(pools[0], supply_token_id, demand_token_id, supply, demand)
        return TradeProposal(entries=(entry,))

    def construct_trade_best_rate_for_target_demand(self, supply_token_id, demand_token_id, demand, pools, txfee_per_byte):
        supply = demand // 2 if supply_token_id == NATIVE_TOKEN_ID else demand * 2
        return self._entry(pools, supply_token_id, demand_token_id, supply, demand)

    def construct_trade_best_rate_for_target_supply(self, supply_token_id, demand_token_id, supply, pools, txfee_per_byte):
        demand = supply * 2 if supply_token_id == NATIVE_TOKEN_ID else supply // 2
        return self._entry(pools, supply_token_id, demand_token_id, supply, demand)

    def write_chained_trade_tx(
        self,
        entries: Sequence[TradeEntry],
        input_coins: Sequence[SpendableCoin],
        payout_rules: Sequence[PayoutRule],
        data_locking_bytecode: bytes | None,
        txfee_per_byte: int,
        on_step: StepHook | None = None,
    ) -> list[TradeTxResult]:
        self.write_calls.append({"entries": list(entries), "input_coins": list(input_coins), "fee": txfee_per_byte})

        # leftover token change goes through the payout rule
        supplied: dict[str, int] = {}
        for e in entries:
            supplied[e.supply_token_id] = supplied.get(e.supply_token_id, 0) + e.supply
        for coin in input_coins:
            token = coin.output.token
            if token is None:
                continue
            leftover = token.amount - supplied.get(token.token_id, 0)
            if leftover > 0:
                decision = payout_rules[0].evaluate(token.token_id, leftover)
                self.burn_decisions.append((token.token_id, leftover, decision))

        txs: list[TradeTxResult] = []
        for i in range(0, len(entries), self.entries_per_tx):
            tx = TradeTxResult(
                txbin=bytes([len(txs)]) * 4,
                txid=f"tx{len(txs)}",
                input_coins=tuple(input_coins) if not txs else (),
                entries=tuple(entries[i:i + self.entries_per_tx]),
                txfee=250 * txfee_per_byte,
            )
            if on_step is not None:
                on_step(tx)
            txs.append(tx)
        return txs

    def verify_trade_tx(self, tx: TradeTxResult) -> None:
        if tx.txid in self.invalid_txids:
            raise ValueError(f"bad tx {tx.txid}")


class FakeWallet(TradeWallet):
    name = "test-wallet"

    def __init__(self, utxos: list[Utxo] | None = None, fail_at: int | None = None) -> None:
        self.utxos = list(utxos or [])
        self.fail_at = fail_at
        self.submitted: list[bytes] = []
        self.utxo_calls = 0

    @property
    def cashaddr(self) -> str:
        return "bitcoincash:qtestwallet"

    @property
    def private_key(self) -> bytes:
        return b"\x01" * 32

    @property
    def locking_bytecode(self) -> bytes:
        return b"\x76\xa9\x14" + b"\x02" * 20 + b"\x88\xac"

    async def get_address_utxos(self, cashaddr: str) -> list[Utxo]:
        self.utxo_calls += 1
        return list(self.utxos)

    async def submit_transaction(self, txbin: bytes) -> str:
        if self.fail_at is not None and len(self.submitted) == self.fail_at:
            raise ConnectionError("node rejected tx")
        self.submitted.append(txbin)
        return txbin.hex()


@pytest.fixture()
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture()
def wallet() -> FakeWallet:
    return FakeWallet()
