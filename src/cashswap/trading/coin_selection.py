"""Greedy largest-first coin selection covering every negative token balance."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from cashswap.domain.enums import NATIVE_TOKEN_ID, SpendableCoinType
from cashswap.domain.models.coin import CoinOutput, SpendableCoin, Utxo
from cashswap.exceptions import InsufficientFundsError

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    coins: list[SpendableCoin] = field(default_factory=list)
    utxos: list[Utxo] = field(default_factory=list)
    balances: dict[str, int] = field(default_factory=dict)


class CoinSelector:
    """One funding pass over a wallet's coin set.

    A coin is claimed at most once per pass. Callers must not run two passes
    over the same wallet concurrently.
    """

    def __init__(
        self,
        utxos: Sequence[Utxo],
        locking_bytecode: bytes,
        key: bytes,
        wallet_name: str = "wallet",
    ) -> None:
        self._utxos = list(utxos)
        self._locking_bytecode = locking_bytecode
        self._key = key
        self._wallet_name = wallet_name
        self._used: set[int] = set()  # indexes into self._utxos

    def _candidates(self, token_id: str) -> list[int]:
        if token_id == NATIVE_TOKEN_ID:
            eligible = [
                i for i, u in enumerate(self._utxos)
                if i not in self._used and u.token is None and u.satoshis > 0
            ]
            eligible.sort(key=lambda i: self._utxos[i].satoshis, reverse=True)
            return eligible

        eligible = [
            i for i, u in enumerate(self._utxos)
            if i not in self._used
            and u.token is not None
            and u.token.token_id == token_id
            and u.token.is_plain_fungible
            and u.token.amount > 0
        ]
        eligible.sort(key=lambda i: self._utxos[i].token.amount, reverse=True)  # type: ignore[union-attr]
        return eligible

    def _to_spendable(self, utxo: Utxo) -> SpendableCoin:
        return SpendableCoin(
            type=SpendableCoinType.P2PKH,
            outpoint=utxo.outpoint,
            output=CoinOutput(
                locking_bytecode=self._locking_bytecode,
                amount=utxo.satoshis,
                token=utxo.token,
            ),
            key=self._key,
        )

    def select(self, balances: Mapping[str, int]) -> SelectionResult:
        """Claim coins until every balance is >= 0. ``balances`` itself is not modified."""
        result = SelectionResult(balances=dict(balances))
        result.balances.setdefault(NATIVE_TOKEN_ID, 0)

        # token coins carry sats too, so token deficits go first and native last
        order = [t for t in result.balances if t != NATIVE_TOKEN_ID] + [NATIVE_TOKEN_ID]
        for token_id in order:
            while result.balances[token_id] < 0:
                candidates = self._candidates(token_id)
                if not candidates:
                    raise InsufficientFundsError(self._wallet_name, token_id)
                idx = candidates[0]
                self._used.add(idx)
                utxo = self._utxos[idx]

                # every coin carries native value, token coins included
                result.balances[NATIVE_TOKEN_ID] += utxo.satoshis
                if utxo.token is not None:
                    result.balances[utxo.token.token_id] = (
                        result.balances.get(utxo.token.token_id, 0) + utxo.token.amount
                    )

                result.utxos.append(utxo)
                result.coins.append(self._to_spendable(utxo))
                logger.debug(
                    "Selected %s:%d for %s (sats=%d, tokens=%s)",
                    utxo.txid, utxo.vout, token_id, utxo.satoshis,
                    utxo.token.amount if utxo.token else 0,
                )

        return result
