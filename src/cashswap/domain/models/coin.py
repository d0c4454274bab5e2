"""Wallet coins: raw UTXOs as listed by a wallet, and coins ready to be spent in a trade."""

from pydantic import BaseModel, ConfigDict, Field

from cashswap.domain.enums import SpendableCoinType, TokenCapability
from cashswap.domain.models.pool import Outpoint


class TokenPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    token_id: str
    amount: int = Field(default=0, ge=0)
    capability: TokenCapability | None = None
    commitment: str | None = None

    @property
    def is_plain_fungible(self) -> bool:
        """No NFT capability and no commitment: a plain fungible holding."""
        return self.capability is None and self.commitment is None


class Utxo(BaseModel):
    """An unspent output owned by the wallet's address."""

    model_config = ConfigDict(frozen=True)

    txid: str
    vout: int = Field(ge=0)
    satoshis: int = Field(ge=0)
    token: TokenPayload | None = None

    @property
    def outpoint(self) -> Outpoint:
        return Outpoint(txhash=bytes.fromhex(self.txid), index=self.vout)


class CoinOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    locking_bytecode: bytes
    amount: int = Field(ge=0)
    token: TokenPayload | None = None


class SpendableCoin(BaseModel):
    """An outpoint plus the authority (script type + key) needed to spend it."""

    model_config = ConfigDict(frozen=True)

    type: SpendableCoinType = SpendableCoinType.P2PKH
    outpoint: Outpoint
    output: CoinOutput
    key: bytes
