"""Liquidity pool positions as reported by the indexer and as seen by the oracle."""

from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field

from cashswap.exceptions import DataIntegrityError


class Outpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    txhash: bytes
    index: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.txhash.hex()}:{self.index}"


class Pool(BaseModel):
    """A Cauldron pool UTXO. Never mutated; use ``with_reserves`` for a notional copy."""

    model_config = ConfigDict(frozen=True)

    version: str = "0"
    owner_pkh: bytes
    outpoint: Outpoint
    locking_bytecode: bytes
    token_id: str
    token_amount: int = Field(ge=0)
    native_amount: int = Field(ge=0)

    def with_reserves(self, *, native_amount: int, token_amount: int) -> "Pool":
        if native_amount < 0 or token_amount < 0:
            raise DataIntegrityError(
                f"Pool {self.outpoint} would end with negative reserves "
                f"(native={native_amount}, token={token_amount})"
            )
        return self.model_copy(update={"native_amount": native_amount, "token_amount": token_amount})


class ActivePoolEntry(BaseModel):
    """One record of the indexer's active pool listing."""

    owner_p2pkh_addr: str = ""
    owner_pkh: str
    sats: int = Field(ge=0)
    token_id: str
    tokens: int = Field(ge=0)
    tx_pos: int = Field(ge=0)
    txid: str


class ActivePoolsResult(BaseModel):
    active: list[ActivePoolEntry] = []


def build_pools(
    entries: Iterable[ActivePoolEntry],
    generate_locking_bytecode: Callable[[bytes], bytes],
) -> list[Pool]:
    """Reconstruct v0 pools from indexer records. The locking bytecode is derived from the owner pkh."""
    pools: list[Pool] = []
    for entry in entries:
        owner_pkh = bytes.fromhex(entry.owner_pkh)
        pools.append(Pool(
            version="0",
            owner_pkh=owner_pkh,
            outpoint=Outpoint(txhash=bytes.fromhex(entry.txid), index=entry.tx_pos),
            locking_bytecode=generate_locking_bytecode(owner_pkh),
            token_id=entry.token_id,
            token_amount=entry.tokens,
            native_amount=entry.sats,
        ))
    return pools
