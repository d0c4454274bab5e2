"""Abstract wallet used to fund and submit trades."""

from abc import ABC, abstractmethod

from cashswap.domain.models.coin import Utxo


class TradeWallet(ABC):
    """A single-key P2PKH wallet: enumerates its coins and submits transactions."""

    name: str = "wallet"

    @property
    @abstractmethod
    def cashaddr(self) -> str:
        """Address whose coins fund the trade."""

    @property
    @abstractmethod
    def private_key(self) -> bytes:
        """Signing key for the wallet's coins."""

    @property
    @abstractmethod
    def locking_bytecode(self) -> bytes:
        """P2PKH locking bytecode derived from ``private_key``."""

    @abstractmethod
    async def get_address_utxos(self, cashaddr: str) -> list[Utxo]:
        """Unspent outputs locked to ``cashaddr``."""

    @abstractmethod
    async def submit_transaction(self, txbin: bytes) -> str:
        """Broadcast a signed transaction; return its txid."""
