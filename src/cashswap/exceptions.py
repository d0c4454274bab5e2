"""Error taxonomy for trade proposal, funding and broadcast."""


class CashSwapError(Exception):
    """Base class for all cashswap errors."""


class ExternalServiceError(CashSwapError):
    """An external service (indexer, node) failed or answered garbage."""


# --- input validation ---


class InvalidTradeInputError(CashSwapError, ValueError):
    """The caller asked for something that cannot be traded."""


class OpposingEntriesError(InvalidTradeInputError):
    def __init__(self, supply_token_id: str, demand_token_id: str) -> None:
        self.supply_token_id = supply_token_id
        self.demand_token_id = demand_token_id
        super().__init__(
            f"The trade may not contain opposed entries! ({supply_token_id} -> {demand_token_id})"
        )


class InvalidFeeRateError(InvalidTradeInputError):
    def __init__(self, txfee_per_byte: int) -> None:
        self.txfee_per_byte = txfee_per_byte
        super().__init__(f"txfee-per-byte should be a positive integer, got {txfee_per_byte!r}")


# --- resource exhaustion ---


class InsufficientFundsError(CashSwapError):
    def __init__(self, wallet_name: str, token_id: str) -> None:
        self.wallet_name = wallet_name
        self.token_id = token_id
        super().__init__(f"Insufficient funds, wallet: {wallet_name}, token: {token_id}")


class NoLiquidityError(CashSwapError):
    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        super().__init__(f"No active pools for token {token_id}")


# --- data integrity ---


class DataIntegrityError(CashSwapError):
    """Input data is malformed or stale; never silently defaulted."""


class UnknownTokenRateError(DataIntegrityError):
    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        super().__init__(f"Unknown token, no rate derivable from the trade, tokenId: {token_id}")


class UndefinedPriceImpactError(DataIntegrityError):
    """Aggregate token reserve of the pool set is zero."""


# --- chain level ---


class ChainVerificationError(CashSwapError):
    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Trade tx #{index} failed verification: {reason}")


class PartialBroadcastError(CashSwapError):
    """Submission failed mid-chain. Transactions in ``broadcast_txids`` are already on the network."""

    def __init__(self, broadcast_txids: list[str], failed_index: int, reason: str) -> None:
        self.broadcast_txids = list(broadcast_txids)
        self.failed_index = failed_index
        self.reason = reason
        super().__init__(
            f"Broadcast failed at tx #{failed_index} after {len(broadcast_txids)} submitted: {reason}"
        )
