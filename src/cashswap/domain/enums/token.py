from enum import Enum

# Token id used for the chain's native currency (satoshis).
NATIVE_TOKEN_ID = "BCH"


class TokenCapability(str, Enum):
    """CashTokens NFT capability. A plain fungible holding carries none."""

    NONE = "none"
    MUTABLE = "mutable"
    MINTING = "minting"
