from cashswap.domain.enums.token import NATIVE_TOKEN_ID, TokenCapability
from cashswap.domain.enums.trade import BurnDecision, PayoutAmountRuleType, SpendableCoinType, TradeTarget

__all__ = [
    "NATIVE_TOKEN_ID",
    "BurnDecision",
    "PayoutAmountRuleType",
    "SpendableCoinType",
    "TokenCapability",
    "TradeTarget",
]
