from enum import Enum


class BurnDecision(str, Enum):
    """Outcome of evaluating a leftover change amount."""

    KEEP = "keep"
    BURN = "burn"


class SpendableCoinType(str, Enum):
    P2PKH = "p2pkh"


class PayoutAmountRuleType(str, Enum):
    CHANGE = "change"


class TradeTarget(str, Enum):
    """Which side of the trade the requested amount pins."""

    DEMAND = "demand"
    SUPPLY = "supply"
