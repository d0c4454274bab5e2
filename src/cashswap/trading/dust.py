"""Dust-burn policy for leftover token change."""

import logging

from cashswap.domain.enums import NATIVE_TOKEN_ID, BurnDecision
from cashswap.exceptions import UnknownTokenRateError
from cashswap.trading.netting import NettingResult

logger = logging.getLogger(__name__)

DEFAULT_DUST_TOKEN_MIN_NATIVE = 800  # sats
RATE_DENOMINATOR = 10**13


class DustBurnPolicy:
    """Decides whether a token change output is worth keeping.

    Token value is estimated in sats from the trade's own aggregate rate for
    that token. Rates are cached for the lifetime of the instance, which is
    one funding pass.
    """

    def __init__(
        self,
        netting: NettingResult,
        burn_dust: bool = True,
        dust_threshold: int = DEFAULT_DUST_TOKEN_MIN_NATIVE,
        rate_denominator: int = RATE_DENOMINATOR,
    ) -> None:
        self._netting = netting
        self._burn_dust = burn_dust
        self._dust_threshold = dust_threshold
        self._rate_denominator = rate_denominator
        self._rate_cache: dict[str, int] = {}

    @property
    def rate_cache(self) -> dict[str, int]:
        return dict(self._rate_cache)

    def rate_for(self, token_id: str) -> int:
        """Sats per token unit, scaled by the rate denominator."""
        if token_id == NATIVE_TOKEN_ID:
            raise ValueError("The native token has no exchange rate against itself")
        if token_id in self._rate_cache:
            return self._rate_cache[token_id]

        supplied = self._netting.find_by_supply(token_id)
        if supplied is not None and supplied.supply > 0:
            rate = supplied.demand * self._rate_denominator // supplied.supply
        else:
            demanded = self._netting.find_by_demand(token_id)
            if demanded is None or demanded.demand == 0:
                raise UnknownTokenRateError(token_id)
            rate = demanded.supply * self._rate_denominator // demanded.demand

        self._rate_cache[token_id] = rate
        return rate

    def native_value(self, token_id: str, amount: int) -> int:
        if token_id == NATIVE_TOKEN_ID:
            return amount
        return amount * self.rate_for(token_id) // self._rate_denominator

    def decide(self, token_id: str, amount: int) -> BurnDecision:
        if token_id == NATIVE_TOKEN_ID:
            return BurnDecision.KEEP
        value = self.native_value(token_id, amount)
        if self._burn_dust and value < self._dust_threshold:
            logger.debug("Burning %d of %s worth %d sats", amount, token_id, value)
            return BurnDecision.BURN
        return BurnDecision.KEEP

    __call__ = decide
