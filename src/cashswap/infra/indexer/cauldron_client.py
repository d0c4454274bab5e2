"""Cauldron indexer client: active pool listing per token."""

import logging
import time

from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from cashswap.domain.models.pool import ActivePoolEntry, ActivePoolsResult
from cashswap.exceptions import ExternalServiceError
from cashswap.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

ACTIVE_POOLS_PATH = "/cauldron/pool/active/"


class CauldronIndexerClient:
    """Fetches active pools for a token, with a short-lived in-memory cache."""

    def __init__(self, base_url: str, http_client: RateLimitedClient, cache_ttl: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_client
        self._cache_ttl = cache_ttl
        self._cache: dict[str, tuple[float, list[ActivePoolEntry]]] = {}

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _fetch(self, token_id: str) -> list[ActivePoolEntry]:
        resp = await self._http.get(f"{self._base_url}{ACTIVE_POOLS_PATH}", params={"token": token_id})

        if resp.status_code == 404:
            return []
        if resp.status_code >= 500:
            raise ExternalServiceError(f"Indexer returned {resp.status_code} for token {token_id}")
        if resp.status_code != 200:
            logger.warning("Indexer returned %d for token %s", resp.status_code, token_id)
            return []

        try:
            result = ActivePoolsResult.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise ExternalServiceError(f"Malformed indexer response for token {token_id}: {e}") from e

        # the listing is keyed by token but nothing stops a sloppy indexer
        foreign = [p for p in result.active if p.token_id != token_id]
        if foreign:
            logger.warning("Dropping %d pools for other tokens from indexer response", len(foreign))
        return [p for p in result.active if p.token_id == token_id]

    async def get_active_pools(self, token_id: str, no_cache: bool = False) -> list[ActivePoolEntry]:
        """Active pools for ``token_id``. An empty list means no liquidity, not an error."""
        now = time.monotonic()
        if not no_cache:
            cached = self._cache.get(token_id)
            if cached is not None and now - cached[0] < self._cache_ttl:
                return list(cached[1])

        pools = await self._fetch(token_id)
        self._cache[token_id] = (now, pools)
        logger.info("Indexer: %d active pools for %s", len(pools), token_id)
        return list(pools)
