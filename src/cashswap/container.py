from dependency_injector import containers, providers

from cashswap.config import Settings
from cashswap.exchange.oracle import ExchangeOracle
from cashswap.infra.http.rate_limited_client import RateLimitedClient
from cashswap.infra.indexer.cauldron_client import CauldronIndexerClient
from cashswap.trading.service import TradeService


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["cashswap.api.deps"])

    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.indexer_rate_per_second,
        timeout=settings.provided.http_timeout,
    )

    indexer = providers.Singleton(
        CauldronIndexerClient,
        base_url=settings.provided.indexer_url,
        http_client=http_client,
        cache_ttl=settings.provided.pool_cache_ttl_seconds,
    )

    # Supplied by the embedding application (see Settings.exchange_oracle).
    oracle = providers.Dependency(instance_of=ExchangeOracle)

    trade_service = providers.Factory(
        TradeService,
        oracle=oracle,
        indexer=indexer,
        settings=settings,
    )
