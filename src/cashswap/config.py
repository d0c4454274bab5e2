from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CASHSWAP_", env_file=".env")

    indexer_url: str = "https://indexer.cauldron.quest"
    indexer_rate_per_second: float = 5.0
    http_timeout: float = 30.0
    pool_cache_ttl_seconds: float = 30.0

    tx_fee_per_byte: int = 1
    burn_dust_tokens: bool = True
    dust_token_min_native: int = 800  # sats

    # Fee reserve held back from the native balance while funding a trade.
    # A rough linear estimate in entry count, not a protocol constant.
    fee_reserve_per_entry: int = 200
    fee_reserve_base: int = 1000

    # "module:factory" producing an ExchangeOracle, used by the HTTP API
    exchange_oracle: str = ""

    debug: bool = False

