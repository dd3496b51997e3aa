from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Li.Fi (route provider)
    lifi_base_url: str = "https://li.quest/v1"
    lifi_api_key: str = ""  # optional, raises the public rate limit
    lifi_timeout_sec: float = 10.0
    lifi_routes_timeout_sec: float = 15.0  # advanced/routes is slower than /quote

    # DefiLlama (security data provider)
    llama_base_url: str = "https://api.llama.fi"
    llama_timeout_sec: float = 10.0
    llama_directory_timeout_sec: float = 15.0  # /protocols is a multi-MB payload

    # Route comparison
    route_limit: int = 3
    route_order: str = "RECOMMENDED"
    aggregator_fee_marker: str = "LIFI"  # fee names containing this are aggregator fees
    # Quotes need a sender; any well-formed address works for estimation
    quote_from_address: str = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"

    # Risk scoring
    min_tvl_usd: Decimal = Decimal("10000000")
    incident_lookback_years: int = 2

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # empty = console only


settings = Settings()
