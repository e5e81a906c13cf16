# src/cryptoquote/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    ENV: str = Field(default="dev")
    LOG_LEVEL: str | None = None

    # API
    CORS_ORIGINS: str = "*"

    # Cache lifetimes (milliseconds). Spot prices go stale much faster than daily history.
    SPOT_CACHE_TTL_MS: int = Field(default=30_000, gt=0)
    HISTORY_CACHE_TTL_MS: int = Field(default=300_000, gt=0)

    # CoinGecko
    COINGECKO_BASE_URL: str = "https://api.coingecko.com/api/v3"
    COINGECKO_API_KEY: str | None = None
    COINGECKO_TIMEOUT: float = 10.0
    # Minimum seconds between upstream requests; 0 disables spacing.
    COINGECKO_MIN_REQUEST_INTERVAL: float = Field(default=0.0, ge=0)

    # Moving average window (days)
    MA_DEFAULT_DAYS: int = 7
    MA_MIN_DAYS: int = 2
    MA_MAX_DAYS: int = 90

    # Observability
    METRICS_ENABLED: bool = True

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
