"""Application configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared import constants


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = "product-discovery-feed"
    app_env: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # API Settings
    # -------------------------------------------------------------------------
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 4
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    admin_api_key: str = ""

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    # -------------------------------------------------------------------------
    # Upstream Product Search (Canopy Amazon search API)
    # -------------------------------------------------------------------------
    upstream_base_url: str = "https://rest.canopyapi.co"
    upstream_api_key: str = ""
    upstream_timeout_seconds: float = 10.0
    upstream_domain: str = "US"

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    storage_backend: Literal["postgres", "memory"] = "postgres"

    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "feed"
    postgres_password: str = ""
    postgres_db: str = "product_feed"

    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 1800

    @property
    def database_url(self) -> str:
        """Construct PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def database_url_sync(self) -> str:
        """Construct synchronous PostgreSQL connection URL (for Alembic)."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # -------------------------------------------------------------------------
    # Redis
    # -------------------------------------------------------------------------
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0
    preference_cache_ttl: int = 60

    @property
    def redis_url(self) -> str:
        """Construct Redis connection URL."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # -------------------------------------------------------------------------
    # Catalog Bootstrap
    # -------------------------------------------------------------------------
    catalog_min_items: int = constants.CATALOG_MIN_ITEMS
    max_refreshes_per_request: int = constants.MAX_REFRESHES_PER_REQUEST

    # -------------------------------------------------------------------------
    # Feed Settings
    # -------------------------------------------------------------------------
    feed_size: int = constants.DEFAULT_FEED_SIZE
    candidate_pool_limit: int = constants.CANDIDATE_POOL_LIMIT
    feed_composer: Literal["thompson", "spread"] = "thompson"
    beta_sampler: Literal["numpy", "log_uniform"] = "numpy"
    discovery_interval: int = constants.DISCOVERY_INTERVAL
    cap_window: int = constants.CAP_WINDOW
    cap_max_repeats: int = constants.CAP_MAX_REPEATS
    spread_lookahead: int = constants.SPREAD_LOOKAHEAD


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
