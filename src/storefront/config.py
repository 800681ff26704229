from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STOREFRONT_", env_file=".env", extra="ignore")

    # Embedded cache database
    cache_database_url: str = Field(default="sqlite+aiosqlite:///./storefront-cache.db")
    cache_enabled: bool = True

    # TTL per entity kind (seconds)
    ttl_profile_seconds: int = Field(default=24 * 60 * 60, gt=0)
    ttl_categories_seconds: int = Field(default=6 * 60 * 60, gt=0)
    ttl_products_seconds: int = Field(default=60 * 60, gt=0)
    ttl_reviews_seconds: int = Field(default=60 * 60, gt=0)

    # Expiry sweeper
    sweep_enabled: bool = True
    sweep_interval_seconds: float = Field(default=30 * 60, gt=0)

    # Optional cap on cached pages per store (products, reviews)
    max_pages_per_store: int | None = Field(default=None, ge=1)

    # Observability
    log_level: str = "INFO"
    log_json: bool = False
    enable_metrics: bool = True


settings = Settings()
