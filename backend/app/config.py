"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ---------------- DATABASE ----------------
    database_url: str = "sqlite+aiosqlite:///./rentals.db"
    # Service-role connection used for privileged counter writes.
    service_database_url: str = ""
    store_timeout_seconds: float = 10.0

    # ---------------- AUTH ----------------
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = ""
    jwt_expire_minutes: int = 60
    admin_api_secret: str = ""
    cron_secret: str = ""
    csrf_token_ttl_seconds: int = 24 * 60 * 60

    # ---------------- RATE LIMITS ----------------
    rate_limit_window_seconds: int = 60
    rate_limit_general: int = 100
    rate_limit_auth: int = 10
    rate_limit_create: int = 5
    rate_limit_admin_write: int = 30

    # ---------------- CACHE ----------------
    cache_default_ttl_seconds: int = 5 * 60
    product_cache_ttl_seconds: int = 15 * 60
    collection_cache_ttl_seconds: int = 30 * 60

    # ---------------- OPENAI (listing descriptions) ----------------
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    ai_timeout_seconds: float = 20.0

    # ---------------- APP ----------------
    app_name: str = "Rental Marketplace API"
    app_version: str = "1.0.0"
    debug: bool = False
    archive_after_days: int = 60
    cors_origins: List[str] = []

    @computed_field
    @property
    def rate_limits(self) -> dict[str, int]:
        return {
            "general": self.rate_limit_general,
            "auth": self.rate_limit_auth,
            "create": self.rate_limit_create,
            "admin_write": self.rate_limit_admin_write,
        }

    @computed_field
    @property
    def effective_service_database_url(self) -> str:
        return self.service_database_url or self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
