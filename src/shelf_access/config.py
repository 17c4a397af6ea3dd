"""Configuration and environment loading for Shelf Access."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase (required: there is no degraded mode without a backing store)
    supabase_url: str
    supabase_key: str

    # Administrator identity, compared case-sensitively
    admin_email: str | None = None

    # Network origin used as the throttle key
    origin_lookup_enabled: bool = False  # Server derives origin from the peer by default
    origin_lookup_url: str = "https://api.ipify.org?format=json"
    origin_lookup_timeout: float = 5.0
    origin_fallback: str = "127.0.0.1"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
