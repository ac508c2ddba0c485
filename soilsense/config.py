"""Application settings loaded from environment variables via pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(StrEnum):
    json = "json"
    console = "console"


class SyncMethod(StrEnum):
    post = "POST"
    put = "PUT"


class Settings(BaseSettings):
    """Central configuration — all values sourced from env vars or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Offline store: primary tier ─────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./soilsense.db"

    # ── Offline store: fallback tier ────────────────────────────────────────
    redis_url: str = "redis://localhost:6379/0"
    offline_key_prefix: str = "offline:"

    # ── Sync ────────────────────────────────────────────────────────────────
    sync_endpoint: str = ""
    sync_method: SyncMethod = SyncMethod.post
    sync_timeout_seconds: float = 10.0
    connectivity_probe_url: str = ""
    connectivity_timeout_seconds: float = 3.0

    # ── Speech ──────────────────────────────────────────────────────────────
    default_locale: str = "en"

    # ── Observability ───────────────────────────────────────────────────────
    log_level: str = "info"
    log_format: LogFormat = LogFormat.json


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance (cached after first call)."""
    return Settings()
