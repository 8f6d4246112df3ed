"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion. App-specific
settings use the ``NYAYADHAAR_`` prefix; infrastructure settings use
their canonical environment variable names via ``validation_alias``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Central configuration for the NyayAdhaar service.

    Environment variables are loaded from a ``.env`` file when present.
    App-specific keys are prefixed with ``NYAYADHAAR_``; Supabase / infra
    keys use their standard names (configured via ``validation_alias``).
    """

    model_config = SettingsConfigDict(
        env_prefix="NYAYADHAAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"

    # ── Supabase (remote entity store) ─────────────────────────────────
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_service_key: str = Field(default="", validation_alias="SUPABASE_SERVICE_KEY")
    store_timeout_seconds: float = 15.0

    # ── Redis ──────────────────────────────────────────────────────────
    redis_url: str = Field(default="", validation_alias="REDIS_URL")

    # ── API ────────────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    cors_origins: str = ""  # comma-separated, production only

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    # ── Access scope ───────────────────────────────────────────────────
    scope_cache_ttl: int = 300  # seconds a Victim lookup stays cached

    # ── Features ───────────────────────────────────────────────────────
    seed_demo_data: bool = True
    chat_log_enabled: bool = True

    # ── Derived Properties ─────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)


# Module-level singleton: import ``settings`` everywhere.
settings = Settings()
