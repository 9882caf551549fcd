"""Lightweight configuration for the Skirmish tools."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_", env_file=".env", env_file_encoding="utf-8"
    )

    rules_version: str = Field(default="1.0", description="Version of the bundled combat rules")
    rules_seed: str = Field(
        default="skirmish", description="Base seed for every roll made by the default rules"
    )
    default_max_ticks: int = Field(
        default=20, ge=1, description="Tick budget used when a run does not specify one"
    )
    max_ticks_limit: int = Field(
        default=500, ge=1, description="Largest tick budget accepted for any run"
    )
    log_max_entries: int = Field(
        default=2000, ge=1, description="Battle log entries retained per simulator session"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
