"""
Application configuration via environment variables.

Uses Pydantic BaseSettings to load and validate all config from env vars
or a .env.local file. Every setting has a sensible default for local
development so the app can start with minimal configuration.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment selector."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Central configuration for the Doctor Finder service.

    Values are loaded from environment variables first, falling back
    to a `.env.local` file in the project root. Secrets should NEVER
    be committed.
    """

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Environment ──────────────────────────────────────────────
    environment: Environment = Environment.DEVELOPMENT

    # ── Supabase ─────────────────────────────────────────────────
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_service_key: str = Field(default="", description="Supabase service-role key")

    # ── Availability ─────────────────────────────────────────────
    workday_cutoff_hour: int = Field(
        default=17, ge=0, le=23,
        description="Local hour after which no same-day slot is offered",
    )

    # ── Distance cache ───────────────────────────────────────────
    distance_cache_max_entries: int = Field(
        default=10_000, ge=1, description="LRU bound for memoized distances"
    )
    distance_cache_ttl_seconds: Optional[float] = Field(
        default=None, gt=0, description="Entry lifetime; unset keeps entries until evicted"
    )
    distance_cache_symmetric_keys: bool = Field(
        default=False, description="Share one entry between (A, B) and (B, A) lookups"
    )

    # ── Search ───────────────────────────────────────────────────
    search_result_limit: int = Field(default=100, ge=1, le=1000, description="Max doctors per search response")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Root log level")

    # ── Derived helpers ──────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return cached Settings instance.

    Using lru_cache ensures we read env vars exactly once, and every
    module that calls ``get_settings()`` gets the same object.
    """
    return Settings()
