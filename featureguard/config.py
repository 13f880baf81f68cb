"""
Authorization layer configuration.

Loads settings from environment variables with sensible defaults.
Every variable is prefixed with FEATUREGUARD_ (e.g. FEATUREGUARD_SENTRY_DSN).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # Request integration
    # ==========================================================================

    # Attribute on `request.state` where the auth layer stores the principal
    principal_state_attr: str = "principal"

    # Shown on every contract violation; the user can't fix those themselves
    support_action: str = 'Contact support and provide the "error_id" value.'

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    model_config = SettingsConfigDict(
        env_prefix="FEATUREGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
