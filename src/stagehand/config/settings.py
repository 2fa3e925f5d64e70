"""
Application settings using Pydantic.

Provides environment-based configuration loading with STAGEHAND_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STAGEHAND_",
    )

    # Labels
    label_prefix: str = "stagehand.io"
    managed_by: str = "stagehand"

    # Image fallbacks when neither the component nor the CR defaults set a field
    default_registry: str = "docker.io"
    default_tag: str = "latest"
    default_pull_policy: str = "IfNotPresent"

    # Storage
    default_volume_size: str = "8Gi"

    # Credentials
    password_length: int = 24
    persist_generated_secrets: bool = False

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
