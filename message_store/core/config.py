"""
Application configuration using Pydantic Settings.

Values come from environment variables or a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # General
    # ===========================================
    DEBUG: bool = False

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./messages.db"

    # ===========================================
    # Logging
    # ===========================================
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Messages
    # ===========================================
    MESSAGE_TEXT_MAX_LENGTH: int = 10000
    MESSAGE_TAG_MAX_LENGTH: int = 100

    # Whether tag search returns soft-deleted messages when the caller
    # does not say otherwise.
    MESSAGE_SEARCH_INCLUDE_DELETED: bool = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
