"""
Configuration settings for the learning journey engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JOURNEY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Backend API
    # ========================================
    api_base_url: str = Field(
        default="https://apis.dev.cream-collar.com",
        description="Base URL of the student platform backend",
    )
    api_timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout for backend calls",
    )

    # ========================================
    # Local key-value store
    # ========================================
    store_path: Path = Field(
        default=Path.home() / ".journey" / "store.json",
        description="JSON file holding userId, username and accessToken",
    )

    # ========================================
    # Journey evaluation
    # ========================================
    deadline_timezone: str = Field(
        default="UTC",
        description="Timezone used for deadlines that carry no offset",
    )
    automotive_course_title: str = Field(
        default="Different Players In The Automotive Industry",
        description="Title passed to the course details screen for the awareness course",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="INFO",
        description="Minimum loguru level for the default sink",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
