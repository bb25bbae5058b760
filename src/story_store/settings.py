"""
@file_name: settings.py
@description: Unified configuration management

Uses pydantic-settings to load store configuration from environment
variables (prefix STORY_STORE_) and an optional .env file at the project root.

Usage:
    from story_store.settings import settings

    limit = settings.story_cache_size
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory (3 levels up from src/story_store/settings.py)
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class StoreSettings(BaseSettings):
    """Store configuration, automatically loaded from .env file and environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="STORY_STORE_",
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ===== Cache capacities =====
    # process_csf_file / prepare_meta
    csf_cache_size: int = Field(default=1000, ge=1)
    # prepare_story
    story_cache_size: int = Field(default=10000, ge=1)

    # ===== Logging =====
    log_level: str = "INFO"


settings = StoreSettings()
