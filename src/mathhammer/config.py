"""Lightweight configuration for the Mathhammer rules engine."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="MATHHAMMER_"
    )

    core_abilities_path: Path | None = Field(
        default=None,
        description="JSON file replacing the built-in core ability registry",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
