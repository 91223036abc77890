from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IGNORED_PATTERNS = [
    "every 2nd day north",
    "everyday",
    "every 2nd south-west",
    "every 2nd day south",
    "South Wales 2nd",
]


def _split_env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
    """Application runtime configuration."""

    app_name: str = "Schedule API"
    environment: str = os.getenv("SP_ENVIRONMENT", "development")
    host: str = os.getenv("SP_HOST", "127.0.0.1")
    port: int = int(os.getenv("SP_PORT", "8080"))

    sqlite_path: Path = Path(os.getenv("SP_SQLITE_PATH", "./data/schedule.db"))

    ignored_patterns: List[str] = Field(
        default_factory=lambda: _split_env_list("SP_IGNORED_PATTERNS", DEFAULT_IGNORED_PATTERNS)
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: _split_env_list(
            "SP_CORS_ORIGINS", ["http://127.0.0.1:5173", "http://localhost:5173"]
        )
    )

    @field_validator("ignored_patterns", "cors_origins", mode="before")
    @classmethod
    def _split_list(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, list):
            return value
        if not value:
            return []
        return [item.strip() for item in value.split(",") if item.strip()]


settings = Settings()

# Ensure essential directories exist
settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
