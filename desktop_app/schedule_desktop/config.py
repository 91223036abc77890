"""Konfigurations-Utilities für die Desktop-Anwendung."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://127.0.0.1:8080"
DEFAULT_LEFT_ENDPOINT = "/api/schedule-tool"
DEFAULT_RIGHT_ENDPOINT = "/api/schedule-tool2"
DEFAULT_SETTINGS_PATH = Path.home() / ".schedule_planner" / "settings.json"
DEFAULT_REQUEST_TIMEOUT = 15


@dataclass(slots=True)
class AppConfig:
    """Konfigurationswerte für die Anwendung."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: Optional[str] = None
    left_endpoint: str = DEFAULT_LEFT_ENDPOINT
    right_endpoint: str = DEFAULT_RIGHT_ENDPOINT
    settings_path: Path = field(default_factory=lambda: DEFAULT_SETTINGS_PATH)
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT


def load_config() -> AppConfig:
    """Lädt die Konfiguration aus einer optionalen `.env` Datei."""

    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings_path = os.getenv("SCHEDULE_SETTINGS_PATH")
    return AppConfig(
        api_base_url=os.getenv("SCHEDULE_API_BASE_URL", DEFAULT_API_BASE_URL),
        api_token=os.getenv("SCHEDULE_API_TOKEN"),
        left_endpoint=os.getenv("SCHEDULE_LEFT_ENDPOINT", DEFAULT_LEFT_ENDPOINT),
        right_endpoint=os.getenv("SCHEDULE_RIGHT_ENDPOINT", DEFAULT_RIGHT_ENDPOINT),
        settings_path=Path(settings_path).expanduser() if settings_path else DEFAULT_SETTINGS_PATH,
        request_timeout=int(os.getenv("SCHEDULE_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)),
    )


__all__ = ["AppConfig", "load_config"]
