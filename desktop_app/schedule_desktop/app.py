"""Einstiegspunkt für die Desktop-Anwendung."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from .api_client import ApiClient
from .config import load_config
from .schedule_store import ScheduleDataStore
from .settings_store import JsonFileStore, ScheduleSettingsStore
from .widgets.planner import PlannerWindow


def main() -> None:
    """Startet die Qt-Anwendung."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("Schedule Planner")
    app.setOrganizationName("Schedule Planner")
    config = load_config()

    api_client = ApiClient(config.api_base_url, token=config.api_token, timeout=config.request_timeout)
    data_store = ScheduleDataStore(api_client, config.left_endpoint, config.right_endpoint)
    settings_store = ScheduleSettingsStore(JsonFileStore(config.settings_path))
    settings_store.load()

    window = PlannerWindow(data_store, settings_store)
    window.show()
    window.reload()

    sys.exit(app.exec())


__all__ = ["main"]
