from __future__ import annotations

import json
from pathlib import Path

from schedule_desktop.models import RouteGroup, TimeSettings
from schedule_desktop.settings_store import (DEFAULT_IGNORED_PATTERNS, SETTINGS_KEY, JsonFileStore,
                                             ScheduleSettingsStore, default_route_groups)


def _store(path: Path) -> ScheduleSettingsStore:
    store = ScheduleSettingsStore(JsonFileStore(path))
    store.load()
    return store


def test_defaults_without_file(tmp_path: Path):
    store = _store(tmp_path / "settings.json")
    assert store.route_groups == default_route_groups()
    assert store.ignored_patterns == DEFAULT_IGNORED_PATTERNS
    assert store.time_settings == TimeSettings()


def test_save_and_reload_yields_same_bundle(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = _store(path)
    store.add_group(RouteGroup("Scotland", ["ab", " iv  +kw", "AB"], True, "text-blue-500"))
    store.set_time_settings(TimeSettings(late_end_hour=21, rest_message="Rest!"))
    assert store.route_groups[-1].codes == ["AB", "IV+KW"]

    reloaded = _store(path)
    assert reloaded.bundle() == store.bundle()


def test_partial_time_settings_are_merged(tmp_path: Path):
    path = tmp_path / "settings.json"
    JsonFileStore(path).set(SETTINGS_KEY, json.dumps({"timeSettings": {"lateEndHour": 22}}))

    store = _store(path)
    assert store.time_settings.late_end_hour == 22
    assert store.time_settings.early_start_hour == 7
    assert store.route_groups == default_route_groups()


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text("not json", encoding="utf-8")

    store = _store(path)
    assert store.ignored_patterns == DEFAULT_IGNORED_PATTERNS


def test_load_reads_only_once(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = _store(path)
    JsonFileStore(path).set(SETTINGS_KEY, json.dumps({"ignoredPatterns": ["other"]}))

    store.load()
    assert store.ignored_patterns == DEFAULT_IGNORED_PATTERNS


def test_mutations_and_reset(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = _store(path)
    store.remove_group(0)
    store.update_group(0, RouteGroup("Capital", ["wd"], False, "text-red-500"))
    store.set_ignored_patterns(["  weekly ", "", "monthly"])
    assert store.route_groups[0].name == "Capital"
    assert store.route_groups[0].codes == ["WD"]
    assert store.ignored_patterns == ["weekly", "monthly"]

    store.reset()
    assert store.bundle() == ScheduleSettingsStore(JsonFileStore(tmp_path / "fresh.json")).bundle()
    assert _store(path).bundle() == store.bundle()


class _FailingStore:
    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk unavailable")


def test_storage_failures_are_swallowed():
    store = ScheduleSettingsStore(_FailingStore())
    store.load()
    assert store.time_settings == TimeSettings()
    assert store.save() is False

    store.set_ignored_patterns(["kept in memory"])
    assert store.ignored_patterns == ["kept in memory"]


def test_empty_lists_survive_reload(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = _store(path)
    store.set_ignored_patterns([])
    for index in range(len(store.route_groups) - 1, -1, -1):
        store.remove_group(index)

    reloaded = _store(path)
    assert reloaded.ignored_patterns == []
    assert reloaded.route_groups == []
    assert reloaded.bundle() == store.bundle()


def test_defaults_leave_current_state_untouched(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = _store(path)
    store.set_ignored_patterns(["weekly"])

    groups, patterns, time_settings = store.defaults()

    assert groups == default_route_groups()
    assert patterns == DEFAULT_IGNORED_PATTERNS
    assert time_settings == TimeSettings()
    assert store.ignored_patterns == ["weekly"]
    assert _store(path).ignored_patterns == ["weekly"]
