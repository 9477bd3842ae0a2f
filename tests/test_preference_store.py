# tests/test_preference_store.py

from __future__ import annotations

import json
from pathlib import Path

from todo_tracker.core.models import DEFAULT_USER_SETTINGS, SortOrder, UserSettings, VisualizationOption
from todo_tracker.preferences.store import PreferenceStore


def test_defaults_when_nothing_persisted(tmp_path: Path) -> None:
    store = PreferenceStore(tmp_path / "preferences.json")
    seen: list[UserSettings] = []
    store.subscribe(seen.append)
    assert seen == [DEFAULT_USER_SETTINGS]
    assert DEFAULT_USER_SETTINGS == UserSettings(SortOrder.NONE, VisualizationOption.ALL)


def test_writes_emit_and_persist(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    store = PreferenceStore(path)
    seen: list[UserSettings] = []
    store.subscribe(seen.append)

    store.set_sort_order(SortOrder.DESCENDING)
    store.set_visualization_option(VisualizationOption.NOT_CONCLUDED)

    assert seen[-1] == UserSettings(SortOrder.DESCENDING, VisualizationOption.NOT_CONCLUDED)
    assert len(seen) == 3
    assert json.loads(path.read_text("utf-8")) == {
        "sort_order": "descending",
        "visualization_option": "not_concluded",
    }
    assert PreferenceStore(path).current == seen[-1]


def test_corrupted_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("{not json", "utf-8")
    store = PreferenceStore(path)
    assert store.current == DEFAULT_USER_SETTINGS

    # Still writable afterwards.
    store.set_sort_order(SortOrder.ASCENDING)
    assert PreferenceStore(path).current.sort_order is SortOrder.ASCENDING


def test_unknown_values_fall_back_per_field(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text(json.dumps({"sort_order": "sideways", "visualization_option": "not_concluded"}), "utf-8")
    assert PreferenceStore(path).current == UserSettings(SortOrder.NONE, VisualizationOption.NOT_CONCLUDED)

    path.write_text(json.dumps(["not", "a", "dict"]), "utf-8")
    assert PreferenceStore(path).current == DEFAULT_USER_SETTINGS
