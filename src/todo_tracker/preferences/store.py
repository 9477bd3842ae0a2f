# src/todo_tracker/preferences/store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any

from ..core.listeners import ListenerSet, Subscription, notify
from ..core.models import DEFAULT_USER_SETTINGS, SortOrder, UserSettings, VisualizationOption
from ..core.ports import SettingsListener

logger = logging.getLogger(__name__)

_SORT_ORDER_KEY = "sort_order"
_VISUALIZATION_KEY = "visualization_option"


def _parse_settings(data: Any) -> UserSettings:
    """Best-effort decode; every unreadable field falls back to its default."""
    if not isinstance(data, dict):
        return DEFAULT_USER_SETTINGS

    sort_order = DEFAULT_USER_SETTINGS.sort_order
    raw_sort = data.get(_SORT_ORDER_KEY)
    if isinstance(raw_sort, str):
        with contextlib.suppress(ValueError):
            sort_order = SortOrder(raw_sort)

    option = DEFAULT_USER_SETTINGS.visualization_option
    raw_option = data.get(_VISUALIZATION_KEY)
    if isinstance(raw_option, str):
        with contextlib.suppress(ValueError):
            option = VisualizationOption(raw_option)

    return UserSettings(sort_order=sort_order, visualization_option=option)


class PreferenceStore:
    """
    JSON-file preference store.

    File layout: {"sort_order": "...", "visualization_option": "..."}.
    Missing or corrupted file -> defaults (NONE / ALL); never raises on read.
    Writes go through a tmp file + os.replace.
    """

    def __init__(self, path: str | Path = "preferences.json") -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._listeners: ListenerSet[UserSettings] = ListenerSet("preferences")
        self._current = self._load()
        logger.info(
            "PreferenceStore ready path=%s sort=%s visualization=%s",
            self._path,
            self._current.sort_order.value,
            self._current.visualization_option.value,
        )

    @property
    def current(self) -> UserSettings:
        return self._current

    def _load(self) -> UserSettings:
        if not self._path.exists():
            return DEFAULT_USER_SETTINGS
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Failed to read preferences from %s; using defaults", self._path, exc_info=True)
            return DEFAULT_USER_SETTINGS
        return _parse_settings(data)

    def _save(self, settings: UserSettings) -> None:
        payload = {
            _SORT_ORDER_KEY: settings.sort_order.value,
            _VISUALIZATION_KEY: settings.visualization_option.value,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, indent=2), "utf-8")
        os.replace(tmp, self._path)

    def _update(self, **changes: Any) -> None:
        # Save and emit under one lock: listeners see writes in the order they hit disk.
        with self._lock:
            updated = replace(self._current, **changes)
            self._save(updated)
            self._current = updated
            logger.debug("Preferences saved %s", updated)
            self._listeners.emit(updated)

    # ---- change feed ----

    def subscribe(self, listener: SettingsListener) -> Subscription:
        with self._lock:
            sub = self._listeners.add(listener)
            notify(listener, self._current, source="preferences")
        return sub

    # ---- writes ----

    def set_sort_order(self, order: SortOrder) -> None:
        self._update(sort_order=SortOrder(order))

    def set_visualization_option(self, option: VisualizationOption) -> None:
        self._update(visualization_option=VisualizationOption(option))
