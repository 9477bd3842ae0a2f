# src/todo_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the concrete stores into the view model and AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..core.view_state import TodoListViewModel
from ..preferences.store import PreferenceStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path)
    preferences = PreferenceStore(settings.preferences_path)
    view_model = TodoListViewModel(task_store, preferences)

    return AppState(
        settings=settings,
        task_store=task_store,
        preferences=preferences,
        view_model=view_model,
    )


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.view_model.close()
    except Exception:
        logger.exception("View model close failed.")

    close = getattr(state.task_store, "close", None)
    if close is not None:
        try:
            close()
        except Exception:
            logger.debug("Task store close failed.", exc_info=True)
