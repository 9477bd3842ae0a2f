# src/todo_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import PreferenceRepo, TaskRepo
from .view_state import TodoListViewModel


@dataclass
class AppState:
    # Settings are kept on the state for easy access from connectors/commands.
    settings: Any

    task_store: TaskRepo
    preferences: PreferenceRepo
    view_model: TodoListViewModel
