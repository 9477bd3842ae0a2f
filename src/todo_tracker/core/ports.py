# src/todo_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The view model depends on Protocols instead of concrete stores.
This keeps persistence swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Protocol

from .listeners import Subscription
from .models import Category, SortOrder, Task, UserSettings, ViewState, VisualizationOption

TasksListener = Callable[[Sequence[Task]], None]
SettingsListener = Callable[[UserSettings], None]
ViewStateListener = Callable[[ViewState], None]


class TaskRepo(Protocol):
    """
    Keyed task store.

    subscribe() delivers the full current collection right away and again
    after every successful mutation. Deleting or replacing an unknown id is a
    no-op, not an error.
    """

    def subscribe(self, listener: TasksListener) -> Subscription: ...

    def insert(self, description: str, category: Category) -> Task: ...
    def delete(self, task_id: int) -> None: ...
    def delete_many(self, task_ids: Iterable[int]) -> None: ...
    def replace(self, task: Task) -> None: ...

    def list_all(self) -> list[Task]: ...
    def count_tasks(self) -> int: ...


class PreferenceRepo(Protocol):
    """
    Persisted user settings.

    subscribe() delivers the current settings right away (defaults when
    nothing is stored or the stored state is unreadable) and again after
    every write.
    """

    def subscribe(self, listener: SettingsListener) -> Subscription: ...

    def set_sort_order(self, order: SortOrder) -> None: ...
    def set_visualization_option(self, option: VisualizationOption) -> None: ...
