# src/todo_tracker/core/status.py

from __future__ import annotations

from collections.abc import Collection, Sequence

from .models import Status, Task


def classify(
    all_tasks: Sequence[Task],
    visible_tasks: Sequence[Task],
    selected_ids: Collection[int],
) -> Status:
    """
    Pick exactly one status. First match wins:

    1. no tasks at all          -> NO_TASK_REGISTERED
    2. every task completed     -> ALL_TASKS_CONCLUDED
    3. something selected       -> SELECTION_MODE
    4. filters hide everything  -> NO_TASKS_TO_SHOW
    5. otherwise                -> TASK_TO_SHOW

    Selection outranks an empty visible list so the selection toolbar stays
    up while items are still selected.
    """
    if not all_tasks:
        return Status.NO_TASK_REGISTERED
    if all(t.is_completed for t in all_tasks):
        return Status.ALL_TASKS_CONCLUDED
    if selected_ids:
        return Status.SELECTION_MODE
    if not visible_tasks:
        return Status.NO_TASKS_TO_SHOW
    return Status.TASK_TO_SHOW
