# src/todo_tracker/core/filtering.py

"""
Filter / sort engine.

Pure functions only: no logging, no store access.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Category, SortOrder, Task, VisualizationOption


def _description_key(task: Task) -> tuple[str, int]:
    # Plain code-point ordering, no locale collation. Ties fall back to id
    # (store order) so the ordering is total and re-sorting is a no-op.
    return task.description, task.id


def sort_tasks(tasks: Iterable[Task], sort_order: SortOrder) -> tuple[Task, ...]:
    """
    NONE keeps the incoming (store) order.
    DESCENDING is the reverse of ASCENDING, so ties mirror each other.
    """
    items = tuple(tasks)
    if sort_order is SortOrder.NONE:
        return items

    ascending = sorted(items, key=_description_key)
    if sort_order is SortOrder.DESCENDING:
        ascending.reverse()
    return tuple(ascending)


def filter_tasks(
    tasks: Iterable[Task],
    visualization_option: VisualizationOption,
    selected_categories: Iterable[Category],
    sort_order: SortOrder,
) -> tuple[Task, ...]:
    """Return the visible sequence for the given configuration."""
    categories = frozenset(selected_categories)
    out: Iterable[Task] = tasks

    if visualization_option is VisualizationOption.NOT_CONCLUDED:
        out = [t for t in out if not t.is_completed]

    if categories:
        out = [t for t in out if t.category in categories]

    return sort_tasks(out, sort_order)
