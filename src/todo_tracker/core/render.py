# src/todo_tracker/core/render.py

"""Plain-text rendering of a ViewState for the console connector."""

from __future__ import annotations

from .models import Category, SortOrder, Status, Task, ViewState, VisualizationOption

_SORT_LABELS = {
    SortOrder.NONE: "none",
    SortOrder.ASCENDING: "A-Z",
    SortOrder.DESCENDING: "Z-A",
}

_VISUALIZATION_LABELS = {
    VisualizationOption.ALL: "all",
    VisualizationOption.NOT_CONCLUDED: "not concluded",
}

_STATUS_MESSAGES = {
    Status.NO_TASK_REGISTERED: "No tasks registered yet. Add one with /add <category> <description>.",
    Status.ALL_TASKS_CONCLUDED: "Congratulations! All tasks are completed.",
    Status.NO_TASKS_TO_SHOW: "No tasks match the current filters. Try selecting other categories.",
}


def _categories_label(categories: frozenset[Category]) -> str:
    if not categories:
        return "any"
    return ", ".join(c.display_name for c in Category if c in categories)


def render_task(task: Task, *, selected: bool = False) -> str:
    mark = "x" if task.is_completed else " "
    sel = "*" if selected else " "
    return f"{sel}[{mark}] #{task.id} {task.description} ({task.category.display_name})"


def render_view_state(view: ViewState) -> str:
    lines = [
        f"Tasks {view.completed_count}/{view.total_count} done"
        f" | sort: {_SORT_LABELS[view.sort_order]}"
        f" | showing: {_VISUALIZATION_LABELS[view.visualization_option]}"
        f" | categories: {_categories_label(view.selected_categories)}"
    ]

    if view.status is Status.SELECTION_MODE:
        lines.append(
            f"[selection] {len(view.selected_task_ids)} selected"
            " | /tap <id> to toggle, /delete to remove, /clear to cancel"
        )

    message = _STATUS_MESSAGES.get(view.status)
    if message:
        lines.append(message)

    if view.status is not Status.NO_TASK_REGISTERED:
        for task in view.visible_tasks:
            lines.append(render_task(task, selected=task.id in view.selected_task_ids))

    return "\n".join(lines)
