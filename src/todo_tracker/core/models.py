# src/todo_tracker/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Category(StrEnum):
    """Closed set of task categories."""

    STUDY = "study"
    LEISURE = "leisure"
    WORK = "work"
    HEALTH = "health"

    @property
    def display_name(self) -> str:
        return CATEGORY_DISPLAY_NAMES[self]

    @classmethod
    def from_db(cls, raw: str | None) -> Category | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    @classmethod
    def parse(cls, text: str) -> Category:
        """Accept either the stored value or the display name (case-insensitive)."""
        key = (text or "").strip().lower()
        for cat in cls:
            if key in (cat.value, CATEGORY_DISPLAY_NAMES[cat].lower()):
                return cat
        raise ValueError(f"Unknown category: {text!r}")


CATEGORY_DISPLAY_NAMES: dict[Category, str] = {
    Category.STUDY: "Study",
    Category.LEISURE: "Leisure",
    Category.WORK: "Work",
    Category.HEALTH: "Health",
}


class SortOrder(StrEnum):
    NONE = "none"
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def next(self) -> SortOrder:
        """NONE -> ASCENDING -> DESCENDING -> NONE."""
        return _SORT_CYCLE[self]


_SORT_CYCLE = {
    SortOrder.NONE: SortOrder.ASCENDING,
    SortOrder.ASCENDING: SortOrder.DESCENDING,
    SortOrder.DESCENDING: SortOrder.NONE,
}


class VisualizationOption(StrEnum):
    ALL = "all"
    NOT_CONCLUDED = "not_concluded"

    def toggled(self) -> VisualizationOption:
        if self is VisualizationOption.ALL:
            return VisualizationOption.NOT_CONCLUDED
        return VisualizationOption.ALL


class Status(StrEnum):
    """
    Coarse classification of the current view.

    Used by the presentation layer to pick which screen / toolbar to render.
    """

    NO_TASK_REGISTERED = "no_task_registered"
    ALL_TASKS_CONCLUDED = "all_tasks_concluded"
    SELECTION_MODE = "selection_mode"
    NO_TASKS_TO_SHOW = "no_tasks_to_show"
    TASK_TO_SHOW = "task_to_show"


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    description: str
    category: Category
    is_completed: bool = False


@dataclass(frozen=True, slots=True)
class UserSettings:
    sort_order: SortOrder = SortOrder.NONE
    visualization_option: VisualizationOption = VisualizationOption.ALL


DEFAULT_USER_SETTINGS = UserSettings()


@dataclass(frozen=True, slots=True)
class ViewState:
    """
    One consistent, UI-ready snapshot.

    Persisted fields: sort_order, visualization_option.
    Ephemeral fields (reset on restart): selected_categories, selected_task_ids.
    """

    sort_order: SortOrder = SortOrder.NONE
    selected_categories: frozenset[Category] = field(default_factory=frozenset)
    visualization_option: VisualizationOption = VisualizationOption.ALL
    selected_task_ids: frozenset[int] = field(default_factory=frozenset)
    status: Status = Status.NO_TASK_REGISTERED
    visible_tasks: tuple[Task, ...] = ()
    total_count: int = 0
    completed_count: int = 0

    @property
    def in_selection_mode(self) -> bool:
        return bool(self.selected_task_ids)
