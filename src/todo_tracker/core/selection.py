# src/todo_tracker/core/selection.py

from __future__ import annotations

from collections.abc import Iterable


class SelectionState:
    """
    Transient set of selected task ids.

    Empty set means "not in selection mode". Lives only for the process
    lifetime; the view model is its only owner.
    """

    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids: set[int] = set(ids)

    def toggle(self, task_id: int) -> None:
        if task_id in self._ids:
            self._ids.discard(task_id)
        else:
            self._ids.add(task_id)

    def select_only(self, task_id: int) -> None:
        self._ids = {task_id}

    def clear(self) -> None:
        self._ids.clear()

    def retain(self, existing_ids: Iterable[int]) -> set[int]:
        """Drop ids that are not in `existing_ids`. Returns the dropped ids."""
        keep = self._ids.intersection(existing_ids)
        dropped = self._ids - keep
        self._ids = keep
        return dropped

    def snapshot(self) -> frozenset[int]:
        return frozenset(self._ids)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __repr__(self) -> str:
        return f"SelectionState({sorted(self._ids)!r})"
