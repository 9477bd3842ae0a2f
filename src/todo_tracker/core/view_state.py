# src/todo_tracker/core/view_state.py

from __future__ import annotations

"""
View-state aggregator.

Combines three independently changing sources into one ViewState:
- the task collection (TaskRepo emissions),
- user settings (PreferenceRepo emissions),
- local ephemeral state (selection + category filter).

Processing model:
- every input (store emission or user operation) becomes an event in a FIFO queue,
- a single drain loop applies one event, recomputes, publishes, then takes the next,
- emissions caused by our own store writes are queued, never recursed into,
- whoever holds the drain lock drains for everyone; other callers (other
  threads, or observers reacting to a snapshot) only enqueue and return.

Store-owned fields are never updated optimistically: a write request only asks
the store, and the store's next emission is what changes the snapshot.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import replace

from .filtering import filter_tasks
from .listeners import ListenerSet, Subscription, notify
from .models import DEFAULT_USER_SETTINGS, Category, Task, UserSettings, ViewState
from .ports import PreferenceRepo, TaskRepo, ViewStateListener
from .selection import SelectionState
from .status import classify

logger = logging.getLogger(__name__)

# An event mutates local inputs and returns True when a new snapshot is due.
Event = Callable[[], bool]


class TodoListViewModel:
    def __init__(self, task_store: TaskRepo, preference_store: PreferenceRepo) -> None:
        self._task_store = task_store
        self._preference_store = preference_store

        # _queue_lock guards the queue and the emission counter only.
        # _drain_lock is never waited on: a caller that cannot take it leaves
        # its event for the current holder.
        self._queue_lock = threading.Lock()
        self._drain_lock = threading.Lock()
        self._queue: deque[Event] = deque()
        self._task_emissions_queued = 0
        self._closed = False

        # Latest upstream snapshots (treated as immutable).
        self._tasks: tuple[Task, ...] = ()
        self._settings: UserSettings = DEFAULT_USER_SETTINGS

        # Ephemeral state, owned here only.
        self._selection = SelectionState()
        self._categories: set[Category] = set()

        self._observers: ListenerSet[ViewState] = ListenerSet("view_state")
        self._state = ViewState()

        # Both stores usually emit on subscribe. Apply those initial values
        # together so the first snapshot is never a half-initialised mix.
        with self._drain_lock:
            self._task_sub = task_store.subscribe(self._on_tasks)
            self._settings_sub = preference_store.subscribe(self._on_settings)
            while True:
                event = self._take()
                if event is None:
                    break
                event()
            self._recompute()
        # Anything queued from another thread meanwhile.
        self._pump()

        logger.info(
            "View model ready tasks=%d sort=%s visualization=%s",
            len(self._tasks),
            self._settings.sort_order.value,
            self._settings.visualization_option.value,
        )

    # ---- observer API ----

    @property
    def state(self) -> ViewState:
        """Latest published snapshot."""
        return self._state

    def subscribe(self, listener: ViewStateListener) -> Subscription:
        """
        Deliver the current snapshot, then every new one.

        The first delivery goes through the queue, so it is ordered with
        publishes made by other threads.
        """
        sub = self._observers.add(listener)

        def apply() -> bool:
            notify(listener, self._state, source="view_state")
            return False

        self._post(apply)
        return sub

    def close(self) -> None:
        with self._queue_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.clear()
        self._task_sub.close()
        self._settings_sub.close()
        self._observers.clear()
        logger.debug("View model closed")

    # ---- upstream emissions ----

    def _on_tasks(self, tasks: Sequence[Task]) -> None:
        snapshot = tuple(tasks)

        def apply() -> bool:
            self._tasks = snapshot
            return True

        self._post(apply, task_emission=True)

    def _on_settings(self, settings: UserSettings) -> None:
        def apply() -> bool:
            self._settings = settings
            return True

        self._post(apply)

    # ---- user operations: persisted fields (store round-trip) ----

    def request_visualization_toggle(self) -> None:
        def apply() -> bool:
            option = self._settings.visualization_option.toggled()
            self._write(
                "set_visualization_option",
                lambda: self._preference_store.set_visualization_option(option),
            )
            return False

        self._post(apply)

    def request_sort_cycle(self) -> None:
        def apply() -> bool:
            order = self._settings.sort_order.next()
            self._write("set_sort_order", lambda: self._preference_store.set_sort_order(order))
            return False

        self._post(apply)

    # ---- user operations: ephemeral fields ----

    def toggle_category_filter(self, category: Category) -> None:
        def apply() -> bool:
            if category in self._categories:
                self._categories.discard(category)
            else:
                self._categories.add(category)
            return True

        self._post(apply)

    def on_task_press(self, task_id: int) -> None:
        """In selection mode a press toggles the task; otherwise nothing happens here."""

        def apply() -> bool:
            if not self._selection:
                return False
            self._selection.toggle(task_id)
            return True

        self._post(apply)

    def on_task_long_press(self, task_id: int) -> None:
        """Enter selection mode anchored on `task_id` (ignored if already selecting)."""

        def apply() -> bool:
            if self._selection:
                return False
            self._selection.select_only(task_id)
            return True

        self._post(apply)

    def clear_selection(self) -> None:
        def apply() -> bool:
            self._selection.clear()
            return True

        self._post(apply)

    # ---- user operations: task store writes ----

    def delete_selected(self) -> None:
        """
        Delete every selected task that still exists, then leave selection mode.

        When the store answers with a new collection, that emission publishes
        the cleared selection together with the shrunk list; the old list is
        never shown next to an empty selection.
        """

        def apply() -> bool:
            existing = {t.id for t in self._tasks}
            ids = sorted(i for i in self._selection.snapshot() if i in existing)
            self._selection.clear()
            if not ids:
                return True
            logger.info("Deleting %d selected task(s): %s", len(ids), ids)
            before = self._task_emissions_queued
            self._write("delete_many", lambda: self._task_store.delete_many(ids))
            # Publish here only if the store did not answer with a new collection.
            return self._task_emissions_queued == before

        self._post(apply)

    def toggle_completion(self, task: Task | int) -> None:
        """Flip is_completed of the stored entity. Unknown ids are ignored."""
        task_id = task if isinstance(task, int) else task.id

        def apply() -> bool:
            current = self._find(task_id)
            if current is None:
                logger.debug("toggle_completion: task %s not found; ignoring", task_id)
                return False
            completed = current.is_completed if isinstance(task, int) else task.is_completed
            updated = replace(current, is_completed=not completed)
            self._write("replace", lambda: self._task_store.replace(updated))
            return False

        self._post(apply)

    def add_task(self, description: str, category: Category) -> None:
        text = (description or "").strip()
        if not text:
            raise ValueError("description is required")

        def apply() -> bool:
            self._write("insert", lambda: self._task_store.insert(text, category))
            return False

        self._post(apply)

    def remove_task(self, task: Task | int) -> None:
        task_id = task if isinstance(task, int) else task.id

        def apply() -> bool:
            self._write("delete", lambda: self._task_store.delete(task_id))
            return False

        self._post(apply)

    # ---- internals ----

    def _find(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _write(self, label: str, call: Callable[[], object]) -> None:
        # Fire-and-forget: the outcome shows up (or not) in the next emission.
        try:
            call()
        except Exception:
            logger.exception("Store write %s failed", label)

    def _post(self, event: Event, *, task_emission: bool = False) -> None:
        with self._queue_lock:
            if self._closed:
                logger.debug("View model closed; dropping event")
                return
            self._queue.append(event)
            if task_emission:
                self._task_emissions_queued += 1
        self._pump()

    def _take(self) -> Event | None:
        with self._queue_lock:
            return self._queue.popleft() if self._queue else None

    def _pump(self) -> None:
        while True:
            if not self._drain_lock.acquire(blocking=False):
                # Held by another thread, or by this one further up the stack.
                return
            try:
                while True:
                    event = self._take()
                    if event is None:
                        break
                    try:
                        changed = event()
                    except Exception:
                        logger.exception("View model event failed")
                        continue
                    if changed:
                        self._recompute()
            finally:
                self._drain_lock.release()
            # An event may have been queued between the last _take() and release().
            with self._queue_lock:
                if not self._queue:
                    return

    def _recompute(self) -> None:
        tasks = self._tasks
        settings = self._settings

        visible = filter_tasks(
            tasks,
            settings.visualization_option,
            self._categories,
            settings.sort_order,
        )

        dropped = self._selection.retain(t.id for t in tasks)
        if dropped:
            logger.debug("Dropped stale selection ids: %s", sorted(dropped))

        selected = self._selection.snapshot()
        status = classify(tasks, visible, selected)

        self._state = ViewState(
            sort_order=settings.sort_order,
            selected_categories=frozenset(self._categories),
            visualization_option=settings.visualization_option,
            selected_task_ids=selected,
            status=status,
            visible_tasks=visible,
            total_count=len(tasks),
            completed_count=sum(1 for t in tasks if t.is_completed),
        )
        logger.debug(
            "Published view status=%s visible=%d/%d selected=%d",
            status.value,
            len(visible),
            len(tasks),
            len(selected),
        )
        self._observers.emit(self._state)
