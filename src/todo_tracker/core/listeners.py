# src/todo_tracker/core/listeners.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]


class Subscription:
    """Handle returned by subscribe(). close() is idempotent."""

    def __init__(self, on_close: Callable[[], None]) -> None:
        self._on_close: Callable[[], None] | None = on_close

    @property
    def closed(self) -> bool:
        return self._on_close is None

    def close(self) -> None:
        cb, self._on_close = self._on_close, None
        if cb is not None:
            cb()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class ListenerSet(Generic[T]):
    """
    Ordered fan-out of values to listeners.

    A listener that raises is logged and skipped; the others still get the value.
    """

    def __init__(self, name: str = "listeners") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._listeners: list[Listener[T]] = []

    def add(self, listener: Listener[T]) -> Subscription:
        with self._lock:
            self._listeners.append(listener)
        return Subscription(lambda: self._remove(listener))

    def _remove(self, listener: Listener[T]) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def emit(self, value: T) -> None:
        with self._lock:
            targets = list(self._listeners)
        for listener in targets:
            notify(listener, value, source=self._name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)


def notify(listener: Listener[T], value: T, *, source: str = "listeners") -> None:
    try:
        listener(value)
    except Exception:
        logger.exception("%s: listener %r failed", source, listener)
