# src/todo_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterable
from pathlib import Path

from ..core.listeners import ListenerSet, Subscription, notify
from ..core.models import Category, Task
from ..core.ports import TasksListener

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection

    Change feed:
    - subscribe() gets the full collection (id order) immediately
    - every mutation that changed rows re-emits the full collection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._listeners: ListenerSet[list[Task]] = ListenerSet("task_store")
        # Held from reading the collection until every listener got it, so
        # emissions from concurrent writers arrive in read order.
        self._emit_lock = threading.RLock()
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        self._listeners.clear()

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    description TEXT NOT NULL,
                    category TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("category", f"TEXT NOT NULL DEFAULT '{Category.STUDY.value}'")
            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task | None:
        category = Category.from_db(row["category"])
        if category is None:
            logger.warning("Skipping task id=%s with unknown category %r", row["id"], row["category"])
            return None
        return Task(
            id=int(row["id"]),
            description=str(row["description"] or ""),
            category=category,
            is_completed=bool(row["is_completed"]),
        )

    def _publish(self) -> None:
        with self._emit_lock:
            self._listeners.emit(self.list_all())

    # ---- change feed ----

    def subscribe(self, listener: TasksListener) -> Subscription:
        with self._emit_lock:
            sub = self._listeners.add(listener)
            notify(listener, self.list_all(), source="task_store")
        return sub

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def list_all(self) -> list[Task]:
        """All tasks in natural (insertion / id) order."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT id, description, category, is_completed FROM tasks ORDER BY id ASC")
            out: list[Task] = []
            for row in cur.fetchall():
                task = self._row_to_task(row)
                if task is not None:
                    out.append(task)
            return out
        finally:
            conn.close()

    def insert(self, description: str, category: Category) -> Task:
        if not description or not description.strip():
            raise ValueError("description is required")

        text = description.strip()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO tasks(description, category, is_completed) VALUES (?, ?, 0)",
                (text, Category(category).value),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task = Task(id=int(rowid), description=text, category=Category(category))
            logger.debug("Task added id=%s category=%s", task.id, task.category.value)
        finally:
            conn.close()

        self._publish()
        return task

    def delete(self, task_id: int) -> None:
        self.delete_many([task_id])

    def delete_many(self, task_ids: Iterable[int]) -> None:
        ids = sorted({int(i) for i in task_ids})
        if not ids:
            return

        conn = self._get_conn()
        try:
            placeholders = ",".join("?" for _ in ids)
            cur = conn.cursor()
            cur.execute(f"DELETE FROM tasks WHERE id IN ({placeholders})", ids)
            conn.commit()
            removed = cur.rowcount
        finally:
            conn.close()

        if removed <= 0:
            logger.debug("delete_many: none of %s exist; nothing to do", ids)
            return
        logger.debug("Deleted %d task(s) of %s", removed, ids)
        self._publish()

    def replace(self, task: Task) -> None:
        """Upsert by id."""
        if not task.description or not task.description.strip():
            raise ValueError("description is required")

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(id, description, category, is_completed)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    description = excluded.description,
                    category = excluded.category,
                    is_completed = excluded.is_completed
                """,
                (
                    int(task.id),
                    task.description.strip(),
                    Category(task.category).value,
                    1 if task.is_completed else 0,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task replaced id=%s completed=%s", task.id, task.is_completed)
        self._publish()
