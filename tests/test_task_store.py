# tests/test_task_store.py

from __future__ import annotations

import sqlite3
import threading
from dataclasses import replace
from pathlib import Path

import pytest

from todo_tracker.core.models import Category, Task
from todo_tracker.tasks.task_store import TaskStore


def test_insert_list_replace_delete(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")

    a = store.insert("Buy milk", Category.HEALTH)
    b = store.insert("  Write report ", Category.WORK)
    assert a.id > 0 and b.id > a.id
    assert b.description == "Write report"
    assert store.list_all() == [a, b]

    store.replace(replace(a, is_completed=True))
    assert store.list_all()[0].is_completed is True

    store.delete(a.id)
    assert store.list_all() == [b]
    assert store.count_tasks() == 1


def test_insert_requires_description(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    with pytest.raises(ValueError):
        store.insert("   ", Category.STUDY)


def test_subscribe_emits_current_then_after_each_change(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    first = store.insert("first", Category.STUDY)

    seen: list[list[Task]] = []
    sub = store.subscribe(seen.append)
    assert seen == [[first]]

    second = store.insert("second", Category.LEISURE)
    store.delete_many([first.id, 999])
    assert seen[1] == [first, second]
    assert seen[2] == [second]

    sub.close()
    store.insert("third", Category.WORK)
    assert len(seen) == 3


def test_deleting_unknown_ids_is_a_silent_noop(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    store.insert("keep", Category.WORK)

    seen: list[list[Task]] = []
    store.subscribe(seen.append)
    seen.clear()

    store.delete(12345)
    store.delete_many([])
    assert seen == []
    assert store.count_tasks() == 1


def test_data_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    task = TaskStore(db).insert("persist me", Category.STUDY)
    assert TaskStore(db).list_all() == [task]


def test_migrates_table_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute("CREATE TABLE tasks (id INTEGER PRIMARY KEY AUTOINCREMENT, description TEXT NOT NULL)")
    conn.execute("INSERT INTO tasks(description) VALUES ('legacy')")
    conn.commit()
    conn.close()

    store = TaskStore(db)
    [legacy] = store.list_all()
    assert legacy.description == "legacy"
    assert legacy.category is Category.STUDY
    assert legacy.is_completed is False


def test_rows_with_unknown_category_are_skipped(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(db)
    good = store.insert("good", Category.WORK)

    conn = sqlite3.connect(str(db))
    conn.execute("INSERT INTO tasks(description, category) VALUES ('bad', 'gardening')")
    conn.commit()
    conn.close()

    assert store.list_all() == [good]


def test_concurrent_writers_emit_in_order(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    sizes: list[int] = []
    store.subscribe(lambda tasks: sizes.append(len(tasks)))

    def writer(n: int) -> None:
        for i in range(10):
            store.insert(f"task {n}-{i}", Category.WORK)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sizes == sorted(sizes)
    assert sizes[-1] == store.count_tasks() == 40
