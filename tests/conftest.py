# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_tracker.cli.bootstrap import create_initial_state
from todo_tracker.core.models import Category, Task, ViewState
from todo_tracker.core.state import AppState
from todo_tracker.core.view_state import TodoListViewModel

from .fakes import FakePreferenceRepo, FakeTaskRepo

BUY_MILK = Task(id=1, description="Buy milk", category=Category.HEALTH, is_completed=False)
READ_BOOK = Task(id=2, description="Read book", category=Category.LEISURE, is_completed=True)
WRITE_REPORT = Task(id=3, description="Write report", category=Category.WORK, is_completed=False)
RUN_5K = Task(id=4, description="Run 5k", category=Category.HEALTH, is_completed=False)


@pytest.fixture()
def sample_tasks() -> list[Task]:
    return [BUY_MILK, READ_BOOK, WRITE_REPORT, RUN_5K]


@pytest.fixture()
def task_store(sample_tasks: list[Task]) -> FakeTaskRepo:
    return FakeTaskRepo(sample_tasks)


@pytest.fixture()
def preferences() -> FakePreferenceRepo:
    return FakePreferenceRepo()


@pytest.fixture()
def view_model(task_store: FakeTaskRepo, preferences: FakePreferenceRepo) -> TodoListViewModel:
    vm = TodoListViewModel(task_store, preferences)
    yield vm
    vm.close()


@pytest.fixture()
def published(view_model: TodoListViewModel) -> list[ViewState]:
    """Snapshots published after the fixture was created (initial one excluded)."""
    seen: list[ViewState] = []
    view_model.subscribe(seen.append)
    seen.clear()
    return seen


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        preferences_path=tmp_path / "preferences.json",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real composition root.

    NOTE: real SQLite / JSON stores here, their behaviour is part of what we test.
    """
    st = create_initial_state(settings=settings)
    yield st
    st.view_model.close()
