# tests/test_filtering.py

from __future__ import annotations

import itertools

from todo_tracker.core.filtering import filter_tasks, sort_tasks
from todo_tracker.core.models import Category, SortOrder, Task, VisualizationOption

from .conftest import BUY_MILK, READ_BOOK, RUN_5K, WRITE_REPORT


def _descriptions(tasks) -> list[str]:
    return [t.description for t in tasks]


def test_all_without_filters_keeps_store_order(sample_tasks) -> None:
    visible = filter_tasks(sample_tasks, VisualizationOption.ALL, set(), SortOrder.NONE)
    assert list(visible) == sample_tasks


def test_not_concluded_drops_completed(sample_tasks) -> None:
    visible = filter_tasks(sample_tasks, VisualizationOption.NOT_CONCLUDED, set(), SortOrder.NONE)
    assert list(visible) == [BUY_MILK, WRITE_REPORT, RUN_5K]


def test_category_filter(sample_tasks) -> None:
    visible = filter_tasks(sample_tasks, VisualizationOption.ALL, {Category.HEALTH}, SortOrder.NONE)
    assert list(visible) == [BUY_MILK, RUN_5K]


def test_filters_are_conjunctive(sample_tasks) -> None:
    visible = filter_tasks(
        sample_tasks,
        VisualizationOption.NOT_CONCLUDED,
        {Category.LEISURE, Category.WORK},
        SortOrder.NONE,
    )
    assert list(visible) == [WRITE_REPORT]


def test_ascending_and_descending(sample_tasks) -> None:
    asc = filter_tasks(sample_tasks, VisualizationOption.ALL, set(), SortOrder.ASCENDING)
    desc = filter_tasks(sample_tasks, VisualizationOption.ALL, set(), SortOrder.DESCENDING)
    assert _descriptions(asc) == ["Buy milk", "Read book", "Run 5k", "Write report"]
    assert list(desc) == list(reversed(asc))
    assert READ_BOOK in asc


def test_sort_is_locale_naive() -> None:
    tasks = [
        Task(id=1, description="apple", category=Category.STUDY),
        Task(id=2, description="Zebra", category=Category.STUDY),
        Task(id=3, description="Éclair", category=Category.STUDY),
    ]
    assert _descriptions(sort_tasks(tasks, SortOrder.ASCENDING)) == ["Zebra", "apple", "Éclair"]


def test_descending_is_exact_reverse_with_ties() -> None:
    tasks = [
        Task(id=3, description="same", category=Category.WORK),
        Task(id=1, description="same", category=Category.STUDY),
        Task(id=2, description="other", category=Category.STUDY),
    ]
    asc = sort_tasks(tasks, SortOrder.ASCENDING)
    desc = sort_tasks(tasks, SortOrder.DESCENDING)
    assert [t.id for t in asc] == [2, 1, 3]
    assert list(desc) == list(reversed(asc))
    assert sort_tasks(asc, SortOrder.ASCENDING) == asc
    assert sort_tasks(desc, SortOrder.DESCENDING) == desc


def test_filter_is_idempotent_for_every_configuration(sample_tasks) -> None:
    tasks = sample_tasks + [Task(id=5, description="Buy milk", category=Category.WORK, is_completed=True)]
    category_sets = [set(), {Category.HEALTH}, {Category.WORK, Category.LEISURE}, set(Category)]

    for option, cats, order in itertools.product(VisualizationOption, category_sets, SortOrder):
        once = filter_tasks(tasks, option, cats, order)
        twice = filter_tasks(once, option, cats, order)
        assert twice == once, (option, cats, order)


def test_input_is_not_mutated(sample_tasks) -> None:
    before = list(sample_tasks)
    filter_tasks(sample_tasks, VisualizationOption.NOT_CONCLUDED, {Category.HEALTH}, SortOrder.DESCENDING)
    assert sample_tasks == before
