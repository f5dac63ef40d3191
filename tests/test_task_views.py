# tests/test_task_views.py

from __future__ import annotations

import itertools
from datetime import date

import pytest

from uniflow.tasks.task_models import PRIORITY_RANK, Category, FilterType, Priority, SubTask, Task
from uniflow.tasks.task_store import TaskStore
from uniflow.tasks.task_views import (
    completion_percent,
    compute_stats,
    is_overdue,
    select_visible_tasks,
    subtask_progress,
)

_ids = itertools.count(1)


def make_task(
    title: str,
    priority: Priority = Priority.MEDIUM,
    *,
    category: Category = Category.HOMEWORK,
    due: str | None = None,
    completed: bool = False,
) -> Task:
    return Task(
        id=f"t{next(_ids)}",
        title=title,
        priority=priority,
        category=category,
        created_at=0,
        due_date=due,
        completed=completed,
    )


TODAY = "2026-10-17"


@pytest.fixture()
def mixed() -> list[Task]:
    return [
        make_task("low today", Priority.LOW, due=TODAY),
        make_task("done urgent", Priority.URGENT, due=TODAY, completed=True),
        make_task("high tomorrow", Priority.HIGH, due="2026-10-18"),
        make_task("no date urgent", Priority.URGENT),
        make_task("medium yesterday", Priority.MEDIUM, due="2026-10-16"),
        make_task("done low", Priority.LOW, completed=True),
        make_task("urgent next month", Priority.URGENT, due="2026-11-02"),
        make_task("done high upcoming", Priority.HIGH, due="2026-10-30", completed=True),
    ]


def titles(tasks: list[Task]) -> list[str]:
    return [t.title for t in tasks]


def test_today_returns_only_incomplete_tasks_due_today(mixed: list[Task]) -> None:
    out = select_visible_tasks(mixed, FilterType.TODAY, today=TODAY)
    assert titles(out) == ["low today"]
    for t in out:
        assert not t.completed
        assert t.due_date == TODAY


def test_upcoming_is_strictly_after_today_and_sorted_by_priority(mixed: list[Task]) -> None:
    out = select_visible_tasks(mixed, FilterType.UPCOMING, today=date(2026, 10, 17))
    assert titles(out) == ["urgent next month", "high tomorrow"]


def test_tasks_without_due_date_never_show_in_date_tabs(mixed: list[Task]) -> None:
    for flt in (FilterType.TODAY, FilterType.UPCOMING):
        assert all(t.due_date for t in select_visible_tasks(mixed, flt, today=TODAY))


def test_completed_tab_keeps_raw_order_without_priority_sort(mixed: list[Task]) -> None:
    out = select_visible_tasks(mixed, FilterType.COMPLETED, today=TODAY)
    assert titles(out) == ["done urgent", "done low", "done high upcoming"]


def test_all_tab_partitions_then_sorts_by_priority(mixed: list[Task]) -> None:
    out = select_visible_tasks(mixed, FilterType.ALL, today=TODAY)
    assert titles(out) == [
        "no date urgent",
        "urgent next month",
        "high tomorrow",
        "medium yesterday",
        "low today",
        "done urgent",
        "done high upcoming",
        "done low",
    ]


def test_all_tab_partition_property_holds_for_many_orders() -> None:
    base = [
        make_task(f"{p.value}-{c}", p, completed=c)
        for p in Priority
        for c in (False, True)
    ]
    for perm in itertools.islice(itertools.permutations(base), 0, 5000, 7):
        out = select_visible_tasks(list(perm), "all", today=TODAY)
        flags = [t.completed for t in out]
        assert flags == sorted(flags)
        for done in (False, True):
            ranks = [PRIORITY_RANK[t.priority] for t in out if t.completed is done]
            assert ranks == sorted(ranks, reverse=True)


def test_priority_ties_keep_prior_relative_order() -> None:
    a = make_task("first", Priority.HIGH)
    b = make_task("second", Priority.HIGH)
    c = make_task("third", Priority.HIGH)
    assert select_visible_tasks([a, b, c], FilterType.ALL, today=TODAY) == [a, b, c]


def test_search_matches_title_or_category_case_insensitively() -> None:
    tasks = [
        make_task("Calculus PSet", category=Category.HOMEWORK),
        make_task("Chem midterm", category=Category.EXAM),
        make_task("Robotics", category=Category.CLUB),
    ]
    assert titles(select_visible_tasks(tasks, "all", "calc", today=TODAY)) == ["Calculus PSet"]
    assert titles(select_visible_tasks(tasks, "all", "EXAM", today=TODAY)) == ["Chem midterm"]
    assert titles(select_visible_tasks(tasks, "all", "", today=TODAY)) == titles(tasks)
    assert select_visible_tasks(tasks, "all", "zzz", today=TODAY) == []


def test_selector_returns_same_objects_and_does_not_mutate_input(mixed: list[Task]) -> None:
    snapshot = list(mixed)
    out = select_visible_tasks(mixed, FilterType.ALL, today=TODAY)
    assert mixed == snapshot
    assert all(any(t is s for s in mixed) for t in out)


def test_unknown_filter_falls_back_to_all(mixed: list[Task]) -> None:
    assert select_visible_tasks(mixed, "bogus", today=TODAY) == select_visible_tasks(mixed, "all", today=TODAY)


def test_new_high_priority_homework_due_today_scenario(store: TaskStore, today: date) -> None:
    store.create("Some later thing", None, Priority.LOW, Category.OTHER, "2026-12-01")
    task = store.create("Finish Calculus PSet", None, Priority.HIGH, Category.HOMEWORK, today.isoformat())
    assert task is not None

    assert task in select_visible_tasks(store.tasks, FilterType.ALL, today=today)
    assert task in select_visible_tasks(store.tasks, FilterType.TODAY, today=today)
    assert task not in select_visible_tasks(store.tasks, FilterType.UPCOMING, today=today)


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [
        (0, 0, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),  # 12.5 rounds half-up
        (1, 200, 1),  # 0.5 rounds half-up
        (3, 3, 100),
    ],
)
def test_completion_percent_rounds_half_up(completed: int, total: int, expected: int) -> None:
    assert completion_percent(completed, total) == expected


def test_compute_stats(mixed: list[Task]) -> None:
    stats = compute_stats(mixed)
    assert (stats.total, stats.completed, stats.percent) == (8, 3, 38)
    assert compute_stats([]).percent == 0


def test_is_overdue(mixed: list[Task]) -> None:
    by_title = {t.title: t for t in mixed}
    assert is_overdue(by_title["medium yesterday"], today=TODAY)
    assert not is_overdue(by_title["low today"], today=TODAY)
    assert not is_overdue(by_title["no date urgent"], today=TODAY)

    done_late = make_task("done late", due="2026-01-01", completed=True)
    assert not is_overdue(done_late, today=TODAY)


def test_subtask_progress() -> None:
    t = make_task("with steps")
    assert subtask_progress(t) == (0, 0)
    t.subtasks = [SubTask("s1", "a", True), SubTask("s2", "b"), SubTask("s3", "c", True)]
    assert subtask_progress(t) == (2, 3)
