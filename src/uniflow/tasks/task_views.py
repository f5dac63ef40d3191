# src/uniflow/tasks/task_views.py

"""
Derived, read-only views over the task collection.

Everything here is a pure function of its inputs: safe to recompute after
every change, never mutates tasks, and returns the same Task objects the
store holds (no copies).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from .task_models import PRIORITY_RANK, FilterType, Task


def _today_iso(today: date | str | None) -> str:
    if today is None:
        return date.today().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return str(today)


def _matches_query(task: Task, q: str) -> bool:
    return q in task.title.lower() or q in task.category.value.lower()


def select_visible_tasks(
    tasks: Sequence[Task],
    active_filter: FilterType | str = FilterType.ALL,
    search_query: str = "",
    *,
    today: date | str | None = None,
) -> list[Task]:
    """
    Tasks to display for a tab + search query, in display order.

    1. search: title or category contains the query (case-insensitive)
    2. tab:
       - today:     incomplete and due today
       - upcoming:  incomplete and due strictly after today
       - completed: completed only
       - all:       incomplete first, completed after (stable)
    3. every tab except `completed`: stable sort by priority (URGENT first)
       within each completion group

    The `completed` tab keeps the store's raw order and is not sorted by priority.
    """
    flt = FilterType.parse(active_filter)
    today_s = _today_iso(today)

    result = list(tasks)

    if search_query:
        q = search_query.lower()
        result = [t for t in result if _matches_query(t, q)]

    if flt == FilterType.TODAY:
        result = [t for t in result if not t.completed and t.due_date == today_s]
    elif flt == FilterType.UPCOMING:
        # ISO dates are fixed-width, so string comparison is date comparison.
        result = [t for t in result if not t.completed and t.due_date and t.due_date > today_s]
    elif flt == FilterType.COMPLETED:
        result = [t for t in result if t.completed]
        return result

    # sorted() is stable: ties keep their prior relative order.
    return sorted(result, key=lambda t: (t.completed, -PRIORITY_RANK[t.priority]))


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int
    percent: int


def completion_percent(completed: int, total: int) -> int:
    """
    completed/total as a whole percent, rounded half-up (12.5 -> 13).

    Integer arithmetic only, so .5 boundaries are exact.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    total = len(tasks)
    done = sum(1 for t in tasks if t.completed)
    return TaskStats(total=total, completed=done, percent=completion_percent(done, total))


def is_overdue(task: Task, *, today: date | str | None = None) -> bool:
    """An incomplete task whose due date has already passed."""
    if task.completed or not task.due_date:
        return False
    return task.due_date < _today_iso(today)


def subtask_progress(task: Task) -> tuple[int, int]:
    return sum(1 for s in task.subtasks if s.completed), len(task.subtasks)
