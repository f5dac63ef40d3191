# src/uniflow/cli/render.py

from __future__ import annotations

from datetime import date

from ..tasks.task_models import FilterType, Priority, Task
from ..tasks.task_views import TaskStats, is_overdue, subtask_progress

TAB_TITLES: dict[FilterType, str] = {
    FilterType.ALL: "All Assignments",
    FilterType.TODAY: "Today's Focus",
    FilterType.UPCOMING: "Upcoming Deadlines",
    FilterType.COMPLETED: "History",
}

_PRIORITY_BADGE: dict[Priority, str] = {
    Priority.LOW: "low",
    Priority.MEDIUM: "med",
    Priority.HIGH: "HIGH",
    Priority.URGENT: "URGENT!",
}

EMPTY_LIST_TEXT = "No tasks found. Time to relax or add a new mission."


def format_due_label(due_date: str | None) -> str:
    """`2026-10-17` -> `Oct 17`."""
    if not due_date:
        return ""
    try:
        d = date.fromisoformat(due_date)
    except ValueError:
        return due_date
    return f"{d.strftime('%b')} {d.day}"


def _task_summary(task: Task, *, today: date | str | None = None, generating: bool = False) -> str:
    box = "[x]" if task.completed else "[ ]"
    parts = [f"{box} {task.title}", f"({_PRIORITY_BADGE[task.priority]}, {task.category.value})"]

    if task.due_date:
        label = format_due_label(task.due_date)
        if is_overdue(task, today=today):
            label += " OVERDUE"
        parts.append(f"due {label}")

    done, total = subtask_progress(task)
    if total:
        parts.append(f"[{done}/{total} steps]")
    if generating:
        parts.append("(breaking down...)")
    return " ".join(parts)


def format_task_line(
    index: int,
    task: Task,
    *,
    today: date | str | None = None,
    generating: bool = False,
) -> str:
    return f"{index:>2}. {_task_summary(task, today=today, generating=generating)}"


def format_task_details(task: Task, *, today: date | str | None = None) -> str:
    lines = [_task_summary(task, today=today)]
    lines.append(f"    id: {task.id}")
    if task.description:
        lines.append(f"    {task.description}")
    if not task.subtasks:
        if not task.completed:
            lines.append("    No steps yet. Use /break to let AI split it up.")
        return "\n".join(lines)
    for i, sub in enumerate(task.subtasks, start=1):
        box = "[x]" if sub.completed else "[ ]"
        lines.append(f"    {i}. {box} {sub.title}")
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    return f"Progress: {stats.completed}/{stats.total} done ({stats.percent}%)"
