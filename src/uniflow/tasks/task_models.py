# src/uniflow/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


# Higher rank sorts first.
PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 3,
    Priority.HIGH: 2,
    Priority.MEDIUM: 1,
    Priority.LOW: 0,
}


class Category(StrEnum):
    HOMEWORK = "Homework"
    EXAM = "Exam"
    PROJECT = "Project"
    CLUB = "Club"
    SOCIAL = "Social"
    OTHER = "Other"


class FilterType(StrEnum):
    """View tabs."""

    ALL = "all"
    TODAY = "today"
    UPCOMING = "upcoming"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> FilterType:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


def _parse_choice(enum_cls: type[StrEnum], raw: Any) -> Any:
    """Case-insensitive lookup by value or member name."""
    if isinstance(raw, enum_cls):
        return raw
    s = str(raw or "").strip()
    for member in enum_cls:
        if s.lower() in (member.value.lower(), member.name.lower()):
            return member
    raise ValueError(f"unknown {enum_cls.__name__}: {raw!r}")


def parse_priority(raw: Any) -> Priority:
    return _parse_choice(Priority, raw)


def parse_category(raw: Any) -> Category:
    return _parse_choice(Category, raw)


def normalize_due_date(raw: date | str | None) -> str | None:
    """
    Return an ISO `YYYY-MM-DD` string, or None for "no due date".

    Raises ValueError for a string that is not a calendar date.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    s = str(raw).strip()
    if not s:
        return None
    return date.fromisoformat(s).isoformat()


@dataclass(slots=True)
class SubTask:
    id: str
    title: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "completed": self.completed}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SubTask:
        sub_id = str(data.get("id") or "").strip()
        title = str(data.get("title") or "").strip()
        if not sub_id or not title:
            raise ValueError("subtask requires id and title")
        return cls(id=sub_id, title=title, completed=bool(data.get("completed", False)))


@dataclass(slots=True)
class Task:
    id: str
    title: str
    priority: Priority
    category: Category
    created_at: int  # epoch milliseconds, informative only

    description: str | None = None
    due_date: str | None = None
    completed: bool = False
    subtasks: list[SubTask] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Canonical serialized form (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "priority": self.priority.value,
            "category": self.category.value,
            "completed": self.completed,
            "subTasks": [s.to_dict() for s in self.subtasks],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        if not isinstance(data, dict):
            raise ValueError("task record must be an object")

        task_id = str(data.get("id") or "").strip()
        title = str(data.get("title") or "").strip()
        if not task_id or not title:
            raise ValueError("task requires id and title")

        raw_subs = data.get("subTasks") or []
        if not isinstance(raw_subs, list):
            raise ValueError("subTasks must be a list")

        subtasks: list[SubTask] = []
        seen: set[str] = set()
        for i, raw in enumerate(raw_subs):
            if not isinstance(raw, dict):
                logger.warning("Task %s: skipping subtask #%d: not an object", task_id, i)
                continue
            try:
                sub = SubTask.from_dict(raw)
            except ValueError as e:
                logger.warning("Task %s: skipping subtask #%d: %s", task_id, i, e)
                continue
            if sub.id in seen:
                logger.warning("Task %s: skipping subtask #%d: duplicate id=%s", task_id, i, sub.id)
                continue
            seen.add(sub.id)
            subtasks.append(sub)

        description = data.get("description")
        return cls(
            id=task_id,
            title=title,
            priority=parse_priority(data.get("priority")),
            category=parse_category(data.get("category")),
            created_at=int(data.get("createdAt") or 0),
            description=str(description) if description else None,
            due_date=normalize_due_date(data.get("dueDate")),
            completed=bool(data.get("completed", False)),
            subtasks=subtasks,
        )
