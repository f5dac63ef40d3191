# src/uniflow/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Iterable
from datetime import date
from typing import Any

from ..core.ports import KeyValueSlot
from .task_models import (
    Category,
    Priority,
    SubTask,
    Task,
    normalize_due_date,
    parse_category,
    parse_priority,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


def decode_tasks(raw: str | None) -> list[Task]:
    """
    Parse a persisted payload into tasks.

    - absent / unparseable payload -> []
    - records that fail to decode, or repeat an earlier id, are skipped
    """
    if not raw or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except Exception:
        logger.warning("Stored tasks payload is not valid JSON; starting empty.")
        return []
    if not isinstance(data, list):
        logger.warning("Stored tasks payload is not a list; starting empty.")
        return []

    out: list[Task] = []
    seen: set[str] = set()
    for i, item in enumerate(data):
        try:
            task = Task.from_dict(item)
        except Exception as e:
            logger.warning("Skipping stored task #%d: %s", i, e)
            continue
        if task.id in seen:
            logger.warning("Skipping stored task #%d: duplicate id=%s", i, task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out


def encode_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


class TaskStore:
    """
    In-memory task collection backed by a key-value slot.

    Raw order is newest-created first. Every mutation rewrites the whole
    collection into the slot; a failed write is logged and the in-memory
    state stays authoritative for the session.
    """

    def __init__(self, slot: KeyValueSlot) -> None:
        self._slot = slot
        self._tasks: list[Task] = self._load()
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- persistence ----

    def _load(self) -> list[Task]:
        try:
            raw = self._slot.load()
        except Exception:
            logger.exception("Failed to read tasks slot; starting empty.")
            return []
        return decode_tasks(raw)

    def _persist(self) -> None:
        try:
            self._slot.save(encode_tasks(self._tasks))
        except Exception:
            logger.exception("Failed to persist %d tasks.", len(self._tasks))

    # ---- lookups ----

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the raw order (the Task objects themselves are shared)."""
        return list(self._tasks)

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- mutations ----

    def create(
        self,
        title: str,
        description: str | None = None,
        priority: Priority = Priority.MEDIUM,
        category: Category = Category.HOMEWORK,
        due_date: date | str | None = None,
    ) -> Task | None:
        """
        Create a task and put it at the front of the collection.

        Returns None (and changes nothing) when the title is blank, the due
        date is not a calendar date, or priority/category is unknown.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            logger.debug("create rejected: empty title")
            return None

        try:
            due = normalize_due_date(due_date)
            prio = parse_priority(priority)
            cat = parse_category(category)
        except ValueError as e:
            logger.info("create rejected: %s", e)
            return None

        desc = (description or "").strip()
        task = Task(
            id=new_id(),
            title=clean_title,
            priority=prio,
            category=cat,
            created_at=int(time.time() * 1000),
            description=desc or None,
            due_date=due,
        )
        self._tasks.insert(0, task)
        logger.debug(
            "Task added id=%s priority=%s category=%s due=%s",
            task.id,
            task.priority.value,
            task.category.value,
            task.due_date,
        )
        self._persist()
        return task

    def toggle_complete(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        task.completed = not task.completed
        logger.debug("Task %s completed=%s", task_id, task.completed)
        self._persist()
        return True

    def delete(self, task_id: str) -> bool:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                del self._tasks[i]
                logger.debug("Task deleted id=%s", task_id)
                self._persist()
                return True
        return False

    def toggle_subtask(self, task_id: str, subtask_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        for sub in task.subtasks:
            if sub.id == subtask_id:
                sub.completed = not sub.completed
                self._persist()
                return True
        return False

    def append_subtasks(self, task_id: str, titles: Iterable[Any]) -> bool:
        """
        Append one subtask per non-blank title, in order.

        No-op when the task is gone (e.g. deleted while a breakdown was pending).
        """
        task = self.get(task_id)
        if task is None:
            logger.info("append_subtasks: task %s not found; dropping result", task_id)
            return False

        existing = {s.id for s in task.subtasks}
        added = 0
        for raw in titles:
            title = str(raw or "").strip()
            if not title:
                continue
            sub_id = new_id()
            while sub_id in existing:
                sub_id = new_id()
            existing.add(sub_id)
            task.subtasks.append(SubTask(id=sub_id, title=title))
            added += 1

        if not added:
            return False
        logger.debug("Task %s: appended %d subtasks", task_id, added)
        self._persist()
        return True
