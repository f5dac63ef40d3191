# tests/test_task_models.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from uniflow.tasks.task_models import (
    PRIORITY_RANK,
    Category,
    FilterType,
    Priority,
    SubTask,
    Task,
    normalize_due_date,
    parse_category,
    parse_priority,
)


def test_priority_rank_is_total_and_ordered() -> None:
    assert set(PRIORITY_RANK) == set(Priority)
    ordered = sorted(Priority, key=PRIORITY_RANK.__getitem__, reverse=True)
    assert ordered == [Priority.URGENT, Priority.HIGH, Priority.MEDIUM, Priority.LOW]


def test_choice_parsing_is_case_insensitive() -> None:
    assert parse_priority("URGENT") is Priority.URGENT
    assert parse_priority("medium") is Priority.MEDIUM
    assert parse_category("Homework") is Category.HOMEWORK
    assert parse_category("club") is Category.CLUB
    with pytest.raises(ValueError):
        parse_category("Sports")


def test_filter_type_parse_defaults_to_all() -> None:
    assert FilterType.parse("Today") is FilterType.TODAY
    assert FilterType.parse(None) is FilterType.ALL
    assert FilterType.parse("nope") is FilterType.ALL


def test_normalize_due_date() -> None:
    assert normalize_due_date(None) is None
    assert normalize_due_date("  ") is None
    assert normalize_due_date(date(2026, 1, 5)) == "2026-01-05"
    assert normalize_due_date("2026-01-05") == "2026-01-05"
    assert normalize_due_date(datetime(2026, 10, 17, 9, 30)) == "2026-10-17"
    with pytest.raises(ValueError):
        normalize_due_date("2026-13-40")


def test_task_dict_uses_camel_case_keys() -> None:
    task = Task(
        id="t1",
        title="Lab",
        priority=Priority.HIGH,
        category=Category.PROJECT,
        created_at=1700000000000,
        due_date="2026-10-20",
        subtasks=[SubTask("s1", "Collect data")],
    )
    data = task.to_dict()
    assert data == {
        "id": "t1",
        "title": "Lab",
        "description": None,
        "dueDate": "2026-10-20",
        "priority": "High",
        "category": "Project",
        "completed": False,
        "subTasks": [{"id": "s1", "title": "Collect data", "completed": False}],
        "createdAt": 1700000000000,
    }
    assert Task.from_dict(data) == task


def test_from_dict_treats_empty_strings_as_missing_optionals() -> None:
    task = Task.from_dict(
        {
            "id": "t1",
            "title": "Lab",
            "description": "",
            "dueDate": "",
            "priority": "Low",
            "category": "Other",
            "subTasks": [
                {"id": "s1", "title": "a"},
                {"id": "s1", "title": "dup"},
            ],
        }
    )
    assert task.description is None
    assert task.due_date is None
    assert task.created_at == 0
    assert [s.title for s in task.subtasks] == ["a"]


@pytest.mark.parametrize(
    "record",
    [
        {"title": "x", "priority": "Low", "category": "Other"},
        {"id": "t", "title": "  ", "priority": "Low", "category": "Other"},
        {"id": "t", "title": "x", "priority": "Later", "category": "Other"},
        {"id": "t", "title": "x", "priority": "Low", "category": "Other", "subTasks": "nope"},
    ],
)
def test_from_dict_rejects_broken_records(record: dict) -> None:
    with pytest.raises(ValueError):
        Task.from_dict(record)


def test_from_dict_skips_broken_subtasks_but_keeps_the_task() -> None:
    task = Task.from_dict(
        {
            "id": "t",
            "title": "Lab report",
            "priority": "High",
            "category": "Project",
            "dueDate": "2026-10-20",
            "subTasks": [
                {"id": "s1", "title": "ok"},
                {"id": "s2", "title": ""},
                {"title": "no id"},
                "not an object",
                {"id": "s3", "title": "also ok", "completed": True},
            ],
        }
    )
    assert task.title == "Lab report"
    assert task.due_date == "2026-10-20"
    assert [(s.id, s.completed) for s in task.subtasks] == [("s1", False), ("s3", True)]
