# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from uniflow.core.state import AppState
from uniflow.tasks.storage import MemorySlot
from uniflow.tasks.task_store import TaskStore

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="UniFlow",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "uniflow.sqlite3",
        storage_key="uniflow-tasks",
        advice_max_tokens=60,
        advice_temperature=0.7,
        advice_task_limit=10,
    )


@pytest.fixture()
def slot() -> MemorySlot:
    return MemorySlot()


@pytest.fixture()
def store(slot: MemorySlot) -> TaskStore:
    return TaskStore(slot)


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, llm: FakeLLMClient) -> AppState:
    """AppState wired with an in-memory slot and a deterministic LLM fake."""
    return AppState(settings=settings, llm=llm, store=store)


@pytest.fixture()
def today() -> date:
    return date(2026, 10, 17)
