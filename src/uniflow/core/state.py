# src/uniflow/core/state.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import FilterType
from ..tasks.task_store import TaskStore
from .ports import LLMClient


@dataclass
class AppState:
    """
    Everything the app owns at runtime.

    Passed explicitly to commands and task helpers; there is no module-level
    task collection.
    """

    settings: Any
    llm: LLMClient
    store: TaskStore

    # UI selection
    active_filter: FilterType = FilterType.ALL
    search_query: str = ""

    # Ids shown by the last /list, so commands can refer to tasks by number.
    last_view: list[str] = field(default_factory=list)

    # Advice banner
    advice: str = ""
    advice_loading: bool = False
    advice_trigger_count: int = 0

    # Tasks with a subtask breakdown in flight.
    generating_ids: set[str] = field(default_factory=set)

    # Strong refs to detached asyncio tasks (dropped when they finish).
    background: set[asyncio.Task[Any]] = field(default_factory=set)
