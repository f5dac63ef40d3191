# src/uniflow/tasks/task_api.py

"""
High-level helpers that tie the store to the advisory calls.

Advisory calls run as detached asyncio tasks. They cannot be cancelled;
their results are merged back by task id, so a task deleted while its
call was pending simply makes the merge a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..core.advisor import generate_subtasks, get_smart_advice
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _spawn(state: AppState, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
    task = asyncio.create_task(coro, name=name)
    state.background.add(task)
    task.add_done_callback(state.background.discard)
    return task


async def breakdown_task(state: AppState, task_id: str) -> bool:
    """
    Generate subtasks for one task and merge them in.

    Returns True when subtasks were appended.
    """
    task = state.store.get(task_id)
    if task is None:
        return False

    state.generating_ids.add(task_id)
    try:
        titles = await generate_subtasks(state.llm, task.title, task.description)
    finally:
        state.generating_ids.discard(task_id)

    if not titles:
        logger.info("Breakdown for task %s produced nothing", task_id)
        return False

    merged = state.store.append_subtasks(task_id, titles)
    if not merged:
        logger.info("Breakdown for task %s discarded (task no longer exists)", task_id)
    return merged


def start_subtask_breakdown(state: AppState, task_id: str) -> asyncio.Task[bool] | None:
    """Fire-and-forget breakdown. Must be called with a running event loop."""
    if state.store.get(task_id) is None:
        return None
    return _spawn(state, breakdown_task(state, task_id), name=f"breakdown:{task_id}")


async def refresh_advice(state: AppState) -> str:
    s = state.settings
    state.advice_loading = True
    try:
        advice = await get_smart_advice(
            state.llm,
            state.store.tasks,
            limit=int(getattr(s, "advice_task_limit", 10)),
            max_output_tokens=int(getattr(s, "advice_max_tokens", 60)),
            temperature=float(getattr(s, "advice_temperature", 0.7)),
        )
    finally:
        state.advice_loading = False
    state.advice = advice
    return advice


def start_advice_refresh(state: AppState) -> asyncio.Task[str] | None:
    """Explicit refresh (ignores the count heuristic). None if one is already loading."""
    if state.advice_loading:
        return None
    state.advice_loading = True
    return _spawn(state, refresh_advice(state), name="advice")


def maybe_refresh_advice(state: AppState) -> asyncio.Task[str] | None:
    """
    Count-based trigger for the advice banner.

    Fetches only when the task count changed since the last trigger, there is
    at least one task, and no advice is shown yet. Not a dedupe: several
    fetches may be in flight at once.
    """
    count = state.store.count_tasks()
    if count == state.advice_trigger_count:
        return None
    state.advice_trigger_count = count

    if count == 0 or state.advice:
        return None
    return _spawn(state, refresh_advice(state), name="advice")
