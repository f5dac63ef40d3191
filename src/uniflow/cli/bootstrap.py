# src/uniflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (LLM client, storage slot, store).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueSlot, LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..tasks.storage import JsonFileSlot, MemorySlot, SqliteSlot
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_slot(settings) -> KeyValueSlot:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "memory":
        return MemorySlot()
    if backend == "json":
        return JsonFileSlot(settings.storage_path)
    return SqliteSlot(settings.storage_path, key=settings.storage_key)


def create_llm_client(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except Exception as e:
        # Fallback for demos / local runs without external services.
        logger.info("LLM not configured (%s); using offline client.", e)
        return OfflineLLMClient()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    try:
        slot = create_slot(settings)
    except Exception:
        logger.exception("Failed to open %s storage; tasks will not survive this session.", settings.storage_backend)
        slot = MemorySlot()

    return AppState(
        settings=settings,
        llm=create_llm_client(settings),
        store=TaskStore(slot),
    )
