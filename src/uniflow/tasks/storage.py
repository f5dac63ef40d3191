# src/uniflow/tasks/storage.py

"""
Key-value slots used to persist the task collection.

A slot holds one opaque text value. The store decides what goes in it;
slots only read and overwrite the whole value.

Errors are raised to the caller (the store logs and swallows them).
"""

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SLOT_KEY = "uniflow-tasks"


class MemorySlot:
    """Process-lifetime slot. Nothing survives a restart."""

    def __init__(self, initial: str | None = None) -> None:
        self.value = initial

    def load(self) -> str | None:
        return self.value

    def save(self, text: str) -> None:
        self.value = text


class JsonFileSlot:
    """
    One file per slot.

    Writes go through a temp file + os.replace so a crash never leaves a
    half-written payload behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        return self._path.read_text("utf-8")

    def save(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(text, "utf-8")
        os.replace(tmp, self._path)


class SqliteSlot:
    """
    SQLite-backed slot: a single `kv` table keyed by slot name.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path, key: str = DEFAULT_SLOT_KEY) -> None:
        if not key or not key.strip():
            raise ValueError("slot key is required")
        self._db_path = Path(db_path)
        self._key = key.strip()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteSlot ready db=%s key=%s", self._db_path, self._key)

    @property
    def key(self) -> str:
        return self._key

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def load(self) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,))
            row = cur.fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def save(self, text: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (self._key, text),
            )
            conn.commit()
        finally:
            conn.close()
