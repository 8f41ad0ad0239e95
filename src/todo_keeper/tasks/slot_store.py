# src/todo_keeper/tasks/slot_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
import sqlite3
import time
from pathlib import Path

from ..core.errors import QuotaExceededError

logger = logging.getLogger(__name__)


def _check_quota(key: str, value: str, max_bytes: int | None) -> None:
    if max_bytes is None:
        return
    size = len(value.encode("utf-8"))
    if size > max_bytes:
        raise QuotaExceededError(key, size, max_bytes)


class SqliteSlotStore:
    """
    SQLite key-value slot store.

    One row per slot; writes replace the whole value.
    Schema is created if missing.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3", *, max_bytes: int | None = None) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max_bytes
        self._ensure_schema()
        logger.info("SqliteSlotStore ready db=%s quota=%s", self._db_path, max_bytes)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS slots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def read(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM slots WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row["value"])
        finally:
            conn.close()

    def write(self, key: str, value: str) -> None:
        _check_quota(key, value, self._max_bytes)
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO slots(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
            logger.debug("Slot written key=%s bytes=%d", key, len(value.encode("utf-8")))
        finally:
            conn.close()

    def size(self, key: str) -> int:
        value = self.read(key)
        return 0 if value is None else len(value.encode("utf-8"))


class FileSlotStore:
    """One `<key>.json` file per slot under a directory, replaced atomically."""

    _UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")

    def __init__(self, directory: str | Path, *, max_bytes: int | None = None) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max_bytes
        logger.info("FileSlotStore ready dir=%s quota=%s", self._dir, max_bytes)

    def path_for(self, key: str) -> Path:
        return self._dir / f"{self._UNSAFE.sub('_', key)}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes().decode("utf-8")

    def write(self, key: str, value: str) -> None:
        _check_quota(key, value, self._max_bytes)
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, "utf-8")
        os.replace(tmp, path)
        logger.debug("Slot written key=%s path=%s", key, path)

    def size(self, key: str) -> int:
        path = self.path_for(key)
        return path.stat().st_size if path.exists() else 0


class MemorySlotStore:
    """Dict-backed slot store (tests, throwaway sessions)."""

    def __init__(self, *, max_bytes: int | None = None, initial: dict[str, str] | None = None) -> None:
        self.max_bytes = max_bytes
        self.slots: dict[str, str] = dict(initial or {})
        self.writes = 0

    def read(self, key: str) -> str | None:
        return self.slots.get(key)

    def write(self, key: str, value: str) -> None:
        _check_quota(key, value, self.max_bytes)
        self.slots[key] = value
        self.writes += 1

    def size(self, key: str) -> int:
        value = self.slots.get(key)
        return 0 if value is None else len(value.encode("utf-8"))
