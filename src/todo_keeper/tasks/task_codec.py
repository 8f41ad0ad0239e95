# src/todo_keeper/tasks/task_codec.py

"""
Store codec: task list + counter <-> one named slot of a SlotStore.

Slot formats:
- current:  {"todos": [...], "counter": N, "lastSaved": "<iso>"}
- legacy:   [...]  (bare array, upgraded to the envelope on load)
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from typing import Any

from ..core.errors import StorageCorruptError, StorageWriteError
from ..core.ports import SlotStore
from .task_models import Task, filter_valid_tasks, next_id_for, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todoApp_todos"


@dataclass(slots=True, frozen=True)
class LoadResult:
    tasks: list[Task]
    counter: int
    migrated: bool = False


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


class StoreCodec:
    def __init__(self, store: SlotStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def encode(self, tasks: list[Task], counter: int, last_saved: str) -> str:
        envelope = {
            "todos": [t.to_record() for t in tasks],
            "counter": counter,
            "lastSaved": last_saved,
        }
        return json.dumps(envelope, ensure_ascii=False)

    def save(self, tasks: list[Task], counter: int) -> str:
        """Write the envelope; returns its lastSaved stamp."""
        last_saved = utc_now_iso()
        payload = self.encode(tasks, counter, last_saved)
        try:
            self._store.write(self._key, payload)
        except (OSError, sqlite3.Error) as e:
            logger.warning("Could not save %d tasks to slot %s: %s", len(tasks), self._key, e)
            raise StorageWriteError(str(e)) from e
        logger.debug("Saved %d tasks to slot %s counter=%d", len(tasks), self._key, counter)
        return last_saved

    def load(self) -> LoadResult:
        try:
            raw = self._store.read(self._key)
        except (OSError, sqlite3.Error, UnicodeDecodeError) as e:
            raise StorageCorruptError(f"slot {self._key!r} unreadable: {e}") from e

        if raw is None:
            return LoadResult(tasks=[], counter=1)

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise StorageCorruptError(f"slot {self._key!r} is not valid JSON: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("todos"), list):
            tasks = filter_valid_tasks(data["todos"])
            fallback = next_id_for(tasks)
            counter = _positive_int(data.get("counter"))
            if counter is None or counter < fallback:
                counter = fallback
            logger.info("Loaded %d tasks from slot %s", len(tasks), self._key)
            return LoadResult(tasks=tasks, counter=counter)

        if isinstance(data, list):
            tasks = filter_valid_tasks(data)
            counter = next_id_for(tasks)
            logger.info("Migrating legacy slot %s (%d tasks) to envelope format", self._key, len(tasks))
            try:
                self.save(tasks, counter)
            except StorageWriteError:
                logger.warning("Legacy migration save failed; slot %s left as-is", self._key)
            return LoadResult(tasks=tasks, counter=counter, migrated=True)

        raise StorageCorruptError(
            f"slot {self._key!r} has unrecognized shape {type(data).__name__}"
        )

    def usage_bytes(self) -> int:
        try:
            return self._store.size(self._key)
        except (OSError, sqlite3.Error):
            logger.debug("Slot size lookup failed key=%s", self._key, exc_info=True)
            return 0
