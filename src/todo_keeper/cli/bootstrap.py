# src/todo_keeper/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires slot store -> codec -> registry into AppState,
- loads the persisted task list.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import SlotStore
from ..core.state import AppState
from ..tasks.slot_store import FileSlotStore, MemorySlotStore, SqliteSlotStore
from ..tasks.task_codec import StoreCodec
from ..tasks.task_registry import TaskRegistry

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_slot_store(settings) -> SlotStore:
    backend = getattr(settings, "store_backend", "sqlite")
    quota = settings.quota
    if backend == "memory":
        logger.warning("Using in-memory slot store: tasks will not survive a restart.")
        return MemorySlotStore(max_bytes=quota)
    if backend == "file":
        return FileSlotStore(settings.store_path, max_bytes=quota)
    return SqliteSlotStore(settings.store_path, max_bytes=quota)


def create_initial_state(*, settings=None, store: SlotStore | None = None) -> AppState:
    """
    Create AppState from the provided settings and load the stored tasks.

    Keeping settings (and the store) injectable makes the app easy to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if store is None:
        store = create_slot_store(settings)

    registry = TaskRegistry(StoreCodec(store, settings.storage_key))
    state = AppState(settings=settings, registry=registry)
    registry.on_storage_error = state.report_storage_error

    registry.load()
    return state
