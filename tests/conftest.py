# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_keeper.core.state import AppState
from todo_keeper.tasks.slot_store import MemorySlotStore
from todo_keeper.tasks.task_codec import DEFAULT_STORAGE_KEY, StoreCodec
from todo_keeper.tasks.task_registry import TaskRegistry

KEY = DEFAULT_STORAGE_KEY


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        data_dir=tmp_path / "data",
        store_backend="sqlite",
        store_path=tmp_path / "data" / "todos.sqlite3",
        storage_key=KEY,
        quota=None,
        export_dir=tmp_path / "exports",
        console_enabled=False,
    )


@pytest.fixture()
def store() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture()
def codec(store: MemorySlotStore) -> StoreCodec:
    return StoreCodec(store, KEY)


@pytest.fixture()
def registry(codec: StoreCodec) -> TaskRegistry:
    reg = TaskRegistry(codec)
    reg.load()
    return reg


@pytest.fixture()
def state(settings: SimpleNamespace, registry: TaskRegistry) -> AppState:
    """
    AppState wired with an in-memory slot store.

    Storage errors are routed into state.warnings exactly like bootstrap does.
    """
    st = AppState(settings=settings, registry=registry)
    registry.on_storage_error = st.report_storage_error
    return st
