# src/todo_keeper/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The registry and codec depend on Protocols instead of concrete backends.
This keeps the durable store swappable (SQLite, files, memory) and makes testing easier.
"""

from typing import Callable, Protocol

from .errors import TodoError

StorageErrorHandler = Callable[[TodoError], None]


class SlotStore(Protocol):
    """
    Durable byte-oriented key-value store.

    Writes replace the whole slot. read() returns None for an absent slot.
    Backends raise OSError (or a backend-specific error) on failure.
    """

    def read(self, key: str) -> str | None: ...
    def write(self, key: str, value: str) -> None: ...
    def size(self, key: str) -> int: ...
