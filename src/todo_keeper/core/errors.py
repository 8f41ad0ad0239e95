# src/todo_keeper/core/errors.py

"""
Error taxonomy.

Every error here is recoverable. The operation boundary (tasks/task_api.py)
turns them into user-facing messages; none should reach the console loop.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for all todo_keeper failures."""

    user_message = "Something went wrong."


class ValidationError(TodoError, ValueError):
    """User input rejected at the add boundary (empty text)."""

    user_message = "Task text cannot be empty."


class StorageWriteError(TodoError):
    """Durable write failed; in-memory state is kept."""

    user_message = "Failed to save your tasks. Storage might be full."


class StorageCorruptError(TodoError):
    """Durable slot unreadable, unparseable or of an unknown shape."""

    user_message = "Failed to load your saved tasks."


class ImportFormatError(TodoError):
    """Import content is not parseable or is not a top-level array."""

    user_message = "Invalid file: expected a JSON array of tasks."


class ImportEmptyError(TodoError):
    """Import content is well-formed but has no usable rows."""

    user_message = "No valid tasks found in the file."


class QuotaExceededError(OSError):
    """Raised by a slot store when a write would exceed its byte quota."""

    def __init__(self, key: str, size: int, quota: int) -> None:
        super().__init__(f"slot {key!r}: {size} bytes exceeds quota of {quota} bytes")
        self.key = key
        self.size = size
        self.quota = quota
