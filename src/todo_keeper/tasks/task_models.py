# src/todo_keeper/tasks/task_models.py

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_valid_task_record(raw: Any) -> bool:
    """
    Structural validity used at load and import.

    Valid iff raw is a JSON object with a numeric `id` and a string `text`.
    Empty text passes; only add() rejects it.
    """
    if not isinstance(raw, dict):
        return False
    tid = raw.get("id")
    # bool is an int subclass; JSON true/false is not an id.
    if isinstance(tid, bool) or not isinstance(tid, (int, float)):
        return False
    if isinstance(tid, float) and not math.isfinite(tid):
        return False
    return isinstance(raw.get("text"), str)


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool = False
    created_at: str = ""

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task:
        """Build a Task from a record that already passed is_valid_task_record."""
        created_at = raw.get("createdAt")
        return cls(
            id=int(raw["id"]),
            text=raw["text"],
            completed=bool(raw.get("completed", False)),
            created_at=created_at if isinstance(created_at, str) and created_at else utc_now_iso(),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }


def filter_valid_tasks(records: list[Any]) -> list[Task]:
    return [Task.from_record(r) for r in records if is_valid_task_record(r)]


def next_id_for(tasks: list[Task]) -> int:
    return max(t.id for t in tasks) + 1 if tasks else 1
