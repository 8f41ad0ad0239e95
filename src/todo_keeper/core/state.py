# src/todo_keeper/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_registry import TaskRegistry
from .errors import TodoError


@dataclass
class AppState:
    # Settings are kept on the state so handlers never read global config.
    settings: Any
    registry: TaskRegistry

    # User-visible warnings raised outside a command's own result
    # (storage failures); the connector prints and clears them.
    warnings: list[str] = field(default_factory=list)

    def report_storage_error(self, error: TodoError) -> None:
        self.warnings.append(error.user_message)

    def drain_warnings(self) -> list[str]:
        out, self.warnings = self.warnings, []
        return out
