# src/todo_keeper/tasks/task_api.py

from __future__ import annotations

"""
Operation boundary used by connectors.

Each helper runs one registry operation and returns an OpResult. TodoError
failures become user-facing messages here and never reach the connector.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import TodoError
from ..core.state import AppState
from .reconciler import ImportStrategy, import_file, write_export

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class OpResult:
    ok: bool
    message: str


def _failed(op: str, error: TodoError) -> OpResult:
    logger.info("%s failed: %s (%s)", op, error.user_message, error)
    return OpResult(ok=False, message=error.user_message)


def add_task(state: AppState, text: str) -> OpResult:
    try:
        task = state.registry.add(text)
    except TodoError as e:
        return _failed("add", e)
    return OpResult(ok=True, message=f"Added #{task.id}: {task.text}")


def toggle_task(state: AppState, task_id: int) -> OpResult:
    task = state.registry.toggle(task_id)
    if task is None:
        return OpResult(ok=False, message=f"No task with id {task_id}.")
    mark = "completed" if task.completed else "not completed"
    return OpResult(ok=True, message=f"Task #{task.id} marked {mark}.")


def delete_task(state: AppState, task_id: int) -> OpResult:
    if not state.registry.delete(task_id):
        return OpResult(ok=False, message=f"No task with id {task_id}.")
    return OpResult(ok=True, message=f"Task #{task_id} deleted.")


def clear_tasks(state: AppState) -> OpResult:
    removed = state.registry.clear_all()
    return OpResult(ok=True, message="All tasks have been cleared.")


async def import_tasks_from_file(
    state: AppState, path: str | Path, strategy: ImportStrategy
) -> OpResult:
    try:
        result = await import_file(state.registry, path, strategy)
    except TodoError as e:
        return _failed("import", e)
    except OSError as e:
        logger.info("import failed: cannot read %s: %s", path, e)
        return OpResult(ok=False, message=f"Could not read file: {path}")
    noun = "task" if result.count == 1 else "tasks"
    return OpResult(ok=True, message=f"Imported {result.count} {noun}.")


def export_tasks(state: AppState, directory: str | Path) -> OpResult:
    tasks = state.registry.tasks
    try:
        path = write_export(tasks, directory)
    except OSError as e:
        logger.warning("export to %s failed: %s", directory, e)
        return OpResult(ok=False, message=f"Could not write export to {directory}.")
    return OpResult(ok=True, message=f"Exported {len(tasks)} tasks to {path}")


def stats_line(state: AppState) -> str:
    stats = state.registry.stats()
    if stats.total == 0:
        text = "0 tasks remaining"
    elif stats.remaining == 0:
        text = f"All {stats.total} tasks completed!"
    else:
        text = f"{stats.remaining} of {stats.total} tasks remaining"

    kb = int(state.registry.usage_bytes() / 1024 + 0.5)
    if kb > 0:
        text += f" • {kb}KB stored"
    return text
