# src/todo_keeper/tasks/reconciler.py

from __future__ import annotations

"""
Import / export of task batches.

Import takes a bare JSON array of task-shaped records (unlike the internal
slot, which uses the envelope) and hands the surviving rows to the registry,
either replacing the whole list or merging with renumbered ids.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from pathlib import Path

from ..core.errors import ImportEmptyError, ImportFormatError
from .task_models import Task, filter_valid_tasks
from .task_registry import TaskRegistry

logger = logging.getLogger(__name__)


class ImportStrategy(StrEnum):
    REPLACE = "replace"
    MERGE = "merge"

    @classmethod
    def parse(cls, raw: str | None) -> ImportStrategy:
        if not raw:
            return cls.REPLACE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise ValueError(f"unknown import strategy: {raw!r}") from None


@dataclass(slots=True, frozen=True)
class ImportResult:
    count: int
    strategy: ImportStrategy


def parse_import(content: str | bytes) -> list[Task]:
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ImportFormatError(f"not UTF-8 text: {e}") from e
    content = content.lstrip("\ufeff")

    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as e:
        raise ImportFormatError(f"not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ImportFormatError(f"expected a JSON array, got {type(data).__name__}")

    tasks = filter_valid_tasks(data)
    dropped = len(data) - len(tasks)
    if dropped:
        logger.debug("Import dropped %d invalid rows of %d", dropped, len(data))
    if not tasks:
        raise ImportEmptyError(f"none of {len(data)} rows is a valid task")
    return tasks


def import_tasks(
    registry: TaskRegistry, content: str | bytes, strategy: ImportStrategy
) -> ImportResult:
    """Parse `content` and apply it to the registry; the registry is untouched on failure."""
    tasks = parse_import(content)
    if strategy is ImportStrategy.MERGE:
        registry.merge_append(tasks)
    else:
        registry.replace_all(tasks)
    logger.info("Imported %d tasks (strategy=%s)", len(tasks), strategy.value)
    return ImportResult(count=len(tasks), strategy=strategy)


async def read_import_file(path: str | Path) -> bytes:
    return await asyncio.to_thread(Path(path).read_bytes)


async def import_file(
    registry: TaskRegistry, path: str | Path, strategy: ImportStrategy
) -> ImportResult:
    content = await read_import_file(path)
    return import_tasks(registry, content, strategy)


# ---- export ----


def export_payload(tasks: list[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False, indent=2)


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"todos-{today.isoformat()}.json"


def write_export(tasks: list[Task], directory: str | Path, *, today: date | None = None) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(export_payload(tasks), "utf-8")
    logger.info("Exported %d tasks to %s", len(tasks), path)
    return path
