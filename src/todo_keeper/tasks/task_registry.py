# src/todo_keeper/tasks/task_registry.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.errors import StorageCorruptError, StorageWriteError, TodoError, ValidationError
from ..core.ports import StorageErrorHandler
from .task_codec import StoreCodec
from .task_models import Task, next_id_for, utc_now_iso

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int

    @property
    def remaining(self) -> int:
        return self.total - self.completed


class TaskRegistry:
    """
    Authoritative in-memory task list (insertion order = display order)
    plus the next-id counter.

    Every mutation that changes observable state makes exactly one save attempt
    before returning. Save failures are reported through `on_storage_error`
    and `last_storage_error`; the in-memory change is never rolled back.
    """

    def __init__(
        self,
        codec: StoreCodec,
        *,
        on_storage_error: StorageErrorHandler | None = None,
    ) -> None:
        self._codec = codec
        self.on_storage_error = on_storage_error
        self._tasks: list[Task] = []
        self._counter = 1
        self.last_storage_error: TodoError | None = None

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def next_id(self) -> int:
        return self._counter

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def stats(self) -> TaskStats:
        return TaskStats(
            total=len(self._tasks),
            completed=sum(1 for t in self._tasks if t.completed),
        )

    def usage_bytes(self) -> int:
        return self._codec.usage_bytes()

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- persistence ----

    def _report(self, error: TodoError) -> None:
        self.last_storage_error = error
        if self.on_storage_error is not None:
            self.on_storage_error(error)

    def _persist(self) -> bool:
        try:
            self._codec.save(self._tasks, self._counter)
        except StorageWriteError as e:
            logger.warning("Persist failed (in-memory state kept, %d tasks): %s", len(self._tasks), e)
            self._report(e)
            return False
        self.last_storage_error = None
        return True

    def load(self) -> None:
        """Startup: install whatever the durable slot holds; reset on corruption."""
        try:
            result = self._codec.load()
        except StorageCorruptError as e:
            logger.warning("Stored tasks unreadable, starting empty: %s", e)
            self._tasks = []
            self._counter = 1
            self._report(e)
            return
        before = [t.id for t in result.tasks]
        self._tasks = _unique_ids(result.tasks)
        self._counter = max(result.counter, next_id_for(self._tasks))
        renumbered = before != [t.id for t in self._tasks]
        logger.info(
            "Registry loaded tasks=%d next_id=%d migrated=%s",
            len(self._tasks),
            self._counter,
            result.migrated,
        )
        if renumbered:
            logger.info("Stored ids were not unique; saving renumbered list")
            self._persist()

    # ---- mutations ----

    def add(self, text: str) -> Task:
        clean = (text or "").strip()
        if not clean:
            raise ValidationError("task text is empty")

        task = Task(id=self._counter, text=clean, completed=False, created_at=utc_now_iso())
        self._counter += 1
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)
        self._persist()
        return task

    def toggle(self, task_id: int) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        self._persist()
        return task

    def delete(self, task_id: int) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        self._persist()
        return True

    def clear_all(self) -> int:
        """Remove every task. The counter is kept so ids are never reused."""
        removed = len(self._tasks)
        self._tasks = []
        logger.info("Cleared %d tasks (next_id stays %d)", removed, self._counter)
        self._persist()
        return removed

    def replace_all(self, tasks: Iterable[Task]) -> int:
        """Install `tasks` wholesale; counter becomes max(id)+1 (or 1)."""
        self._tasks = _unique_ids(list(tasks))
        self._counter = next_id_for(self._tasks)
        logger.info("Replaced task list: %d tasks, next_id=%d", len(self._tasks), self._counter)
        self._persist()
        return len(self._tasks)

    def merge_append(self, tasks: Iterable[Task]) -> list[Task]:
        """
        Append `tasks` in order, renumbered to max_id+1 .. max_id+N.

        Incoming ids are ignored; existing tasks keep theirs. One save for the batch.
        """
        incoming = list(tasks)
        if not incoming:
            return []

        max_id = max((t.id for t in self._tasks), default=0)
        for offset, task in enumerate(incoming, start=1):
            task.id = max_id + offset
            self._tasks.append(task)

        self._counter = max(self._counter, max_id + len(incoming) + 1)
        logger.info("Merged %d tasks, next_id=%d", len(incoming), self._counter)
        self._persist()
        return incoming


def _unique_ids(tasks: list[Task]) -> list[Task]:
    """Keep order; give duplicate or non-positive ids fresh ids past the max."""
    seen: set[int] = set()
    fresh = max([t.id for t in tasks if t.id > 0], default=0) + 1
    for task in tasks:
        if task.id <= 0 or task.id in seen:
            logger.debug("Reassigning id %s -> %s", task.id, fresh)
            task.id = fresh
            fresh += 1
        seen.add(task.id)
    return tasks
