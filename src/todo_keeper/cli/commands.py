# src/todo_keeper/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.reconciler import ImportStrategy
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        # Commands that take the rest of the line verbatim as a single argument.
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        names = [key] + [a.lower() for a in aliases]
        for alias in names[1:]:
            self._handlers[alias] = handler
        if raw:
            self._raw.update(names)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        if name in self._raw:
            rest = line[1:].split(maxsplit=1)
            args = rest[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def render_tasks(tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks yet. Add one with /add <text> (or just type it)."
    lines = []
    for t in tasks:
        box = "[x]" if t.completed else "[ ]"
        lines.append(f"  {box} #{t.id} {t.text}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_tasks(state.registry.tasks) + "\n" + task_api.stats_line(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return task_api.stats_line(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    return task_api.add_task(state, args[0] if args else "").message


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    return task_api.toggle_task(state, task_id).message


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    return task_api.delete_task(state, task_id).message


def cmd_clear(state: AppState, args: list[str]) -> str:
    """
    /clear      -> ask for confirmation
    /clear yes  -> delete every task (ids are not reused)
    """
    if not args or args[0].lower() not in ("yes", "y"):
        n = len(state.registry)
        return (
            f"This deletes all {n} tasks and cannot be undone. "
            "Run /clear yes to confirm."
        )
    return task_api.clear_tasks(state).message


def cmd_export(state: AppState, args: list[str]) -> str:
    directory = Path(args[0]).expanduser() if args else state.settings.export_dir
    return task_api.export_tasks(state, directory).message


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /import <path>          -> replace all tasks with the file's tasks
    /import <path> merge    -> append the file's tasks with fresh ids
    """
    if not args:
        return "Usage: /import <path> [replace|merge]"
    try:
        strategy = ImportStrategy.parse(args[1] if len(args) > 1 else None)
    except ValueError:
        return "Usage: /import <path> [replace|merge]"

    path = Path(args[0]).expanduser()
    if emit:
        emit(f"Importing {path} ({strategy.value})...")
    logger.debug("Import requested path=%s strategy=%s", path, strategy.value)

    result = asyncio.run(task_api.import_tasks_from_file(state, path, strategy))
    return result.message


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show remaining/total counts and storage use.")
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"], raw=True)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete", "del"])
registry.register("clear", cmd_clear, help_text="Delete all tasks: /clear yes.")
registry.register("export", cmd_export, help_text="Export tasks as JSON: /export [dir].")
registry.register(
    "import", cmd_import, help_text="Import a JSON array: /import <path> [replace|merge]."
)
