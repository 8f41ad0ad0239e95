# src/todo_keeper/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry, render_tasks
from ..core.state import AppState
from ..tasks import task_api

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _flush_warnings(state: AppState) -> None:
    for warning in state.drain_warnings():
        _print_ts(f"[WARN] {warning}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.registry))
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    _flush_warnings(state)
    print(render_tasks(state.registry.tasks))
    print(task_api.stats_line(state))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (e.g. file import)
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # A bare line is a new task.
        if not user_input.startswith("/"):
            user_input = f"/add {user_input}"

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)
        _flush_warnings(state)

    logger.info("Console connector finished.")
