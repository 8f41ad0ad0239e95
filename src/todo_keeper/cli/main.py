# src/todo_keeper/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading stored tasks), then runs the
console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = level_from_name(getattr(settings, "log_level", "INFO"))

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    if settings.console_enabled:
        run_console_loop(state)
    else:
        logger.info("Console disabled; loaded %d tasks, nothing else to do.", len(state.registry))

    # Every mutation already persisted; the last successful save is the checkpoint.
    logger.info("Bye.")


if __name__ == "__main__":
    main()
