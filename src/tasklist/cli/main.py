# src/tasklist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (seeded from the task file), then runs
the console REPL in the main thread. Exiting does not save.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = settings.data_dir if settings.log_to_file else None
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        unsaved = state.task_store.count_tasks()
        logger.info("Bye. (%d tasks in memory, not saved automatically)", unsaved)
        print("Exiting program. Goodbye.")


if __name__ == "__main__":
    main()
