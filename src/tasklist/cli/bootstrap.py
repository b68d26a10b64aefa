# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes settings once,
- ensures the local data directory exists,
- builds the TaskStore and seeds it from the task file (if any).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.errors import ResourceUnavailableError
from ..tasks.task_codec import load_from_file
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_file_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, load_tasks: bool = True) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    state = AppState(
        settings=settings,
        task_store=TaskStore(),
        tasks_file_path=settings.tasks_file_path,
    )

    if load_tasks:
        try:
            report = load_from_file(state.task_store, state.tasks_file_path)
        except ResourceUnavailableError:
            # Start empty; the user can still work and /save later.
            logger.exception("Failed to load tasks from %s", state.tasks_file_path)
        else:
            for s in report.skipped:
                logger.warning("Skipped line %s of %s: %s", s.line_no, report.path, s.error)

    logger.info(
        "TaskStore ready file=%s total=%s",
        state.tasks_file_path,
        state.task_store.count_tasks(),
    )
    return state
