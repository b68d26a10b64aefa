# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.cli.bootstrap import create_initial_state
from tasklist.core.state import AppState
from tasklist.tasks.task_models import midday_timestamp
from tasklist.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=data_dir,
        tasks_file_path=data_dir / "tasks.txt",
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired to a temp task file (nothing on disk yet)."""
    return create_initial_state(settings=settings)


@pytest.fixture()
def due():
    """Build a normalized due timestamp: due(2025, 1, 31)."""

    def _due(year: int, month: int, day: int) -> int:
        return midday_timestamp(date(year, month, day))

    return _due
