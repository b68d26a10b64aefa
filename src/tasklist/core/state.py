# src/tasklist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are kept on the state so command handlers never read config globals.
    settings: Settings

    task_store: TaskStore
    tasks_file_path: Path
