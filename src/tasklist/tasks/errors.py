# src/tasklist/tasks/errors.py

"""
Error taxonomy for the task core.

Store operations raise these directly. Batch operations (load/save) collect
them per record and keep going, so a single bad record never aborts a batch.
"""

from __future__ import annotations

from pathlib import Path


class TaskListError(Exception):
    """Base class for every recoverable task-list error."""


class ValidationError(TaskListError, ValueError):
    """Empty/invalid description or a priority outside the enumeration."""


class NotFoundError(TaskListError, LookupError):
    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"No task found with ID {task_id}.")


class MalformedRecordError(TaskListError, ValueError):
    """A persisted line could not be parsed into a task."""

    def __init__(self, line_no: int, line: str, reason: str) -> None:
        self.line_no = line_no
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_no}: {reason}")


class ResourceUnavailableError(TaskListError, OSError):
    """The data file could not be opened for reading or writing."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"
