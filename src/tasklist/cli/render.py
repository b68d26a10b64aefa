# src/tasklist/cli/render.py

"""Plain-text presentation helpers used by the command handlers."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..tasks.task_models import Task

_COLUMNS: tuple[tuple[str, int], ...] = (
    ("ID", 5),
    ("Description", 25),
    ("Priority", 10),
    ("Status", 10),
    ("Due Date", 20),
)


def status_label(completed: bool) -> str:
    return "Completed" if completed else "Pending"


def format_date(task: Task) -> str:
    try:
        return task.due_date.isoformat()
    except (OverflowError, OSError, ValueError):
        return "InvalidDate"


def parse_date(raw: str) -> date:
    """Parse YYYY-MM-DD; raises ValueError with a user-facing message."""
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid date {raw!r}; expected YYYY-MM-DD.") from None


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


def _row(cells: Sequence[str]) -> str:
    return "".join(cell.ljust(width) for cell, (_, width) in zip(cells, _COLUMNS)).rstrip()


def render_table(tasks: Sequence[Task]) -> str:
    lines = [_row([name for name, _ in _COLUMNS])]
    for t in tasks:
        lines.append(
            _row(
                [
                    str(t.id),
                    t.description,
                    t.priority.label,
                    status_label(t.completed),
                    format_date(t),
                ]
            )
        )
    return "\n".join(lines)
