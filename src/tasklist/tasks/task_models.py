# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from .errors import ValidationError

RECORD_DELIMITER = "|"
_FORBIDDEN_CHARS = (RECORD_DELIMITER, "\n", "\r")


class Priority(Enum):
    """
    Task urgency.

    Notes:
    - ranks 1..5 are the persisted representation (1 = Highest).
    - ordering goes through sort_key(); lower rank sorts first.
    """

    HIGHEST = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4
    LOWEST = 5

    @property
    def rank(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def sort_key(cls, priority: Priority) -> int:
        return priority.rank

    @classmethod
    def from_rank(cls, raw: int) -> Priority:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValidationError(f"Priority must be an integer rank, got {raw!r}.")
        for p in cls:
            if p.rank == raw:
                return p
        raise ValidationError("Priority must be between 1 and 5.")

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Accept "1".."5" or a case-insensitive name ("high", "Lowest", ...)."""
        s = (raw or "").strip()
        digits = s[1:] if s.startswith("-") else s
        if digits.isascii() and digits.isdecimal():
            return cls.from_rank(int(s))
        try:
            return cls[s.upper()]
        except KeyError:
            raise ValidationError(f"Unknown priority: {raw!r}.") from None


def coerce_priority(priority: Priority | int) -> Priority:
    if isinstance(priority, Priority):
        return priority
    return Priority.from_rank(priority)


def validate_task(description: str, priority: Priority | int) -> Priority:
    """
    Check a description/priority pair and return the normalized Priority.

    Raises ValidationError on the first failing field.
    """
    if not description:
        raise ValidationError("Description cannot be empty.")
    if any(ch in description for ch in _FORBIDDEN_CHARS):
        raise ValidationError("Description cannot contain '|' or line breaks.")
    return coerce_priority(priority)


def midday_timestamp(day: date) -> int:
    """Epoch seconds for local noon of `day` (avoids DST/timezone edges)."""
    return int(datetime(day.year, day.month, day.day, 12, 0, 0).timestamp())


def timestamp_to_date(ts: int) -> date:
    return datetime.fromtimestamp(ts).date()


@dataclass(slots=True)
class Task:
    id: int
    description: str
    priority: Priority
    due_at: int
    completed: bool = False

    @property
    def due_date(self) -> date:
        return timestamp_to_date(self.due_at)


@dataclass(frozen=True, slots=True)
class TaskPatch:
    """
    Partial update for a single task.

    None means "leave unchanged"; any other value means "set to X".
    """

    description: str | None = None
    priority: Priority | int | None = None
    completed: bool | None = None
    due_at: int | None = None

    def is_empty(self) -> bool:
        return (
            self.description is None
            and self.priority is None
            and self.completed is None
            and self.due_at is None
        )


@dataclass(frozen=True, slots=True)
class TaskRecord:
    """A decoded task line before the store assigns it an id."""

    description: str
    priority: Priority
    completed: bool
    due_at: int
