# src/tasklist/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .errors import NotFoundError
from .task_models import Priority, Task, TaskPatch, TaskRecord, coerce_priority, validate_task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task collection.

    - insertion order is kept until a sort is applied; mutations never reorder
    - ids come from a counter that only moves forward for the store's lifetime
    - nothing here touches the filesystem (see task_codec for load/save)
    """

    def __init__(self) -> None:
        self._tasks: list[Task] = []
        self._next_id: int = 1

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    @property
    def next_id(self) -> int:
        return self._next_id

    # ---- low-level helpers ----

    def _allocate_id(self) -> int:
        tid = self._next_id
        self._next_id += 1
        return tid

    def _find(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(task_id)

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def create(self, description: str, priority: Priority | int, due_at: int) -> Task:
        prio = validate_task(description, priority)
        task = Task(
            id=self._allocate_id(),
            description=description,
            priority=prio,
            due_at=int(due_at),
        )
        self._tasks.append(task)
        logger.debug(
            "Task added id=%s priority=%s due_at=%s", task.id, prio.label, task.due_at
        )
        return task

    def get(self, task_id: int) -> Task:
        return self._find(task_id)

    def update(self, task_id: int, patch: TaskPatch) -> Task:
        """
        Apply only the fields present in `patch`.

        A new description is checked against the task's current priority, and a
        new priority against the task's current description, never against each
        other's new values. Any failure leaves the task untouched.
        """
        task = self._find(task_id)

        new_priority: Priority | None = None
        if patch.description is not None:
            validate_task(patch.description, task.priority)
        if patch.priority is not None:
            validate_task(task.description, patch.priority)
            new_priority = coerce_priority(patch.priority)

        if patch.description is not None:
            task.description = patch.description
        if new_priority is not None:
            task.priority = new_priority
        if patch.completed is not None:
            task.completed = bool(patch.completed)
        if patch.due_at is not None:
            task.due_at = int(patch.due_at)

        logger.debug("Task updated id=%s patch=%s", task_id, patch)
        return task

    def mark_completed(self, task_id: int) -> Task:
        return self.update(task_id, TaskPatch(completed=True))

    def delete(self, task_id: int) -> Task:
        task = self._find(task_id)
        self._tasks.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        return task

    def list_tasks(self) -> list[Task]:
        return list(self._tasks)

    def sort_by_priority(self, ascending: bool = True) -> None:
        self._stable_sort(lambda t: Priority.sort_key(t.priority), ascending)

    def sort_by_due_date(self, ascending: bool = True) -> None:
        self._stable_sort(lambda t: t.due_at, ascending)

    def _stable_sort(self, key, ascending: bool) -> None:
        # list.sort(reverse=True) keeps equal items in their original order too.
        self._tasks.sort(key=key, reverse=not ascending)

    def filter_by_status(self, completed: bool) -> list[Task]:
        return [t for t in self._tasks if t.completed == completed]

    def completion_percentage(self) -> float:
        if not self._tasks:
            return 0.0
        done = sum(1 for t in self._tasks if t.completed)
        return done / len(self._tasks) * 100.0

    def replace_all(self, records: Iterable[TaskRecord]) -> list[Task]:
        """
        Destructive reload: drop the current collection and adopt `records`.

        Each record gets a fresh id; afterwards the counter sits one past the
        highest id in use, and never below where it already was.
        """
        self._tasks = []
        for rec in records:
            self._tasks.append(
                Task(
                    id=self._allocate_id(),
                    description=rec.description,
                    priority=rec.priority,
                    due_at=rec.due_at,
                    completed=rec.completed,
                )
            )
        max_id = max((t.id for t in self._tasks), default=0)
        # Never rewound (even by an empty reload), so ids stay unique for the process.
        self._next_id = max(self._next_id, max_id + 1)
        logger.info("TaskStore reloaded total=%s next_id=%s", len(self._tasks), self._next_id)
        return list(self._tasks)
