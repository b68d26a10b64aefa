# src/tasklist/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.errors import NotFoundError, TaskListError
from ..tasks.task_codec import load_from_file, save_to_file
from ..tasks.task_models import Priority, TaskPatch, midday_timestamp
from .render import format_percentage, parse_date, render_table, status_label

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"1", "y", "yes", "true", "on", "done", "completed"}
_FALSE_WORDS = {"0", "n", "no", "false", "off", "pending"}


class CommandRegistry:
    """Slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task errors raised by handlers are turned into replies here.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except NotFoundError as e:
            logger.warning("/%s: %s", name, e)
            return f"Warning: {e}"
        except TaskListError as e:
            logger.info("/%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Leave (unsaved changes are discarded; use /save first).")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(raw: str) -> int | None:
    s = raw.strip().rstrip(".")
    if not (s.isascii() and s.isdecimal()):
        return None
    return int(s)


def _parse_flag(raw: str) -> bool | None:
    s = raw.strip().lower()
    if s in _TRUE_WORDS:
        return True
    if s in _FALSE_WORDS:
        return False
    return None


def _parse_direction(args: list[str]) -> bool | None:
    if not args:
        return True
    s = args[0].lower()
    if s in ("asc", "ascending", "1"):
        return True
    if s in ("desc", "descending", "2"):
        return False
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <priority> <YYYY-MM-DD> <description...>
    """
    if len(args) < 3:
        return "Usage: /add <priority 1-5|name> <YYYY-MM-DD> <description...>"

    priority = Priority.parse(args[0])
    try:
        due = parse_date(args[1])
    except ValueError as e:
        return str(e)

    description = " ".join(args[2:])
    task = state.task_store.create(description, priority, midday_timestamp(due))
    return f"Task {task.id} added successfully."


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> [desc="..."] [prio=N] [done=yes|no] [due=YYYY-MM-DD]
    """
    usage = 'Usage: /edit <id> [desc="..."] [prio=1-5] [done=yes|no] [due=YYYY-MM-DD]'
    if not args:
        return usage

    task_id = _parse_id(args[0])
    if task_id is None:
        return "Invalid ID."

    fields: dict[str, object] = {}
    for token in args[1:]:
        key, sep, value = token.partition("=")
        if not sep:
            return usage
        key = key.lower()
        if key in ("desc", "description"):
            fields["description"] = value
        elif key in ("prio", "priority"):
            fields["priority"] = Priority.parse(value)
        elif key in ("done", "completed"):
            flag = _parse_flag(value)
            if flag is None:
                return "Invalid input for completion (use yes/no)."
            fields["completed"] = flag
        elif key == "due":
            try:
                fields["due_at"] = midday_timestamp(parse_date(value))
            except ValueError as e:
                return str(e)
        else:
            return f"Unknown field: {key}. {usage}"

    patch = TaskPatch(**fields)  # type: ignore[arg-type]
    if patch.is_empty():
        return usage
    task = state.task_store.update(task_id, patch)
    return f"Task {task.id} updated."


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    task_id = _parse_id(args[0])
    if task_id is None:
        return "Invalid ID."
    task = state.task_store.mark_completed(task_id)
    return f"Task {task.id} marked as completed."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    task_id = _parse_id(args[0])
    if task_id is None:
        return "Invalid ID."
    task = state.task_store.delete(task_id)
    return f"Task {task.id} deleted."


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No tasks available."
    return render_table(tasks)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter done     -> completed tasks
    /filter pending  -> open tasks
    """
    flag = _parse_flag(args[0]) if args else None
    if flag is None:
        return "Usage: /filter done | /filter pending"

    tasks = state.task_store.filter_by_status(flag)
    if not tasks:
        return f"No tasks found with status: {status_label(flag)}"
    return render_table(tasks)


def cmd_sort(state: AppState, args: list[str]) -> str:
    """
    /sort priority [asc|desc]
    /sort due [asc|desc]
    """
    usage = "Usage: /sort priority|due [asc|desc]"
    if not args:
        return usage

    ascending = _parse_direction(args[1:])
    if ascending is None:
        return usage

    key = args[0].lower()
    store = state.task_store
    if key in ("priority", "prio"):
        store.sort_by_priority(ascending)
    elif key in ("due", "date"):
        store.sort_by_due_date(ascending)
    else:
        return usage

    tasks = store.list_tasks()
    if not tasks:
        return "No tasks available."
    return render_table(tasks)


def cmd_stats(state: AppState, args: list[str]) -> str:
    store = state.task_store
    pct = format_percentage(store.completion_percentage())
    if store.count_tasks() == 0:
        return f"No tasks. Completion percentage: {pct}"
    return f"Completion percentage: {pct}"


def cmd_save(state: AppState, args: list[str]) -> str:
    report = save_to_file(state.task_store, state.tasks_file_path)
    msg = f"Saved {report.saved} tasks to {report.path}."
    for s in report.skipped:
        msg += f"\n  Invalid task with ID {s.task_id} not saved: {s.error}"
    return msg


def cmd_load(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    Reload from disk. Unsaved in-memory changes are replaced.
    """
    if emit is not None:
        emit(f"Loading tasks from {state.tasks_file_path}...")

    report = load_from_file(state.task_store, state.tasks_file_path)
    if report.missing:
        return f"No task file at {report.path}; task list is now empty."

    msg = f"Loaded {report.loaded} tasks from {report.path}."
    for s in report.skipped:
        msg += f"\n  Skipped line {s.line_no}: {s.error}"
    return msg


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <priority> <YYYY-MM-DD> <description...>."
)
registry.register(
    "edit",
    cmd_edit,
    help_text='Edit fields: /edit <id> desc="..." prio=N done=yes|no due=YYYY-MM-DD.',
)
registry.register("done", cmd_done, help_text="Mark a task as completed: /done <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Filter by status: /filter done | pending.")
registry.register("sort", cmd_sort, help_text="Sort tasks: /sort priority|due [asc|desc].")
registry.register("stats", cmd_stats, help_text="Show completion percentage.")
registry.register("save", cmd_save, help_text="Write all tasks to the task file.")
registry.register("load", cmd_load, help_text="Reload tasks from the task file (replaces the list).")
