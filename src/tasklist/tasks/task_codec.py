# src/tasklist/tasks/task_codec.py

"""
Persistence codec for the task list.

File layout: one task per line,

    <description>|<priority 1-5> <completed 0|1> <due_at epoch seconds>

- the description is everything before the first '|'
- ids are not stored; the store reassigns them on load
- a bad record is logged, reported and skipped; it never aborts the batch
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import MalformedRecordError, ResourceUnavailableError, TaskListError
from .task_models import RECORD_DELIMITER, Task, TaskRecord, validate_task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

_FIELDS_AFTER_DELIMITER = 3


@dataclass(frozen=True, slots=True)
class SkippedLine:
    line_no: int
    line: str
    error: TaskListError


@dataclass(frozen=True, slots=True)
class SkippedTask:
    task_id: int
    error: TaskListError


@dataclass(slots=True)
class ParseResult:
    records: list[TaskRecord] = field(default_factory=list)
    skipped: list[SkippedLine] = field(default_factory=list)


@dataclass(slots=True)
class DumpResult:
    text: str = ""
    written: int = 0
    skipped: list[SkippedTask] = field(default_factory=list)


@dataclass(slots=True)
class LoadReport:
    path: Path
    loaded: int = 0
    skipped: list[SkippedLine] = field(default_factory=list)
    missing: bool = False


@dataclass(slots=True)
class SaveReport:
    path: Path
    saved: int = 0
    skipped: list[SkippedTask] = field(default_factory=list)


# ---- single records ----


def encode_task(task: Task) -> str:
    return (
        f"{task.description}{RECORD_DELIMITER}"
        f"{task.priority.rank} {int(task.completed)} {int(task.due_at)}"
    )


def decode_line(line: str, line_no: int = 0) -> TaskRecord:
    """
    Parse one persisted line.

    Raises MalformedRecordError for structural problems and ValidationError
    for an empty description or an out-of-range priority.
    """
    if RECORD_DELIMITER not in line:
        raise MalformedRecordError(line_no, line, f"missing '{RECORD_DELIMITER}' delimiter")

    description, rest = line.split(RECORD_DELIMITER, 1)
    fields = rest.split()
    if len(fields) != _FIELDS_AFTER_DELIMITER:
        raise MalformedRecordError(
            line_no,
            line,
            f"expected {_FIELDS_AFTER_DELIMITER} fields after delimiter, got {len(fields)}",
        )

    try:
        prio_raw, flag_raw, due_raw = (int(f) for f in fields)
    except ValueError:
        raise MalformedRecordError(line_no, line, "non-numeric priority/flag/date") from None

    if flag_raw not in (0, 1):
        raise MalformedRecordError(line_no, line, f"completed flag must be 0 or 1, got {flag_raw}")

    priority = validate_task(description, prio_raw)
    return TaskRecord(
        description=description,
        priority=priority,
        completed=bool(flag_raw),
        due_at=due_raw,
    )


# ---- whole collections ----


def dump_tasks(tasks: Iterable[Task]) -> DumpResult:
    out = DumpResult()
    lines: list[str] = []
    for task in tasks:
        try:
            validate_task(task.description, task.priority)
        except TaskListError as e:
            logger.warning("Invalid task id=%s not saved: %s", task.id, e)
            out.skipped.append(SkippedTask(task_id=task.id, error=e))
            continue
        lines.append(encode_task(task))

    out.written = len(lines)
    out.text = "".join(ln + "\n" for ln in lines)
    return out


def _split_records(data: str | bytes) -> list[str | bytes]:
    # Records end at "\n" only (plus an optional "\r" before it); other
    # Unicode line separators are ordinary description characters.
    nl, cr = ("\n", "\r") if isinstance(data, str) else (b"\n", b"\r")
    lines = data.split(nl)  # type: ignore[arg-type]
    return [ln[:-1] if ln.endswith(cr) else ln for ln in lines]  # type: ignore[arg-type]


def parse_tasks(data: str | bytes) -> ParseResult:
    """
    Decode a whole task file. Bytes are decoded as UTF-8 line by line, so an
    undecodable line is skipped like any other malformed record.
    """
    out = ParseResult()
    for line_no, raw in enumerate(_split_records(data), start=1):
        if isinstance(raw, bytes):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                text = raw.decode("utf-8", errors="replace")
                err = MalformedRecordError(line_no, text, f"not valid UTF-8 ({e.reason})")
                logger.warning("Skipping invalid task at line %s: %s", line_no, err)
                out.skipped.append(SkippedLine(line_no=line_no, line=text, error=err))
                continue
        else:
            line = raw

        if not line.strip():
            continue
        try:
            out.records.append(decode_line(line, line_no))
        except TaskListError as e:
            logger.warning("Skipping invalid task at line %s: %s", line_no, e)
            out.skipped.append(SkippedLine(line_no=line_no, line=line, error=e))
    return out


# ---- files ----


def load_from_file(store: TaskStore, path: str | Path) -> LoadReport:
    """
    Replace the store's contents with the tasks persisted at `path`.

    A missing file is not an error: the store simply ends up empty.
    """
    p = Path(path)
    report = LoadReport(path=p)

    if not p.exists():
        logger.info("No task file at %s; starting with an empty list.", p)
        store.replace_all([])
        report.missing = True
        return report

    try:
        data = p.read_bytes()
    except OSError as e:
        raise ResourceUnavailableError(p, f"cannot read task file ({e})") from e

    parsed = parse_tasks(data)
    store.replace_all(parsed.records)
    report.loaded = len(parsed.records)
    report.skipped = parsed.skipped
    logger.info("Loaded %d tasks from %s (skipped=%d)", report.loaded, p, len(report.skipped))
    return report


def save_to_file(store: TaskStore, path: str | Path) -> SaveReport:
    """
    Overwrite `path` with every valid task in the store.

    The file is written through a temp file + os.replace, so a failed save
    leaves the previous file in place.
    """
    p = Path(path)
    dumped = dump_tasks(store.list_tasks())

    tmp = p.with_name(p.name + ".tmp")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(dumped.text.encode("utf-8"))
        os.replace(tmp, p)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        logger.error("Unable to open %s for saving: %s", p, e)
        raise ResourceUnavailableError(p, f"unable to open file for saving ({e})") from e

    logger.info("Saved %d tasks to %s (skipped=%d)", dumped.written, p, len(dumped.skipped))
    return SaveReport(path=p, saved=dumped.written, skipped=dumped.skipped)
