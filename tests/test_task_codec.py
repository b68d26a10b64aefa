# tests/test_task_codec.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist.tasks.errors import MalformedRecordError, ResourceUnavailableError, ValidationError
from tasklist.tasks.task_codec import (
    decode_line,
    dump_tasks,
    encode_task,
    load_from_file,
    parse_tasks,
    save_to_file,
)
from tasklist.tasks.task_models import Priority, Task
from tasklist.tasks.task_store import TaskStore


def test_encode_task_line_format() -> None:
    task = Task(id=9, description="Buy milk", priority=Priority.MEDIUM, due_at=1700000000)
    assert encode_task(task) == "Buy milk|3 0 1700000000"

    task.completed = True
    assert encode_task(task) == "Buy milk|3 1 1700000000"


def test_decode_line_keeps_description_verbatim() -> None:
    rec = decode_line("  Pay rent, then: relax!  |1 1 1700000000", 1)
    assert rec.description == "  Pay rent, then: relax!  "
    assert rec.priority is Priority.HIGHEST
    assert rec.completed is True
    assert rec.due_at == 1700000000


@pytest.mark.parametrize(
    "line",
    [
        "no delimiter 3 0 1700000000",
        "Task|3 0",
        "Task|3 0 1700000000 extra",
        "Task|high 0 1700000000",
        "Task|3 x 1700000000",
        "Task|3 0 tomorrow",
        "Task|3 2 1700000000",
    ],
)
def test_decode_line_malformed(line: str) -> None:
    with pytest.raises(MalformedRecordError) as exc:
        decode_line(line, 4)
    assert exc.value.line_no == 4
    assert exc.value.line == line


@pytest.mark.parametrize("line", ["|3 0 1700000000", "Task|0 0 1700000000", "Task|6 1 1700000000"])
def test_decode_line_invalid(line: str) -> None:
    with pytest.raises(ValidationError):
        decode_line(line, 1)


def test_parse_tasks_skips_bad_lines_and_continues() -> None:
    text = "Good one|2 0 1700000000\nBad one|abc 0 1700000000\n\nAnother|5 1 1700003600\n"
    result = parse_tasks(text)

    assert [r.description for r in result.records] == ["Good one", "Another"]
    assert len(result.skipped) == 1
    assert result.skipped[0].line_no == 2
    assert isinstance(result.skipped[0].error, MalformedRecordError)


def test_dump_tasks_skips_invalid_tasks() -> None:
    good = Task(id=1, description="ok", priority=Priority.LOW, due_at=1700000000)
    bad = Task(id=2, description="", priority=Priority.LOW, due_at=1700000000)
    also_good = Task(id=3, description="fine", priority=Priority.HIGH, due_at=1700000000)

    result = dump_tasks([good, bad, also_good])

    assert result.text == "ok|4 0 1700000000\nfine|2 0 1700000000\n"
    assert result.written == 2
    assert [s.task_id for s in result.skipped] == [2]
    assert isinstance(result.skipped[0].error, ValidationError)


def test_save_then_load_round_trip(tmp_path: Path, due) -> None:
    path = tmp_path / "tasks.txt"
    src = TaskStore()
    src.create("Write: the report, v2 (final)", Priority.HIGH, due(2025, 3, 30))
    src.create("Water plants", Priority.LOWEST, due(2024, 10, 27))
    src.mark_completed(2)

    report = save_to_file(src, path)
    assert report.saved == 2
    assert not report.skipped

    dst = TaskStore()
    loaded = load_from_file(dst, path)
    assert loaded.loaded == 2
    assert not loaded.missing

    def _key(t: Task) -> tuple:
        return (t.description, t.priority, t.completed, t.due_at)

    assert [_key(t) for t in dst.list_tasks()] == [_key(t) for t in src.list_tasks()]
    assert dst.list_tasks()[0].due_date.isoformat() == "2025-03-30"


def test_load_tolerates_malformed_line(tmp_path: Path) -> None:
    path = tmp_path / "tasks.txt"
    path.write_text("Well formed|3 0 1700000000\nBroken|three 0 1700000000\n", encoding="utf-8")

    store = TaskStore()
    report = load_from_file(store, path)

    tasks = store.list_tasks()
    assert len(tasks) == 1
    assert tasks[0].description == "Well formed"
    assert tasks[0].priority is Priority.MEDIUM
    assert report.loaded == 1
    assert [s.line_no for s in report.skipped] == [2]


def test_load_missing_file_gives_empty_store(tmp_path: Path, due) -> None:
    store = TaskStore()
    store.create("in memory", Priority.LOW, due(2025, 1, 1))

    report = load_from_file(store, tmp_path / "nope.txt")

    assert report.missing is True
    assert store.count_tasks() == 0


def test_load_replaces_and_keeps_ids_moving_forward(tmp_path: Path, due) -> None:
    path = tmp_path / "tasks.txt"
    path.write_text("a|1 0 1700000000\nb|2 0 1700000000\n", encoding="utf-8")

    store = TaskStore()
    store.create("scratch", Priority.LOW, due(2025, 1, 1))
    load_from_file(store, path)

    assert [t.description for t in store.list_tasks()] == ["a", "b"]
    assert [t.id for t in store.list_tasks()] == [2, 3]
    assert store.create("c", Priority.LOW, due(2025, 1, 1)).id == 4


def test_save_to_unwritable_location(tmp_path: Path, due) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")

    store = TaskStore()
    store.create("a", Priority.LOW, due(2025, 1, 1))

    with pytest.raises(ResourceUnavailableError) as exc:
        save_to_file(store, blocker / "tasks.txt")
    assert exc.value.path == blocker / "tasks.txt"


def test_save_overwrites_whole_file(tmp_path: Path, due) -> None:
    path = tmp_path / "tasks.txt"
    path.write_text("stale|1 0 1|\ngarbage\n", encoding="utf-8")

    store = TaskStore()
    store.create("fresh", Priority.HIGH, 1700000000)
    save_to_file(store, path)

    assert path.read_text(encoding="utf-8") == "fresh|2 0 1700000000\n"
    assert not (tmp_path / "tasks.txt.tmp").exists()


def test_round_trip_keeps_unicode_separators_in_descriptions(tmp_path: Path, due) -> None:
    path = tmp_path / "tasks.txt"
    descriptions = ["Page\x0cbreak", "Line\u2028sep", "Next\x85line", "Group\x1dsep\x1e"]
    src = TaskStore()
    for text in descriptions:
        src.create(text, Priority.MEDIUM, due(2025, 2, 14))

    save_to_file(src, path)
    dst = TaskStore()
    report = load_from_file(dst, path)

    assert [t.description for t in dst.list_tasks()] == descriptions
    assert report.loaded == len(descriptions)
    assert not report.skipped


def test_parse_tasks_splits_records_on_newline_only() -> None:
    result = parse_tasks("Para\u2029graph|1 0 1700000000\nVertical\x0btab|2 1 1700000000\n")
    assert [r.description for r in result.records] == ["Para\u2029graph", "Vertical\x0btab"]
    assert not result.skipped


def test_load_accepts_crlf_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "tasks.txt"
    path.write_bytes(b"first|1 0 1700000000\r\nsecond|4 1 1700003600\r\n")

    store = TaskStore()
    report = load_from_file(store, path)

    assert [t.description for t in store.list_tasks()] == ["first", "second"]
    assert store.list_tasks()[1].completed is True
    assert not report.skipped


def test_load_skips_line_that_is_not_utf8(tmp_path: Path) -> None:
    path = tmp_path / "tasks.txt"
    path.write_bytes(
        b"good|1 0 1700000000\nbad \xff byte|2 0 1700000000\nother|3 0 1700000000\n"
    )

    store = TaskStore()
    report = load_from_file(store, path)

    assert [t.description for t in store.list_tasks()] == ["good", "other"]
    assert report.loaded == 2
    assert [s.line_no for s in report.skipped] == [2]
    assert isinstance(report.skipped[0].error, MalformedRecordError)
