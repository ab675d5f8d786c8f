# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime

import pytest

from taskflow.tasks.task_models import (
    Task,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    check_ts,
    parse_ts,
)

NOW = 1_700_000_000.0


def test_active_record_round_trip_keeps_absent_fields_null() -> None:
    task = Task(
        id=1700000000000,
        text="call mum",
        priority=TaskPriority.IMPORTANT,
        status=TaskStatus.ACTIVE,
        start_time=NOW,
        end_time=NOW + 3600,
        created_at=NOW,
    )
    rec = task.to_record()

    assert rec["completedAt"] is None
    assert rec["isOnTime"] is None
    assert rec["wasAutoCompleted"] is False
    assert rec["priority"] == "important"
    assert Task.from_record(rec) == task


def test_completed_record_round_trip() -> None:
    task = Task(
        id=5,
        text="x",
        priority=TaskPriority.NORMAL,
        status=TaskStatus.COMPLETED,
        start_time=NOW,
        end_time=NOW + 60,
        created_at=NOW,
        completed=False,
        completed_at=NOW + 120,
        is_on_time=False,
        was_auto_completed=True,
    )
    assert Task.from_record(task.to_record()) == task


def test_fractional_timestamps_round_trip_exactly() -> None:
    for i in range(1000):
        now = 1.76e9 + i * 0.1234567
        task = Task(
            id=i,
            text="t",
            priority=TaskPriority.NORMAL,
            status=TaskStatus.COMPLETED,
            start_time=now - 0.5,
            end_time=now + 0.0000004,
            created_at=now - 1.7,
            completed=True,
            completed_at=now,
            is_on_time=True,
        )
        assert Task.from_record(task.to_record()) == task


def test_from_record_accepts_browser_snapshot() -> None:
    rec = {
        "id": 1718000000123,
        "text": "legacy",
        "completed": True,
        "status": "completed",
        "priority": "very-important",
        "startTime": "2024-06-10T08:00",
        "endTime": "2024-06-10T09:00",
        "createdAt": "2024-06-10T07:59:00.000Z",
        "completedAt": "2024-06-10T08:30:00.000Z",
        "isOnTime": True,
        "wasAutoCompleted": False,
    }
    task = Task.from_record(rec)

    assert task.status == TaskStatus.COMPLETED
    assert task.priority == TaskPriority.VERY_IMPORTANT
    assert task.is_on_time is True
    assert task.completed_at is not None and task.completed_at > task.created_at


def test_unknown_priority_falls_back_to_normal() -> None:
    assert TaskPriority.from_raw("urgent!!") == TaskPriority.NORMAL
    assert TaskPriority.from_raw(None) == TaskPriority.NORMAL


@pytest.mark.parametrize(
    "rec",
    [
        "not a dict",
        {"text": "no id", "status": "active", "startTime": 1, "endTime": 2, "createdAt": 1},
        {"id": 1, "text": "bad status", "status": "paused", "startTime": 1, "endTime": 2, "createdAt": 1},
        {"id": 1, "text": "no end", "status": "active", "startTime": 1, "createdAt": 1},
        {"id": 1, "text": "done?", "status": "completed", "startTime": 1, "endTime": 2, "createdAt": 1},
        {"id": True, "text": "bool id", "status": "active", "startTime": 1, "endTime": 2, "createdAt": 1},
        {"id": 1, "text": "far", "status": "active", "startTime": 1, "endTime": 1e300, "createdAt": 1},
        {"id": 1, "text": "nan", "status": "active", "startTime": 1, "endTime": float("nan"), "createdAt": 1},
    ],
)
def test_from_record_rejects_unusable_records(rec) -> None:
    with pytest.raises(ValueError):
        Task.from_record(rec)


def test_active_record_drops_stray_completion_fields() -> None:
    rec = {
        "id": 1,
        "text": "t",
        "status": "active",
        "startTime": NOW,
        "endTime": NOW + 1,
        "createdAt": NOW,
        "completedAt": NOW,
        "isOnTime": True,
    }
    task = Task.from_record(rec)
    assert task.completed_at is None
    assert task.is_on_time is None


def test_parse_ts_accepts_seconds_millis_and_iso() -> None:
    assert parse_ts(NOW) == NOW
    assert parse_ts(NOW * 1000) == pytest.approx(NOW)
    assert parse_ts("2023-11-14T22:13:20Z") == pytest.approx(NOW)
    assert parse_ts("2030-01-10T09:00") == datetime(2030, 1, 10, 9, 0).timestamp()
    with pytest.raises(ValueError):
        parse_ts("yesterday")


def test_task_update_is_empty() -> None:
    assert TaskUpdate().is_empty()
    assert not TaskUpdate(text="x").is_empty()


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf"), 1e15, -1e15])
def test_check_ts_rejects_unstorable_instants(bad: float) -> None:
    with pytest.raises(ValueError):
        check_ts(bad)


def test_check_ts_passes_ordinary_values_through() -> None:
    assert check_ts(NOW) == NOW
    assert check_ts(0) == 0.0
