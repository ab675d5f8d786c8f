# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime

import pytest

from taskflow.tasks.task_api import (
    completion_info,
    completion_label,
    format_time_remaining,
    parse_datetime,
    parse_priority,
    parse_when,
    priority_label,
    time_ago,
)
from taskflow.tasks.task_models import Task, TaskPriority, TaskStatus

NOW = 1_700_000_000.0


def _completed(*, on_time: bool, auto: bool) -> Task:
    return Task(
        id=1,
        text="t",
        priority=TaskPriority.NORMAL,
        status=TaskStatus.COMPLETED,
        start_time=NOW - 7200,
        end_time=NOW - 3600,
        created_at=NOW - 7200,
        completed=not auto,
        completed_at=NOW - 90,
        is_on_time=on_time,
        was_auto_completed=auto,
    )


@pytest.mark.parametrize(
    ("delta", "text", "urgent", "overdue"),
    [
        (0, "Overdue", False, True),
        (-5, "Overdue", False, True),
        (2 * 3600 + 5 * 60, "2h 5m remaining", False, False),
        (45 * 60, "45m remaining", False, False),
        (29 * 60 + 59, "29m remaining", True, False),
    ],
)
def test_format_time_remaining(delta, text, urgent, overdue) -> None:
    r = format_time_remaining(NOW + delta, NOW)
    assert (r.text, r.is_urgent, r.is_overdue) == (text, urgent, overdue)


def test_time_ago_units() -> None:
    assert time_ago(NOW - 5, NOW) == "5 seconds ago"
    assert time_ago(NOW - 5 * 60, NOW) == "5 minutes ago"
    assert time_ago(NOW - 5 * 3600, NOW) == "5 hours ago"
    assert time_ago(NOW - 5 * 86400, NOW) == "5 days ago"


def test_completion_labels() -> None:
    assert completion_label(_completed(on_time=True, auto=False)) == "Completed on time"
    assert completion_label(_completed(on_time=False, auto=False)) == "Completed late"
    assert completion_label(_completed(on_time=False, auto=True)) == "Incomplete"
    assert completion_info(_completed(on_time=False, auto=True), NOW) == "Marked incomplete 1 minutes ago"
    assert completion_info(_completed(on_time=True, auto=False), NOW) == "Completed 1 minutes ago"


def test_priority_labels_and_parsing() -> None:
    assert priority_label(TaskPriority.VERY_IMPORTANT) == "Very Important"
    assert priority_label("less-important") == "Less Important"
    assert priority_label("bogus") == "Normal"
    assert parse_priority("LI") == TaskPriority.LESS_IMPORTANT
    assert parse_priority("important") == TaskPriority.IMPORTANT
    with pytest.raises(ValueError):
        parse_priority("urgent")


def test_parse_datetime_local_and_offset() -> None:
    expected_local = datetime(2030, 1, 10, 9, 0).timestamp()
    assert parse_datetime("2030-01-10T09:00") == expected_local
    assert parse_datetime("2030-01-10 09:00") == expected_local
    assert parse_datetime("2023-11-14T22:13:20+00:00") == NOW
    assert parse_datetime("2023-11-14T22:13:20Z") == NOW
    with pytest.raises(ValueError):
        parse_datetime("")


def test_parse_when_relative() -> None:
    assert parse_when("now", NOW) == NOW
    assert parse_when("+30m", NOW) == NOW + 1800
    assert parse_when("+1.5h", NOW) == NOW + 5400
    assert parse_when("+1d", NOW) == NOW + 86400
    with pytest.raises(ValueError):
        parse_when("+xh", NOW)


@pytest.mark.parametrize("raw", ["+1e7d", "+infh", "+nanh", "+-1e9d"])
def test_parse_when_rejects_unstorable_instants(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_when(raw, NOW)
