# tests/test_retention.py

from __future__ import annotations

from taskflow.tasks.retention import RETENTION_WINDOW_SECONDS, filter_old_tasks, is_expired
from taskflow.tasks.task_models import Task, TaskPriority, TaskStatus

NOW = 1_700_000_000.0
HOUR = 60 * 60
DAY = 24 * HOUR


def _task(task_id: int, *, created_ago: float, completed_ago: float | None = None) -> Task:
    created_at = NOW - created_ago
    if completed_ago is None:
        return Task(
            id=task_id,
            text=f"t{task_id}",
            priority=TaskPriority.NORMAL,
            status=TaskStatus.ACTIVE,
            start_time=created_at,
            end_time=created_at + HOUR,
            created_at=created_at,
        )
    return Task(
        id=task_id,
        text=f"t{task_id}",
        priority=TaskPriority.NORMAL,
        status=TaskStatus.COMPLETED,
        start_time=created_at,
        end_time=created_at + HOUR,
        created_at=created_at,
        completed=True,
        completed_at=NOW - completed_ago,
        is_on_time=True,
    )


def test_window_is_three_days() -> None:
    assert RETENTION_WINDOW_SECONDS == 3 * DAY


def test_completed_four_days_ago_is_dropped() -> None:
    c = _task(1, created_ago=5 * DAY, completed_ago=4 * DAY)
    assert filter_old_tasks([c], NOW) == []


def test_completion_time_is_the_anchor_when_present() -> None:
    # Created long ago but finished yesterday: still retained.
    t = _task(1, created_ago=10 * DAY, completed_ago=1 * DAY)
    assert filter_old_tasks([t], NOW) == [t]


def test_stuck_active_task_ages_out_from_creation() -> None:
    stuck = _task(1, created_ago=3 * DAY + 1)
    recent = _task(2, created_ago=2 * DAY)
    assert filter_old_tasks([stuck, recent], NOW) == [recent]


def test_boundary_is_exclusive() -> None:
    exactly = _task(1, created_ago=3 * DAY)
    just_inside = _task(2, created_ago=3 * DAY - 1)
    assert is_expired(exactly, NOW)
    assert not is_expired(just_inside, NOW)


def test_filter_is_idempotent_and_order_preserving() -> None:
    tasks = [
        _task(1, created_ago=1 * HOUR),
        _task(2, created_ago=5 * DAY, completed_ago=4 * DAY),
        _task(3, created_ago=4 * DAY, completed_ago=2 * DAY),
        _task(4, created_ago=3.5 * DAY),
        _task(5, created_ago=10),
    ]
    once = filter_old_tasks(tasks, NOW)
    twice = filter_old_tasks(once, NOW)

    assert [t.id for t in once] == [1, 3, 5]
    assert twice == once
    assert len(tasks) == 5


def test_custom_window() -> None:
    t = _task(1, created_ago=2 * HOUR)
    assert filter_old_tasks([t], NOW, window=HOUR) == []
    assert filter_old_tasks([t], NOW, window=DAY) == [t]
