# src/taskflow/tasks/retention.py

from __future__ import annotations

"""
Retention filter.

A task's age is measured from completed_at when it has one, else from created_at.
That single rule prunes both finished history and tasks stuck in "active" for too long.
"""

from collections.abc import Iterable

from .task_models import Task

RETENTION_WINDOW_SECONDS = 3 * 24 * 60 * 60


def retention_anchor(task: Task) -> float:
    return task.completed_at if task.completed_at is not None else task.created_at


def is_expired(task: Task, now: float, window: float = RETENTION_WINDOW_SECONDS) -> bool:
    return now - retention_anchor(task) >= window


def filter_old_tasks(
    tasks: Iterable[Task],
    now: float,
    window: float = RETENTION_WINDOW_SECONDS,
) -> list[Task]:
    """Return the tasks still inside the retention window, in input order."""
    return [t for t in tasks if not is_expired(t, now, window)]
