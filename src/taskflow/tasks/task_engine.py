# src/taskflow/tasks/task_engine.py

from __future__ import annotations

"""
Task lifecycle engine.

Owns the in-memory task collection and is the only place that mutates it:
- user intents: create / toggle_complete / delete / delete_all_completed / edit
- periodic sweeps: auto-completion of overdue tasks, retention pruning

Every effective mutation is followed by a full snapshot save (best-effort).
All mutations run under one lock, so the console thread and the sweeper thread
never observe a half-applied change.
"""

import logging
import threading
import time
from dataclasses import replace

from ..core.ports import Clock, SnapshotRepo
from .retention import RETENTION_WINDOW_SECONDS, filter_old_tasks
from .task_models import Task, TaskPriority, TaskStatus, TaskUpdate, round_ts
from .task_store import DEFAULT_STORAGE_KEY

logger = logging.getLogger(__name__)


class TaskEngine:
    def __init__(
        self,
        store: SnapshotRepo,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Clock = time.time,
        retention_window: float = RETENTION_WINDOW_SECONDS,
    ) -> None:
        self._store = store
        self._key = storage_key
        self._clock = clock
        self._retention_window = float(retention_window)

        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._last_id = 0
        self._loaded = False

    # ---- startup / persistence ----

    def load(self) -> list[Task]:
        """
        Load the snapshot once, drop expired tasks, restore id uniqueness.

        Later calls are no-ops and return the current collection.
        """
        with self._lock:
            if self._loaded:
                return list(self._tasks)

            raw = self._store.load(self._key)
            seen: set[int] = set()
            unique: list[Task] = []
            for t in raw:
                if t.id in seen:
                    logger.warning("Dropping duplicate task id=%s from snapshot", t.id)
                    continue
                seen.add(t.id)
                unique.append(t)

            kept = filter_old_tasks(unique, self._clock(), self._retention_window)
            self._tasks = kept
            self._last_id = max((t.id for t in kept), default=0)
            self._loaded = True

            logger.info(
                "TaskEngine loaded key=%s tasks=%d (expired=%d, duplicates=%d)",
                self._key,
                len(kept),
                len(unique) - len(kept),
                len(raw) - len(unique),
            )

            if len(kept) != len(raw):
                self._persist()
            return list(kept)

    def _persist(self) -> None:
        try:
            self._store.save(self._key, list(self._tasks))
        except Exception:
            # In-memory state stays authoritative for the session.
            logger.exception("Failed to persist tasks key=%s", self._key)

    def _now(self) -> float:
        return round_ts(self._clock())

    def _next_id(self, now: float) -> int:
        task_id = max(int(now * 1000), self._last_id + 1)
        self._last_id = task_id
        return task_id

    def _index_of(self, task_id: int) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    # ---- user intents ----

    def create(
        self,
        text: str,
        priority: TaskPriority = TaskPriority.NORMAL,
        start_time: float | None = None,
        end_time: float | None = None,
    ) -> Task:
        """
        Append a new active task.

        Input is expected to be validated by the caller (non-empty text, both times set).
        """
        with self._lock:
            now = self._now()
            task = Task(
                id=self._next_id(now),
                text=text,
                priority=TaskPriority(priority),
                status=TaskStatus.ACTIVE,
                start_time=float(start_time if start_time is not None else now),
                end_time=float(end_time if end_time is not None else now),
                created_at=now,
            )
            self._tasks.append(task)
            logger.info("Task created id=%s priority=%s end=%s", task.id, task.priority.value, task.end_time)
            self._persist()
            return task

    def toggle_complete(self, task_id: int) -> Task | None:
        """Complete an active task. No-op (None) for unknown or already completed ids."""
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                logger.debug("toggle_complete: unknown id=%s", task_id)
                return None

            task = self._tasks[idx]
            if task.status != TaskStatus.ACTIVE:
                return None

            now = self._now()
            done = replace(
                task,
                status=TaskStatus.COMPLETED,
                completed=True,
                completed_at=now,
                is_on_time=now <= task.end_time,
                was_auto_completed=False,
            )
            self._tasks[idx] = done
            logger.info("Task %s -> completed (on_time=%s)", task_id, done.is_on_time)
            self._persist()
            return done

    def delete(self, task_id: int) -> bool:
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                logger.debug("delete: unknown id=%s", task_id)
                return False
            del self._tasks[idx]
            logger.info("Task %s deleted", task_id)
            self._persist()
            return True

    def delete_all_completed(self) -> int:
        with self._lock:
            before = len(self._tasks)
            self._tasks = [t for t in self._tasks if t.status != TaskStatus.COMPLETED]
            removed = before - len(self._tasks)
            if removed:
                logger.info("Deleted %d completed tasks", removed)
                self._persist()
            return removed

    def edit(self, task_id: int, update: TaskUpdate) -> Task | None:
        """
        Apply the allowed fields of update. Status and completion fields are never touched,
        even if the new end_time puts the task on the other side of "now".
        """
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                logger.debug("edit: unknown id=%s", task_id)
                return None
            if update.is_empty():
                return self._tasks[idx]

            task = self._tasks[idx]
            edited = replace(
                task,
                text=task.text if update.text is None else update.text,
                priority=task.priority if update.priority is None else TaskPriority(update.priority),
                start_time=task.start_time if update.start_time is None else float(update.start_time),
                end_time=task.end_time if update.end_time is None else float(update.end_time),
            )
            self._tasks[idx] = edited
            logger.info("Task %s edited", task_id)
            self._persist()
            return edited

    # ---- periodic sweeps ----

    def sweep_auto_complete(self, now: float | None = None) -> list[Task]:
        """
        Auto-complete every active task whose end_time is strictly before now.

        Auto-completion is always classified as not on time.
        """
        with self._lock:
            now = self._now() if now is None else round_ts(now)

            changed: list[Task] = []
            for i, task in enumerate(self._tasks):
                if task.status == TaskStatus.ACTIVE and task.end_time < now and not task.completed:
                    swept = replace(
                        task,
                        status=TaskStatus.COMPLETED,
                        completed=False,
                        completed_at=now,
                        is_on_time=False,
                        was_auto_completed=True,
                    )
                    self._tasks[i] = swept
                    changed.append(swept)

            if changed:
                logger.info("Auto-completed %d overdue tasks: %s", len(changed), [t.id for t in changed])
                self._persist()
            return changed

    def sweep_retention(self, now: float | None = None) -> list[Task]:
        """Drop tasks older than the retention window; returns the removed ones."""
        with self._lock:
            if now is None:
                now = self._now()

            kept = filter_old_tasks(self._tasks, now, self._retention_window)
            if len(kept) == len(self._tasks):
                return []

            kept_ids = {t.id for t in kept}
            removed = [t for t in self._tasks if t.id not in kept_ids]
            self._tasks = kept
            logger.info("Retention sweep removed %d tasks", len(removed))
            self._persist()
            return removed

    # ---- read-only views ----

    def now(self) -> float:
        return self._clock()

    def get(self, task_id: int) -> Task | None:
        with self._lock:
            idx = self._index_of(task_id)
            return None if idx is None else self._tasks[idx]

    @property
    def all_tasks(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    @property
    def active_tasks(self) -> list[Task]:
        with self._lock:
            return [t for t in self._tasks if t.status == TaskStatus.ACTIVE]

    @property
    def completed_tasks(self) -> list[Task]:
        with self._lock:
            return [t for t in self._tasks if t.status == TaskStatus.COMPLETED]

    @property
    def retention_window(self) -> float:
        return self._retention_window

    @property
    def storage_key(self) -> str:
        return self._key

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
