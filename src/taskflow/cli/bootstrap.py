# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the snapshot store and the engine into AppState,
- loads the persisted collection before any intent is accepted.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_engine import TaskEngine
from ..tasks.task_store import TaskSnapshotStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings and load the task collection.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskSnapshotStore(settings.tasks_db_path)
    engine = TaskEngine(
        store,
        storage_key=settings.storage_key,
        retention_window=settings.retention_days * 24 * 60 * 60,
    )
    engine.load()

    return AppState(settings=settings, engine=engine, store=store)
