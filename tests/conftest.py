# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.state import AppState
from taskflow.tasks.task_engine import TaskEngine
from taskflow.tasks.task_store import TaskSnapshotStore

from .fakes import FakeClock, InMemorySnapshotRepo

HOUR = 60 * 60
DAY = 24 * HOUR


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        log_level="INFO",
        console_enabled=False,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        storage_key="taskflow-all-tasks",
        retention_days=3.0,
        auto_complete_interval_seconds=30.0,
        retention_sweep_interval_seconds=600.0,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repo() -> InMemorySnapshotRepo:
    return InMemorySnapshotRepo()


@pytest.fixture()
def engine(repo: InMemorySnapshotRepo, clock: FakeClock) -> TaskEngine:
    eng = TaskEngine(repo, clock=clock)
    eng.load()
    return eng


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState wired with a real SQLite snapshot store and a fake clock.

    NOTE: the store is real because its round-trip is part of what we want to test.
    """
    store = TaskSnapshotStore(settings.tasks_db_path)
    eng = TaskEngine(store, storage_key=settings.storage_key, clock=clock)
    eng.load()
    return AppState(settings=settings, engine=eng, store=store)
