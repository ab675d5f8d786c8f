# src/taskflow/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "taskflow-all-tasks"


class TaskSnapshotStore:
    """
    SQLite-backed key/value slot store.

    Each key holds one JSON array with the full task collection. Writes replace
    the whole value (no partial or merge writes).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskSnapshotStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _read_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT value FROM snapshots WHERE key = ?", (key,))
            row = cur.fetchone()
            return None if row is None else str(row["value"])
        finally:
            conn.close()

    @staticmethod
    def _decode(raw: str, key: str) -> list[Task]:
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Snapshot key=%s is not valid JSON; starting empty.", key)
            return []

        if not isinstance(data, list):
            logger.warning(
                "Snapshot key=%s is %s, expected a list; starting empty.",
                key,
                type(data).__name__,
            )
            return []

        out: list[Task] = []
        for i, rec in enumerate(data):
            try:
                out.append(Task.from_record(rec))
            except ValueError as e:
                logger.warning("Dropping unreadable task record #%d in key=%s: %s", i, key, e)
        return out

    # ---- public API ----

    def load(self, key: str = DEFAULT_STORAGE_KEY) -> list[Task]:
        """
        Read the collection stored under key.

        Missing key, malformed JSON or a database error -> [] (never raises).
        """
        try:
            raw = self._read_raw(key)
        except sqlite3.Error:
            logger.exception("Failed to read snapshot key=%s", key)
            return []

        if raw is None:
            logger.debug("No snapshot for key=%s", key)
            return []

        tasks = self._decode(raw, key)
        logger.debug("Loaded %d tasks from key=%s", len(tasks), key)
        return tasks

    def save(self, key: str, tasks: Iterable[Task]) -> None:
        """Serialize and overwrite the slot. Raises sqlite3.Error on failure."""
        records = [t.to_record() for t in tasks]
        payload = json.dumps(records, ensure_ascii=False)

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO snapshots(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload, time.time()),
            )
            conn.commit()
            logger.debug("Saved %d tasks to key=%s", len(records), key)
        finally:
            conn.close()
