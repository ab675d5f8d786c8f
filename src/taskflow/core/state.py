# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..tasks.task_engine import TaskEngine

if TYPE_CHECKING:
    from ..tasks.task_scheduler import SweeperRunner


@dataclass
class AppState:
    # Settings object (config.Settings or a test double with the same attributes).
    settings: Any

    engine: TaskEngine
    store: Any

    sweeper: SweeperRunner | None = None
