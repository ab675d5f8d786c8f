# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier (in-memory repos, fake clocks).
"""

from collections.abc import Iterable
from typing import Any, Protocol


class Clock(Protocol):
    """Returns "now" as POSIX seconds. time.time satisfies it."""
    def __call__(self) -> float: ...


class SnapshotRepo(Protocol):
    """
    Durable key/value slot holding the full task collection.

    load() must never raise: missing or malformed data is an empty collection.
    save() overwrites the whole slot; it may raise, callers treat it as best-effort.
    """

    def load(self, key: str) -> list[Any]: ...
    def save(self, key: str, tasks: Iterable[Any]) -> None: ...
