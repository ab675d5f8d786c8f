# src/taskflow/tasks/task_scheduler.py

from __future__ import annotations

"""
Periodic sweepers.

Two independent polling loops drive the time-based parts of the engine:
- auto-completion of overdue active tasks (every 30 s by default),
- retention pruning of old tasks (every 10 min by default).

They run on an asyncio loop owned by a background thread, so the console
REPL (blocking input()) can run in the main thread at the same time.
To stop a loop, cancel the coroutine/task.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from .task_engine import TaskEngine

logger = logging.getLogger(__name__)

AUTO_COMPLETE_INTERVAL_SECONDS = 30.0
RETENTION_SWEEP_INTERVAL_SECONDS = 10 * 60.0


async def run_auto_complete_loop(
        engine: TaskEngine,
        *,
        interval_seconds: float = AUTO_COMPLETE_INTERVAL_SECONDS,
) -> None:
    """
    Every interval_seconds: auto-complete active tasks whose end_time has passed.

    A failing sweep is logged and the loop keeps going.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)
        try:
            engine.sweep_auto_complete()
        except Exception:
            logger.exception("sweep_auto_complete failed")


async def run_retention_loop(
        engine: TaskEngine,
        *,
        interval_seconds: float = RETENTION_SWEEP_INTERVAL_SECONDS,
) -> None:
    """Every interval_seconds: drop tasks older than the engine's retention window."""
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)
        try:
            engine.sweep_retention()
        except Exception:
            logger.exception("sweep_retention failed")


async def run_sweepers(
        engine: TaskEngine,
        stop_event: asyncio.Event,
        *,
        auto_complete_interval: float = AUTO_COMPLETE_INTERVAL_SECONDS,
        retention_interval: float = RETENTION_SWEEP_INTERVAL_SECONDS,
) -> None:
    """Run both loops until stop_event is set, then cancel them cleanly."""
    loops = [
        asyncio.create_task(
            run_auto_complete_loop(engine, interval_seconds=auto_complete_interval),
            name="taskflow-auto-complete",
        ),
        asyncio.create_task(
            run_retention_loop(engine, interval_seconds=retention_interval),
            name="taskflow-retention",
        ),
    ]
    logger.info(
        "Sweepers started (auto_complete=%.1fs, retention=%.1fs)",
        auto_complete_interval,
        retention_interval,
    )

    try:
        await stop_event.wait()
    finally:
        for t in loops:
            t.cancel()
        for t in loops:
            with contextlib.suppress(asyncio.CancelledError):
                await t
        logger.info("Sweepers stopped.")


@dataclass
class SweeperRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            # Loop already closed: nothing left to stop.
            logger.debug("Sweeper loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self.thread.is_alive()


def start_sweepers_in_background(
        engine: TaskEngine,
        *,
        auto_complete_interval: float = AUTO_COMPLETE_INTERVAL_SECONDS,
        retention_interval: float = RETENTION_SWEEP_INTERVAL_SECONDS,
) -> SweeperRunner | None:
    """Start both sweepers on a dedicated event loop in a daemon thread."""
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_sweepers(
                    engine,
                    stop_event,
                    auto_complete_interval=auto_complete_interval,
                    retention_interval=retention_interval,
                )
            )
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="taskflow-sweepers", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Sweeper thread did not initialize properly.")
        return None

    logger.info("Sweeper background thread started.")
    return SweeperRunner(thread=t, loop=loop, stop_event=stop_event)
