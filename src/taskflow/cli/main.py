# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the task snapshot), then:
- starts the periodic sweepers in a background thread,
- runs the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import start_sweepers_in_background

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if state.sweeper is not None:
        state.sweeper.stop()
        state.sweeper.join(timeout=5.0)
        if state.sweeper.is_alive():
            logger.warning("Sweeper thread did not stop within timeout.")

    try:
        state.store.close()
    except Exception:
        logger.debug("Store close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    state.sweeper = start_sweepers_in_background(
        state.engine,
        auto_complete_interval=settings.auto_complete_interval_seconds,
        retention_interval=settings.retention_sweep_interval_seconds,
    )

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # The REPL handles Ctrl+C itself (KeyboardInterrupt out of input()).
            run_console_loop(state)
            stop_main.set()
        else:
            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError):
                # Not in the main thread, or the platform lacks SIGTERM.
                pass
            logger.info("Console disabled. Running sweepers only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
