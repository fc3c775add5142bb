# src/task_assistant/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts connectors:
- console REPL in the main thread (optional),
- Telegram poller in a background thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..connectors.telegram_connector import TelegramBackgroundRunner, start_telegram_in_background
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _wait_for_shutdown_signal() -> None:
    """Block until SIGINT/SIGTERM; the stop signal is an Event, not global state."""
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            signal.signal(sig, _handle_signal)
        except (ValueError, OSError):
            logger.debug("Cannot install handler for signal %s.", sig)

    stop_main.wait()


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    telegram_runner: TelegramBackgroundRunner | None = None
    if settings.telegram_enabled:
        telegram_runner = start_telegram_in_background(state)

    try:
        if settings.console_enabled:
            # Ctrl+C stays a KeyboardInterrupt here so input() returns.
            run_console_loop(state)
        elif telegram_runner is None:
            logger.error("No connector is running (console disabled, Telegram not started).")
        else:
            logger.info("Console disabled. Running Telegram only. Press Ctrl+C to stop.")
            _wait_for_shutdown_signal()

    finally:
        if telegram_runner is not None:
            telegram_runner.stop()
            telegram_runner.join(timeout=10.0)

        logger.info("Bye.")


if __name__ == "__main__":
    main()
