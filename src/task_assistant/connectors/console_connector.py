# src/task_assistant/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

NOT_A_COMMAND_TEXT = "Используйте /help для получения списка доступных команд."


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    If stdout is not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_console_line(state: AppState, line: str, user_id: int) -> str:
    """Reply for one console line (commands go through the shared registry)."""
    try:
        with state.lock:
            reply = command_registry.handle(state, line, user_id=user_id)
    except Exception:
        logger.exception("Command handler crashed.")
        return "❌ Произошла внутренняя ошибка. Попробуйте позже."

    return reply if reply is not None else NOT_A_COMMAND_TEXT


def run_console_loop(state: AppState) -> None:
    user_id = int(getattr(state.settings, "console_user_id", 1))
    logger.info("Console connector started (user_id=%s).", user_id)
    _print_ts("[CONSOLE] Type commands. Use /help for the list. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> You: ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> You: {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        _print_ts(handle_console_line(state, user_input, user_id))

    logger.info("Console connector finished.")
