# src/task_assistant/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from .ports import LimitRepo, LLMClient, TaskRepo


@dataclass
class AppState:
    """
    Everything a command handler needs.

    Built once by cli.bootstrap and shared by all connectors. `lock`
    serializes command handling across the console and Telegram threads.
    """

    settings: Any
    task_store: TaskRepo
    limit_store: LimitRepo
    llm: LLMClient

    lock: threading.RLock = field(default_factory=threading.RLock)
