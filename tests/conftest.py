# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_assistant.core.state import AppState
from task_assistant.limits.limit_store import LimitStore
from task_assistant.tasks.task_store import TaskStore

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        console_user_id=1,
        free_requests_per_month=3,
        telegram_enabled=False,
        telegram_allowed_chats=[],
    )


@pytest.fixture()
def task_store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def limit_store(settings: SimpleNamespace) -> LimitStore:
    return LimitStore(settings.tasks_db_path, free_limit=settings.free_requests_per_month)


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient("Купить молоко и хлеб в магазине у дома")


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    task_store: TaskStore,
    limit_store: LimitStore,
    llm: FakeLLMClient,
) -> AppState:
    """
    AppState wired with a deterministic LLM.

    NOTE: We keep real SQLite stores here because their correctness is part
    of what we want to test.
    """
    return AppState(
        settings=settings,
        task_store=task_store,
        limit_store=limit_store,
        llm=llm,
    )
