# src/task_assistant/core/ports.py

"""
Ports (interfaces) used by the command layer.

Commands depend on Protocols instead of concrete implementations, so the
SQLite stores, the LLM provider and the transports stay swappable and tests
can use fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Awaitable, Iterable, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class OutboundMessenger(Protocol):
    """Connector-side port: deliver a text reply to a chat."""

    def send_text(self, *, chat_id: int, text: str) -> Awaitable[None]: ...


class TaskRepo(Protocol):
    def add(self, task: Any) -> Any: ...
    def get(self, task_id: int) -> Any: ...
    def update(self, task: Any) -> Any: ...
    def delete(self, task_id: int) -> None: ...

    def list_by_user(self, user_id: int) -> list[Any]: ...
    def list_active(self, user_id: int) -> list[Any]: ...
    def list_by_status(self, user_id: int, status: Any) -> list[Any]: ...
    def list_overdue(self, user_id: int, now: datetime | None = None) -> list[Any]: ...

    def count_by_status(self, user_id: int) -> dict[Any, int]: ...


class LimitRepo(Protocol):
    def get(self, user_id: int, now: datetime | None = None) -> Any: ...
    def consume(self, user_id: int, now: datetime | None = None) -> Any: ...
