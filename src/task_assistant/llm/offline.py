# src/task_assistant/llm/offline.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Offline deterministic LLM client used when no external API is configured.

    Enhancement prompts get the task text back with its first letter
    capitalized, so /enhance still works end to end in demos.
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        text = user_text.strip()
        if text:
            yield text[0].upper() + text[1:]
