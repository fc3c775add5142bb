# src/task_assistant/connectors/telegram_client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Telegram rejects messages longer than 4096 characters.
MAX_MESSAGE_LENGTH = 4000
_TRUNCATED_SUFFIX = "\n\n... (truncated)"


class TelegramAPIError(RuntimeError):
    pass


def truncate_message(text: str) -> str:
    if len(text) <= MAX_MESSAGE_LENGTH:
        return text
    return text[: MAX_MESSAGE_LENGTH - len(_TRUNCATED_SUFFIX)] + _TRUNCATED_SUFFIX


class TelegramBotClient:
    """
    Minimal async client for the Telegram Bot API (long polling only).

    Sender identity comes from `message.from.id`, a positive integer, which is
    used directly as the task owner's user_id.
    """

    def __init__(
        self,
        token: str,
        *,
        api_base: str = "https://api.telegram.org",
        poll_timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        if not token or not token.strip():
            raise ValueError("Telegram bot token is required")
        self._base = f"{api_base.rstrip('/')}/bot{token.strip()}"
        self._poll_timeout = max(0.0, float(poll_timeout))
        # The read timeout must outlive the server-side long poll.
        self._http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(connect=5.0, read=self._poll_timeout + 10.0, write=10.0, pool=5.0)
        )

    async def _call(self, method: str, payload: dict[str, Any]) -> Any:
        resp = await self._http.post(f"{self._base}/{method}", json=payload)
        try:
            data = resp.json()
        except ValueError as e:
            raise TelegramAPIError(f"{method}: non-JSON response (HTTP {resp.status_code})") from e

        if not isinstance(data, dict) or not data.get("ok"):
            desc = data.get("description") if isinstance(data, dict) else None
            raise TelegramAPIError(f"{method} failed (HTTP {resp.status_code}): {desc or 'unknown error'}")
        return data.get("result")

    async def get_me(self) -> dict[str, Any]:
        result = await self._call("getMe", {})
        return result if isinstance(result, dict) else {}

    async def get_updates(self, offset: int | None = None) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {
            "timeout": int(self._poll_timeout),
            "allowed_updates": ["message"],
        }
        if offset is not None:
            payload["offset"] = offset
        result = await self._call("getUpdates", payload)
        return [u for u in (result or []) if isinstance(u, dict)]

    async def send_message(self, chat_id: int, text: str) -> None:
        await self._call("sendMessage", {"chat_id": int(chat_id), "text": truncate_message(text)})

    async def aclose(self) -> None:
        await self._http.aclose()
