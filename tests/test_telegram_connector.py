# tests/test_telegram_connector.py

from __future__ import annotations

import asyncio

import httpx
import pytest

from task_assistant.connectors.console_connector import NOT_A_COMMAND_TEXT, handle_console_line
from task_assistant.connectors.telegram_client import (
    MAX_MESSAGE_LENGTH,
    TelegramAPIError,
    TelegramBotClient,
    truncate_message,
)
from task_assistant.connectors.telegram_connector import handle_update, parse_update, run_telegram_bot

from .fakes import FakeMessenger


def _update(text: str, *, user_id: int = 100, chat_id: int = 500, date: int = 2_000_000_000) -> dict:
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "date": date,
            "text": text,
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "chat": {"id": chat_id, "type": "private"},
        },
    }


def test_parse_update() -> None:
    msg = parse_update(_update("/list"))
    assert msg is not None
    assert (msg.user_id, msg.chat_id, msg.text) == (100, 500, "/list")

    assert parse_update({"update_id": 2, "edited_message": {}}) is None
    no_text = _update("x")
    del no_text["message"]["text"]
    assert parse_update(no_text) is None


@pytest.mark.asyncio
async def test_handle_update_replies_to_chat(state) -> None:
    messenger = FakeMessenger()

    assert await handle_update(state, messenger, _update('/add "Полить цветы"'))
    assert messenger.sent[0].chat_id == 500
    assert messenger.sent[0].text.startswith("✅ Задача добавлена!")

    # The sender id owns the task.
    assert [t.original_description for t in state.task_store.list_by_user(100)] == ["Полить цветы"]


@pytest.mark.asyncio
async def test_handle_update_non_command_gets_hint(state) -> None:
    messenger = FakeMessenger()
    assert await handle_update(state, messenger, _update("привет"))
    assert messenger.sent[0].text == NOT_A_COMMAND_TEXT


@pytest.mark.asyncio
async def test_handle_update_filters(state) -> None:
    messenger = FakeMessenger()

    assert not await handle_update(state, messenger, _update("/list", chat_id=1), allowed_chats={500})
    assert not await handle_update(state, messenger, _update("/list", date=10), startup_ts=100)
    assert not await handle_update(state, messenger, {"update_id": 3})
    assert messenger.sent == []


@pytest.mark.asyncio
async def test_handle_update_send_failure_is_reported(state) -> None:
    messenger = FakeMessenger(fail=True)
    assert not await handle_update(state, messenger, _update("/help"))


def test_console_line_uses_registry(state) -> None:
    assert handle_console_line(state, "hello", user_id=1) == NOT_A_COMMAND_TEXT
    assert handle_console_line(state, "/list", user_id=1).startswith("📋 Активные задачи")


def test_truncate_message() -> None:
    assert truncate_message("short") == "short"
    long = truncate_message("x" * 5000)
    assert len(long) == MAX_MESSAGE_LENGTH
    assert long.endswith("(truncated)")


@pytest.mark.asyncio
async def test_bot_client_calls_api() -> None:
    seen: list[tuple[str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, request.content))
        if request.url.path.endswith("/getUpdates"):
            return httpx.Response(200, json={"ok": True, "result": [{"update_id": 7}]})
        return httpx.Response(400, json={"ok": False, "description": "Bad Request: chat not found"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = TelegramBotClient("123:abc", http=http)

    assert await client.get_updates(offset=5) == [{"update_id": 7}]
    assert seen[0][0].startswith("/bot123")
    assert seen[0][0].endswith("/getUpdates")
    assert b'"offset":5' in seen[0][1].replace(b" ", b"")

    with pytest.raises(TelegramAPIError, match="chat not found"):
        await client.send_message(1, "hi")

    await client.aclose()


def test_bot_client_requires_token() -> None:
    with pytest.raises(ValueError):
        TelegramBotClient("  ")


@pytest.mark.asyncio
async def test_poller_stops_when_token_is_rejected(state) -> None:
    methods: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.url.path.rsplit("/", 1)[-1])
        return httpx.Response(401, json={"ok": False, "description": "Unauthorized"})

    client = TelegramBotClient("bad", http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    await asyncio.wait_for(run_telegram_bot(state, client, asyncio.Event()), timeout=5.0)

    assert methods == ["getMe"]


@pytest.mark.asyncio
async def test_poller_checks_token_then_answers_updates(state) -> None:
    stop_event = asyncio.Event()
    methods: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        methods.append(method)
        if method == "getMe":
            return httpx.Response(200, json={"ok": True, "result": {"id": 1, "username": "task_bot"}})
        if method == "getUpdates":
            update = _update("/list")
            del update["message"]["date"]
            return httpx.Response(200, json={"ok": True, "result": [update]})
        stop_event.set()
        return httpx.Response(200, json={"ok": True, "result": {}})

    client = TelegramBotClient("123:abc", http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    await asyncio.wait_for(run_telegram_bot(state, client, stop_event), timeout=5.0)

    assert methods == ["getMe", "getUpdates", "sendMessage"]
