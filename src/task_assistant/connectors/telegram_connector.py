# src/task_assistant/connectors/telegram_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

from ..cli.commands import registry as command_registry
from ..core.ports import OutboundMessenger
from ..core.state import AppState
from .console_connector import NOT_A_COMMAND_TEXT
from .telegram_client import TelegramAPIError, TelegramBotClient

logger = logging.getLogger(__name__)

_ERROR_BACKOFF_SECONDS = 5.0


@dataclass(slots=True, frozen=True)
class InboundMessage:
    update_id: int
    chat_id: int
    user_id: int
    text: str
    date: int


def parse_update(update: dict[str, Any]) -> InboundMessage | None:
    """Extract a text message with a numeric sender; anything else is ignored."""
    message = update.get("message")
    if not isinstance(message, dict):
        return None

    text = message.get("text")
    sender = message.get("from")
    chat = message.get("chat")
    if not isinstance(text, str) or not isinstance(sender, dict) or not isinstance(chat, dict):
        return None

    try:
        return InboundMessage(
            update_id=int(update["update_id"]),
            chat_id=int(chat["id"]),
            user_id=int(sender["id"]),
            text=text,
            date=int(message.get("date") or 0),
        )
    except (KeyError, TypeError, ValueError):
        return None


class TelegramMessenger:
    """OutboundMessenger over the Bot API."""

    def __init__(self, client: TelegramBotClient) -> None:
        self._client = client

    async def send_text(self, *, chat_id: int, text: str) -> None:
        await self._client.send_message(chat_id, text)


def reply_for(state: AppState, msg: InboundMessage) -> str | None:
    body = msg.text.strip()
    if not body:
        return None

    try:
        with state.lock:
            reply = command_registry.handle(state, body, user_id=msg.user_id)
    except Exception:
        logger.exception("Command handler crashed.")
        return "❌ Произошла внутренняя ошибка. Попробуйте позже."

    return reply if reply is not None else NOT_A_COMMAND_TEXT


async def handle_update(
    state: AppState,
    messenger: OutboundMessenger,
    update: dict[str, Any],
    *,
    allowed_chats: set[int] | None = None,
    startup_ts: int = 0,
) -> bool:
    """Process one update. Returns True if a reply was sent."""
    msg = parse_update(update)
    if msg is None:
        return False

    # Backlog queued while the bot was down is dropped.
    if msg.date and msg.date < startup_ts:
        return False

    if allowed_chats is not None and msg.chat_id not in allowed_chats:
        logger.debug("Telegram: chat %s not in allowlist", msg.chat_id)
        return False

    logger.info("Telegram <%s> user %s: %r", msg.chat_id, msg.user_id, msg.text)

    reply = reply_for(state, msg)
    if not reply:
        return False

    try:
        await messenger.send_text(chat_id=msg.chat_id, text=reply)
    except Exception:
        logger.exception("Failed to send Telegram reply to chat %s.", msg.chat_id)
        return False
    return True


async def _wait_or_stop(coro: Any, stop_event: asyncio.Event) -> Any:
    """Await `coro` unless stop_event fires first (then the call is cancelled)."""
    work = asyncio.ensure_future(coro)
    stopper = asyncio.ensure_future(stop_event.wait())
    try:
        done, _ = await asyncio.wait({work, stopper}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stopper.cancel()

    if work in done:
        return work.result()

    work.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await work
    return None


async def run_telegram_bot(
    state: AppState,
    client: TelegramBotClient,
    stop_event: asyncio.Event,
    *,
    allowed_chats: set[int] | None = None,
) -> None:
    """
    Long-polling loop: getUpdates -> command registry -> sendMessage.

    Checks the token with getMe first; a rejected token stops the poller.
    Runs until stop_event is set. Poll failures are logged and retried after
    a short pause.
    """
    startup_ts = int(time.time())
    messenger = TelegramMessenger(client)
    offset: int | None = None

    logger.info("Telegram poller started (allowed_chats=%s).", allowed_chats or "ALL")

    try:
        try:
            me = await _wait_or_stop(client.get_me(), stop_event)
        except TelegramAPIError:
            logger.error("Telegram rejected the bot token (getMe failed), poller not started.", exc_info=True)
            return
        except Exception:
            logger.warning("Telegram getMe failed, polling anyway.", exc_info=True)
        else:
            if me:
                logger.info("Telegram bot @%s (id=%s) connected.", me.get("username"), me.get("id"))

        while not stop_event.is_set():
            try:
                updates = await _wait_or_stop(client.get_updates(offset), stop_event)
            except Exception:
                logger.exception("Telegram getUpdates failed.")
                await _wait_or_stop(asyncio.sleep(_ERROR_BACKOFF_SECONDS), stop_event)
                continue

            if updates is None:
                break

            for update in updates:
                try:
                    offset = int(update["update_id"]) + 1
                except (KeyError, TypeError, ValueError):
                    continue
                await handle_update(
                    state,
                    messenger,
                    update,
                    allowed_chats=allowed_chats,
                    startup_ts=startup_ts,
                )
    finally:
        with contextlib.suppress(Exception):
            await client.aclose()
        logger.info("Telegram poller stopped.")


@dataclass
class TelegramBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Failed to signal Telegram stop (loop closed).", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_telegram_in_background(state: AppState) -> TelegramBackgroundRunner | None:
    """
    Start the Telegram poller in a background thread with its own event loop,
    so the blocking console REPL can run in parallel.
    """
    settings = state.settings
    if not getattr(settings, "telegram_enabled", False):
        logger.info("Telegram connector disabled, not starting.")
        return None

    token = getattr(settings, "telegram_bot_token", None)
    if not token:
        logger.error("Telegram is enabled but TASKBOT_TELEGRAM_BOT_TOKEN is not set.")
        return None

    allowed = set(getattr(settings, "telegram_allowed_chats", []) or []) or None

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
            client = TelegramBotClient(
                token,
                api_base=getattr(settings, "telegram_api_base", "https://api.telegram.org"),
                poll_timeout=getattr(settings, "telegram_poll_timeout", 10.0),
            )
            loop.run_until_complete(run_telegram_bot(state, client, stop_event, allowed_chats=allowed))
        except Exception:
            logger.exception("Telegram connector crashed.")
        finally:
            loop.close()

    t = threading.Thread(target=runner, name="telegram-poller", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Telegram thread did not initialize properly.")
        return None

    logger.info("Telegram background thread started.")
    return TelegramBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
