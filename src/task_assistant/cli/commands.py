# src/task_assistant/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.errors import StorageError, TaskAssistantError
from ..core.state import AppState
from ..llm.enhancer import enhance_task
from ..parsing import SUPPORTED_FORMATS, parse_task_id, split_command_args
from ..tasks.task_api import (
    LIST_TITLES,
    ListScope,
    create_task,
    delete_task,
    edit_task,
    get_user_task,
    list_tasks,
    set_task_status,
)
from ..tasks.task_format import (
    DONE_GLYPH,
    GENERIC_ERROR_TEXT,
    POSTPONED_GLYPH,
    describe_error,
    format_error,
    format_task_item,
    format_task_list,
)
from ..tasks.task_models import TaskStatus

CommandHandler3 = Callable[[AppState, list[str], int], str]
CommandHandler4 = Callable[[AppState, list[str], int, str], str]
CommandHandler = CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Slash-command registry used by connectors (/add, /list, ...).

    Handlers take (state, args, user_id) or (state, args, user_id, text), where
    args come from the quote-aware splitter and text is the full command line.
    Core errors are turned into user-facing replies here; nothing a handler
    raises on purpose reaches the connector.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, user_id: int) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        line = line.strip()
        if not line.startswith("/"):
            return None

        parts = split_command_args(line[1:])
        if not parts:
            return "Пустая команда. Используйте /help для просмотра доступных команд."

        # "/list@my_bot" in Telegram groups.
        name = parts[0].split("@", 1)[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"❓ Неизвестная команда: /{name}. Используйте /help для просмотра доступных команд."

        logger.info("User %s: /%s", user_id, name)

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 4

        try:
            if nparams >= 4:
                h4 = cast(CommandHandler4, handler)
                return h4(state, args, user_id, line)
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, user_id)
        except StorageError:
            logger.exception("Storage failure in /%s (user_id=%s)", name, user_id)
            return format_error(GENERIC_ERROR_TEXT)
        except TaskAssistantError as e:
            logger.info("User %s: /%s rejected: %s", user_id, name, e)
            return format_error(describe_error(e))

    def build_help(self) -> str:
        lines = ["📚 Справка по командам:", ""]
        for name, help_text in self._help.items():
            lines.append(f"/{name} - {help_text}")
        lines.append("")
        lines.append("📊 Форматы дат: " + ", ".join(SUPPORTED_FORMATS))
        return "\n".join(lines)


registry = CommandRegistry()


def _task_id_arg(args: list[str]) -> int:
    return parse_task_id(args[0] if args else "")


def cmd_start(state: AppState, args: list[str], user_id: int) -> str:
    return (
        "🤖 Добро пожаловать в Task Assistant Bot!\n\n"
        "Я помогу вам управлять задачами.\n"
        '📝 /add "Описание задачи" срок: 2025-07-15 - добавить задачу\n'
        "📋 /list - показать активные задачи\n"
        "❓ /help - показать все команды"
    )


def cmd_help(state: AppState, args: list[str], user_id: int) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], user_id: int, text: str) -> str:
    task = create_task(state, user_id, text)
    return f"{DONE_GLYPH} Задача добавлена!\n\n{format_task_item(task, 1)}"


def cmd_list(state: AppState, args: list[str], user_id: int) -> str:
    """
    /list            -> active tasks (by deadline, else creation time)
    /list all        -> every task, newest first
    /list done       -> done tasks
    /list postponed  -> postponed tasks
    /list overdue    -> active tasks past their deadline
    """
    raw = args[0].lower() if args else ListScope.ACTIVE.value
    try:
        scope = ListScope(raw)
    except ValueError:
        return "Использование: /list [all | done | postponed | overdue]"

    tasks = list_tasks(state, user_id, scope)
    return format_task_list(tasks, LIST_TITLES[scope])


def cmd_done(state: AppState, args: list[str], user_id: int) -> str:
    task = set_task_status(state, user_id, _task_id_arg(args), TaskStatus.DONE)
    return f"{DONE_GLYPH} Задача {task.id} отмечена как выполненная."


def cmd_postpone(state: AppState, args: list[str], user_id: int) -> str:
    task = set_task_status(state, user_id, _task_id_arg(args), TaskStatus.POSTPONED)
    return f"{POSTPONED_GLYPH} Задача {task.id} отложена."


def cmd_resume(state: AppState, args: list[str], user_id: int) -> str:
    task = set_task_status(state, user_id, _task_id_arg(args), TaskStatus.ACTIVE)
    return f"📝 Задача {task.id} снова активна."


def cmd_edit(state: AppState, args: list[str], user_id: int, text: str) -> str:
    task = edit_task(state, user_id, text)
    return f"✏️ Задача обновлена!\n\n{format_task_item(task, 1)}"


def cmd_delete(state: AppState, args: list[str], user_id: int) -> str:
    task_id = _task_id_arg(args)
    delete_task(state, user_id, task_id)
    return f"🗑 Задача {task_id} удалена."


def cmd_enhance(state: AppState, args: list[str], user_id: int) -> str:
    task = get_user_task(state, user_id, _task_id_arg(args))
    task = enhance_task(state.task_store, state.limit_store, state.llm, task)
    remaining = state.limit_store.get(user_id).remaining()
    tail = "" if remaining is None else f"\n\nОсталось запросов в этом месяце: {remaining}"
    return f"✨ Описание улучшено!\n\n{format_task_item(task, 1)}{tail}"


def cmd_stats(state: AppState, args: list[str], user_id: int) -> str:
    counts = state.task_store.count_by_status(user_id)
    overdue = len(state.task_store.list_overdue(user_id))
    remaining = state.limit_store.get(user_id).remaining()
    quota = "без ограничений" if remaining is None else str(remaining)
    return (
        "📊 Статистика:\n"
        f"  Активные: {counts[TaskStatus.ACTIVE]}\n"
        f"  Выполненные: {counts[TaskStatus.DONE]}\n"
        f"  Отложенные: {counts[TaskStatus.POSTPONED]}\n"
        f"  Просроченные: {overdue}\n"
        f"  Запросов на улучшение осталось: {quota}"
    )


registry.register("start", cmd_start, help_text="начать работу с ботом")
registry.register("help", cmd_help, help_text="показать эту справку", aliases=["h", "?"])
registry.register("add", cmd_add, help_text='добавить задачу: /add "Описание" срок: 2025-07-15')
registry.register("list", cmd_list, help_text="показать задачи: /list [all | done | postponed | overdue]")
registry.register("done", cmd_done, help_text="отметить задачу как выполненную: /done <id>")
registry.register("postpone", cmd_postpone, help_text="отложить задачу: /postpone <id>")
registry.register("resume", cmd_resume, help_text="вернуть задачу в активные: /resume <id>")
registry.register("edit", cmd_edit, help_text="редактировать задачу: /edit <id> новое описание срок: 2025-07-25")
registry.register("delete", cmd_delete, help_text="удалить задачу: /delete <id>")
registry.register("enhance", cmd_enhance, help_text="улучшить описание задачи с помощью ИИ: /enhance <id>")
registry.register("stats", cmd_stats, help_text="статистика задач и лимитов")
