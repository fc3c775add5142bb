# src/task_assistant/tasks/task_format.py

"""
Display layout for tasks and errors.

Glyphs and labels are part of the observable contract of the bot and must
stay byte-for-byte stable.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from ..core.errors import (
    EmptyCommandError,
    EmptyDescriptionError,
    EnhancerError,
    InvalidDateFormatError,
    InvalidInputError,
    InvalidTaskIDError,
    MissingDescriptionError,
    QuotaExceededError,
    TaskAssistantError,
    TaskNotFoundError,
    TaskValidationError,
    ValidationReason,
)
from .task_models import MAX_DESCRIPTION_LENGTH, Task, TaskStatus

LIST_GLYPH = "📋"
ERROR_GLYPH = "❌"
ACTIVE_GLYPH = "📝"
DONE_GLYPH = "✅"
POSTPONED_GLYPH = "⏸️"
OVERDUE_GLYPH = "🔴"
CLOCK_GLYPH = "⏰"
OVERDUE_MARKER = "❗ ПРОСРОЧЕНО"

NO_TASKS_TEXT = "Задач не найдено"
DEADLINE_LABEL = "Срок"
DEADLINE_FORMAT = "%d.%m.%Y"

GENERIC_ERROR_TEXT = "Произошла ошибка при обработке команды. Попробуйте позже."


def format_deadline(deadline: datetime) -> str:
    return deadline.strftime(DEADLINE_FORMAT)


def _status_glyph(task: Task, overdue: bool) -> str:
    status = task.status or TaskStatus.ACTIVE
    if status == TaskStatus.DONE:
        return DONE_GLYPH
    if status == TaskStatus.POSTPONED:
        return POSTPONED_GLYPH
    return OVERDUE_GLYPH if overdue else ACTIVE_GLYPH


def format_task_item(task: Task, number: int, now: datetime | None = None) -> str:
    overdue = task.is_overdue(now)
    line = f"{_status_glyph(task, overdue)} {number}. {task.effective_description} (ID: {task.id})"

    if task.deadline is None:
        return line

    deadline_line = f"\n   {CLOCK_GLYPH} {DEADLINE_LABEL}: {format_deadline(task.deadline)}"
    # Overdue is only surfaced for active tasks.
    if overdue and (task.status or TaskStatus.ACTIVE) == TaskStatus.ACTIVE:
        deadline_line += f" {OVERDUE_MARKER}"
    return line + deadline_line


def format_task_list(tasks: Sequence[Task], title: str, now: datetime | None = None) -> str:
    banner = f"{LIST_GLYPH} {title}\n\n"
    if not tasks:
        return f"{banner}{ERROR_GLYPH} {NO_TASKS_TEXT}"

    now = now or datetime.now()
    return banner + "\n".join(format_task_item(t, i, now) for i, t in enumerate(tasks, start=1))


def format_error(text: str) -> str:
    return f"{ERROR_GLYPH} {text}"


_VALIDATION_TEXT = {
    ValidationReason.INVALID_USER: "Не удалось определить пользователя.",
    ValidationReason.EMPTY_DESCRIPTION: "Описание задачи не может быть пустым.",
    ValidationReason.DESCRIPTION_TOO_LONG: (
        f"Описание задачи слишком длинное (максимум {MAX_DESCRIPTION_LENGTH} символов)."
    ),
    ValidationReason.INVALID_STATUS: "Недопустимый статус. Возможные: active, done, postponed.",
    ValidationReason.INVALID_REQUESTS_COUNT: "Некорректный счётчик запросов.",
}


def describe_error(err: TaskAssistantError) -> str:
    """User-facing text (without the error glyph) for a core error."""
    if isinstance(err, InvalidDateFormatError):
        return (
            f"Неверный формат даты: {err.value}. "
            f"Поддерживаемые форматы: {', '.join(err.supported_formats)}"
        )
    if isinstance(err, EmptyCommandError):
        return "Пустая команда. Используйте /help."
    if isinstance(err, MissingDescriptionError):
        return 'Укажите описание задачи. Пример: /add "Купить продукты" срок: 2025-07-20'
    if isinstance(err, EmptyDescriptionError):
        return "Описание задачи не может быть пустым."
    if isinstance(err, InvalidTaskIDError):
        return "Неверный ID задачи. ID должен быть положительным числом."
    if isinstance(err, InvalidInputError):
        return "Не хватает аргументов. Используйте /help."
    if isinstance(err, TaskValidationError):
        return _VALIDATION_TEXT.get(err.reason, "Некорректные данные задачи.")
    if isinstance(err, TaskNotFoundError):
        return f"Задача с ID {err.task_id} не найдена."
    if isinstance(err, QuotaExceededError):
        return f"Лимит запросов исчерпан ({err.limit} в месяц). Попробуйте в следующем месяце."
    if isinstance(err, EnhancerError):
        return "Не удалось улучшить описание задачи. Попробуйте позже."
    return GENERIC_ERROR_TEXT
