# src/task_assistant/tasks/task_api.py

"""
High-level task operations used by chat commands.

Each helper scopes the store to the sender: a task that belongs to another
user is reported as not found.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.errors import TaskNotFoundError
from ..core.state import AppState
from ..parsing import parse_add_command, parse_edit_command
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class ListScope(StrEnum):
    ACTIVE = "active"
    ALL = "all"
    DONE = "done"
    POSTPONED = "postponed"
    OVERDUE = "overdue"


LIST_TITLES = {
    ListScope.ACTIVE: "Активные задачи",
    ListScope.ALL: "Все задачи",
    ListScope.DONE: "Выполненные задачи",
    ListScope.POSTPONED: "Отложенные задачи",
    ListScope.OVERDUE: "Просроченные задачи",
}


def create_task(state: AppState, user_id: int, text: str) -> Task:
    """Parse `/add ...` text and store the task."""
    parsed = parse_add_command(text)
    task = Task(
        user_id=user_id,
        original_description=parsed.description,
        deadline=parsed.deadline,
    )
    stored = state.task_store.add(task)
    logger.info("User %s: add task id=%s deadline=%s", user_id, stored.id, stored.deadline)
    return stored


def get_user_task(state: AppState, user_id: int, task_id: int) -> Task:
    task = state.task_store.get(task_id)
    if task.user_id != user_id:
        raise TaskNotFoundError(task_id)
    return task


def set_task_status(state: AppState, user_id: int, task_id: int, status: TaskStatus) -> Task:
    task = get_user_task(state, user_id, task_id)
    task.status = status
    updated = state.task_store.update(task)
    logger.info("User %s: task id=%s -> %s", user_id, task_id, status.value)
    return updated


def edit_task(state: AppState, user_id: int, text: str) -> Task:
    """
    Apply `/edit <id> ...`.

    A new description replaces the original one and drops the stale
    processed description.
    """
    edit = parse_edit_command(text)
    task = get_user_task(state, user_id, edit.task_id)

    if edit.description is not None:
        task.original_description = edit.description
        task.processed_description = None
    if edit.deadline is not None:
        task.deadline = edit.deadline

    updated = state.task_store.update(task)
    logger.info("User %s: edit task id=%s", user_id, edit.task_id)
    return updated


def delete_task(state: AppState, user_id: int, task_id: int) -> None:
    get_user_task(state, user_id, task_id)
    state.task_store.delete(task_id)
    logger.info("User %s: delete task id=%s", user_id, task_id)


def list_tasks(state: AppState, user_id: int, scope: ListScope = ListScope.ACTIVE) -> list[Task]:
    store = state.task_store
    if scope == ListScope.ACTIVE:
        return store.list_active(user_id)
    if scope == ListScope.ALL:
        return store.list_by_user(user_id)
    if scope == ListScope.OVERDUE:
        return store.list_overdue(user_id)
    return store.list_by_status(user_id, TaskStatus(scope.value))
