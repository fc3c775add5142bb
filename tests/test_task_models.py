# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime

import pytest

from task_assistant.core.errors import TaskValidationError, ValidationReason
from task_assistant.tasks.task_models import MAX_DESCRIPTION_LENGTH, Task, TaskStatus


def _reason(task: Task) -> ValidationReason:
    with pytest.raises(TaskValidationError) as exc:
        task.validate()
    return exc.value.reason


@pytest.mark.parametrize("user_id", [0, -1])
def test_validate_rejects_non_positive_user(user_id: int) -> None:
    assert _reason(Task(user_id=user_id, original_description="x")) == ValidationReason.INVALID_USER


@pytest.mark.parametrize("desc", ["", "   \t"])
def test_validate_rejects_blank_description(desc: str) -> None:
    assert _reason(Task(user_id=1, original_description=desc)) == ValidationReason.EMPTY_DESCRIPTION


def test_validate_length_boundary_counts_characters() -> None:
    Task(user_id=1, original_description="я" * MAX_DESCRIPTION_LENGTH).validate()

    too_long = Task(user_id=1, original_description="я" * (MAX_DESCRIPTION_LENGTH + 1))
    assert _reason(too_long) == ValidationReason.DESCRIPTION_TOO_LONG


def test_validate_user_is_checked_before_description() -> None:
    assert _reason(Task(user_id=0, original_description="")) == ValidationReason.INVALID_USER


def test_validate_status() -> None:
    Task(user_id=1, original_description="x", status=TaskStatus.DONE).validate()
    Task(user_id=1, original_description="x", status="postponed").validate()
    Task(user_id=1, original_description="x", status="").validate()  # type: ignore[arg-type]

    bad = Task(user_id=1, original_description="x", status="archived")  # type: ignore[arg-type]
    assert _reason(bad) == ValidationReason.INVALID_STATUS


def test_set_defaults_fills_status_and_timestamps() -> None:
    now = datetime(2025, 7, 1, 12, 0, 0)
    task = Task(user_id=1, original_description="x")
    task.set_defaults(now)

    assert task.status == TaskStatus.ACTIVE
    assert task.created_at == now
    assert task.updated_at == now


def test_set_defaults_keeps_existing_values() -> None:
    created = datetime(2025, 1, 1)
    now = datetime(2025, 7, 1, 12, 0, 0)
    task = Task(user_id=1, original_description="x", status=TaskStatus.DONE, created_at=created)
    task.set_defaults(now)

    assert task.status == TaskStatus.DONE
    assert task.created_at == created
    assert task.updated_at == now


def test_status_predicates() -> None:
    task = Task(user_id=1, original_description="x", status=TaskStatus.POSTPONED)
    assert task.is_postponed
    assert not task.is_active
    assert not task.is_done
    assert not task.has_deadline


def test_is_overdue() -> None:
    deadline = datetime(2025, 7, 20, 23, 59, 59)
    task = Task(user_id=1, original_description="x", deadline=deadline, status=TaskStatus.ACTIVE)

    assert task.is_overdue(datetime(2025, 7, 21))
    assert not task.is_overdue(deadline)
    assert not task.is_overdue(datetime(2025, 7, 20, 12))

    task.status = TaskStatus.DONE
    assert not task.is_overdue(datetime(2025, 7, 21))


def test_task_without_deadline_is_never_overdue() -> None:
    assert not Task(user_id=1, original_description="x").is_overdue(datetime(2100, 1, 1))


def test_effective_description_prefers_processed() -> None:
    task = Task(user_id=1, original_description="купить молоко")
    assert task.effective_description == "купить молоко"

    task.processed_description = "Купить молоко в магазине"
    assert task.effective_description == "Купить молоко в магазине"

    task.processed_description = ""
    assert task.effective_description == "купить молоко"


def test_set_defaults_treats_empty_status_as_unset() -> None:
    task = Task(user_id=1, original_description="x", status="")  # type: ignore[arg-type]
    task.set_defaults(datetime(2025, 7, 1))
    assert task.status == TaskStatus.ACTIVE
