# src/task_assistant/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..core.errors import TaskValidationError, ValidationReason

MAX_DESCRIPTION_LENGTH = 1000


def now_local() -> datetime:
    """Current local time, truncated to the second precision the store keeps."""
    return datetime.now().replace(microsecond=0)


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Stored as the literal values below; nothing else is accepted.
    """

    ACTIVE = "active"
    DONE = "done"
    POSTPONED = "postponed"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        try:
            return cls(raw)
        except ValueError:
            raise TaskValidationError(
                ValidationReason.INVALID_STATUS,
                "status must be one of: " + ", ".join(s.value for s in cls),
            ) from None


@dataclass(slots=True)
class Task:
    user_id: int
    original_description: str
    processed_description: str | None = None
    deadline: datetime | None = None
    # None (or "") means "not set yet"; set_defaults() turns it into ACTIVE.
    status: TaskStatus | None = None

    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def validate(self) -> None:
        if self.user_id <= 0:
            raise TaskValidationError(
                ValidationReason.INVALID_USER, "user_id must be a positive integer"
            )

        description = self.original_description or ""
        if not description.strip():
            raise TaskValidationError(
                ValidationReason.EMPTY_DESCRIPTION, "original_description cannot be empty"
            )

        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise TaskValidationError(
                ValidationReason.DESCRIPTION_TOO_LONG,
                f"original_description cannot exceed {MAX_DESCRIPTION_LENGTH} characters",
            )

        if self.status:
            TaskStatus.parse(self.status)

    def set_defaults(self, now: datetime | None = None) -> None:
        now = now or now_local()
        if not self.status:
            self.status = TaskStatus.ACTIVE
        if self.created_at is None:
            self.created_at = now
        self.updated_at = now

    # ---- derived ----

    @property
    def has_deadline(self) -> bool:
        return self.deadline is not None

    @property
    def is_active(self) -> bool:
        return self.status == TaskStatus.ACTIVE

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    @property
    def is_postponed(self) -> bool:
        return self.status == TaskStatus.POSTPONED

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.deadline is None or self.is_done:
            return False
        return (now or datetime.now()) > self.deadline

    @property
    def effective_description(self) -> str:
        if self.processed_description:
            return self.processed_description
        return self.original_description
