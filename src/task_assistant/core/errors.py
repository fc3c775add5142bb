# src/task_assistant/core/errors.py

"""
Error kinds raised by the core.

Parsing and validation errors are user errors: connectors show them as a
corrective message and never retry. StorageError wraps any driver failure;
its text is logged but never shown to the user.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum


class TaskAssistantError(Exception):
    """Base class for every error the core raises on purpose."""


# ---- parsing ----


class InputError(TaskAssistantError):
    """Free-text command input could not be parsed."""


class InvalidInputError(InputError):
    pass


class EmptyCommandError(InputError):
    pass


class MissingDescriptionError(InputError):
    pass


class EmptyDescriptionError(InputError):
    pass


class InvalidTaskIDError(InputError):
    pass


class InvalidDateFormatError(InputError):
    def __init__(self, value: str, supported_formats: Sequence[str]) -> None:
        self.value = value
        self.supported_formats = tuple(supported_formats)
        super().__init__(
            f"invalid date format {value!r}. Supported formats: {', '.join(self.supported_formats)}"
        )


# ---- entity validation ----


class ValidationReason(StrEnum):
    INVALID_USER = "invalid_user"
    EMPTY_DESCRIPTION = "empty_description"
    DESCRIPTION_TOO_LONG = "description_too_long"
    INVALID_STATUS = "invalid_status"
    INVALID_REQUESTS_COUNT = "invalid_requests_count"


class TaskValidationError(TaskAssistantError):
    def __init__(self, reason: ValidationReason, message: str) -> None:
        self.reason = reason
        super().__init__(message)


# ---- storage ----


class TaskNotFoundError(TaskAssistantError):
    def __init__(self, task_id: int | None) -> None:
        self.task_id = task_id
        super().__init__(f"task with id {task_id} not found")


class StorageError(TaskAssistantError):
    """Underlying store failure (I/O, constraint violation, ...)."""


# ---- quota / LLM ----


class QuotaExceededError(TaskAssistantError):
    def __init__(self, user_id: int, limit: int) -> None:
        self.user_id = user_id
        self.limit = limit
        super().__init__(f"user {user_id} exhausted the monthly limit of {limit} requests")


class EnhancerError(TaskAssistantError):
    """The LLM could not produce an enhanced description."""
