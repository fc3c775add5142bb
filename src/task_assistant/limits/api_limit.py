# src/task_assistant/limits/api_limit.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.errors import TaskValidationError, ValidationReason

FREE_REQUESTS_PER_PERIOD = 10


def next_period_start(now: datetime) -> datetime:
    """Midnight on the first day of the month after `now`."""
    if now.month == 12:
        return datetime(now.year + 1, 1, 1)
    return datetime(now.year, now.month + 1, 1)


@dataclass(slots=True)
class APILimit:
    """
    Per-user monthly quota for LLM requests.

    Premium users are unlimited. Once reset_date has passed, a fresh period
    begins implicitly: the user is allowed again and the counter is reset on
    the next recorded request.
    """

    user_id: int
    requests_count: int = 0
    reset_date: datetime | None = None
    is_premium: bool = False
    limit: int = FREE_REQUESTS_PER_PERIOD

    def validate(self) -> None:
        if self.user_id <= 0:
            raise TaskValidationError(
                ValidationReason.INVALID_USER, "user_id must be a positive integer"
            )
        if self.requests_count < 0:
            raise TaskValidationError(
                ValidationReason.INVALID_REQUESTS_COUNT, "requests_count cannot be negative"
            )

    def should_reset(self, now: datetime | None = None) -> bool:
        if self.reset_date is None:
            return True
        return (now or datetime.now()) > self.reset_date

    def can_make_request(self, now: datetime | None = None) -> bool:
        if self.is_premium:
            return True
        if self.should_reset(now):
            return True
        return self.requests_count < self.limit

    def reset(self, now: datetime | None = None) -> None:
        self.requests_count = 0
        self.reset_date = next_period_start(now or datetime.now())

    def increment(self) -> None:
        self.requests_count += 1

    def remaining(self, now: datetime | None = None) -> int | None:
        """Requests left in the current period; None means unlimited."""
        if self.is_premium:
            return None
        if self.should_reset(now):
            return self.limit
        return max(0, self.limit - self.requests_count)
