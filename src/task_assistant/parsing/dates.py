# src/task_assistant/parsing/dates.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.errors import InvalidDateFormatError, InvalidInputError

logger = logging.getLogger(__name__)

# Priority order matters: "01/02/2003" is DD/MM/YYYY (1 Feb), never MM/DD/YYYY.
DATE_FORMATS: tuple[tuple[str, str], ...] = (
    ("YYYY-MM-DD", "%Y-%m-%d"),
    ("DD.MM.YYYY", "%d.%m.%Y"),
    ("DD/MM/YYYY", "%d/%m/%Y"),
    ("YYYY/MM/DD", "%Y/%m/%d"),
    ("DD-MM-YYYY", "%d-%m-%Y"),
    ("MM/DD/YYYY", "%m/%d/%Y"),
)

SUPPORTED_FORMATS: tuple[str, ...] = tuple(label for label, _ in DATE_FORMATS)

# Every supported layout is zero-padded: 4 + 2 + 2 digits and two separators.
_FIXED_WIDTH = 10


def end_of_day(value: datetime) -> datetime:
    """Local 23:59:59 on the calendar date of `value`."""
    return datetime(value.year, value.month, value.day, 23, 59, 59)


def parse_date(text: str) -> datetime:
    """
    Parse a deadline date token.

    The first matching format wins. The result is a naive local datetime at
    23:59:59 so the user gets the whole day.
    """
    raw = (text or "").strip()
    if not raw:
        raise InvalidInputError("empty date string")

    if len(raw) == _FIXED_WIDTH:
        for label, fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
            except ValueError:
                continue
            logger.debug("Parsed date %r as %s", raw, label)
            return end_of_day(parsed)

    raise InvalidDateFormatError(raw, SUPPORTED_FORMATS)
