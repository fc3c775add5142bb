# src/task_assistant/parsing/commands.py

"""
Parsers for the task commands.

Grammar:
    /add [<"description"> | <description words...>] [<ws> срок: <date-token>]
    /edit <id> [<"description"> | <description words...>] [<ws> срок: <date-token>]

The deadline keyword is a case-sensitive literal. The date token is a single
whitespace-free run, so dates containing spaces are not supported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..core.errors import (
    EmptyCommandError,
    EmptyDescriptionError,
    InvalidInputError,
    InvalidTaskIDError,
    MissingDescriptionError,
)
from .dates import parse_date

DEADLINE_KEYWORD = "срок:"

_DEADLINE_RE = re.compile(r"\s+" + re.escape(DEADLINE_KEYWORD) + r"\s*(\S+)")

_QUOTES = ('"', "'")

# ASCII digits only; ids are SQLite INTEGER (signed 64-bit).
_TASK_ID_RE = re.compile(r"[+-]?[0-9]+")
MAX_TASK_ID = 2**63 - 1


def _command_prefix_re(name: str) -> re.Pattern[str]:
    # "/add", "/add@my_bot" (Telegram group syntax); "/additional" is not a match.
    return re.compile(rf"^/{name}(?:@\w+)?(?=\s|$)", re.IGNORECASE)


_ADD_PREFIX_RE = _command_prefix_re("add")
_EDIT_PREFIX_RE = _command_prefix_re("edit")


@dataclass(slots=True, frozen=True)
class TaskInput:
    description: str
    deadline: datetime | None = None

    @property
    def has_deadline(self) -> bool:
        return self.deadline is not None


@dataclass(slots=True, frozen=True)
class TaskEdit:
    """Changes requested by /edit. None means "keep the current value"."""

    task_id: int
    description: str | None = None
    deadline: datetime | None = None


def _strip_prefix(pattern: re.Pattern[str], text: str) -> str:
    m = pattern.match(text)
    if m:
        return text[m.end() :].strip()
    return text


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        return text[1:-1]
    return text


def _extract_deadline(text: str) -> tuple[str, datetime | None]:
    """Remove every deadline clause from `text`; the first one sets the date."""
    m = _DEADLINE_RE.search(text)
    if not m:
        return text, None
    deadline = parse_date(m.group(1))
    return _DEADLINE_RE.sub("", text), deadline


def _clean_description(text: str) -> str:
    return _unquote(text.strip()).strip()


def parse_add_command(text: str) -> TaskInput:
    """Parse `/add ...` text (the `/add` token itself is optional)."""
    if not text or not text.strip():
        raise EmptyCommandError("empty command text")

    body = _strip_prefix(_ADD_PREFIX_RE, text.strip())
    if not body:
        raise MissingDescriptionError("missing task description")

    body, deadline = _extract_deadline(body)

    description = _clean_description(body)
    if not description:
        raise EmptyDescriptionError("task description cannot be empty")

    return TaskInput(description=description, deadline=deadline)


def parse_task_id(text: str) -> int:
    raw = (text or "").strip()
    if not raw:
        raise InvalidInputError("empty task ID")

    if not _TASK_ID_RE.fullmatch(raw):
        raise InvalidTaskIDError(f"invalid task ID format: {raw!r}")

    task_id = int(raw)
    if task_id > MAX_TASK_ID:
        raise InvalidTaskIDError(f"task ID out of range: {raw!r}")

    if task_id <= 0:
        raise InvalidTaskIDError("task ID must be positive")

    return task_id


def parse_edit_command(text: str) -> TaskEdit:
    """
    Parse `/edit <id> <description> [срок: <date>]`.

    Either part may be omitted, but not both: `/edit 3 срок: 2025-07-21`
    moves only the deadline.
    """
    if not text or not text.strip():
        raise EmptyCommandError("empty command text")

    body = _strip_prefix(_EDIT_PREFIX_RE, text.strip())
    parts = body.split(maxsplit=1)
    task_id = parse_task_id(parts[0] if parts else "")

    rest = parts[1] if len(parts) > 1 else ""
    if not rest.strip():
        raise MissingDescriptionError("missing task description")

    # Leading space so a clause right after the id still matches.
    rest, deadline = _extract_deadline(" " + rest)

    description = _clean_description(rest)
    if not description and deadline is None:
        raise EmptyDescriptionError("task description cannot be empty")

    return TaskEdit(task_id=task_id, description=description or None, deadline=deadline)
