# tests/test_dates.py

from __future__ import annotations

from datetime import datetime

import pytest

from task_assistant.core.errors import InvalidDateFormatError, InvalidInputError
from task_assistant.parsing.dates import SUPPORTED_FORMATS, parse_date


@pytest.mark.parametrize(
    "raw",
    ["2025-07-20", "20.07.2025", "20/07/2025", "2025/07/20", "20-07-2025"],
)
def test_parse_date_accepts_each_layout_at_end_of_day(raw: str) -> None:
    assert parse_date(raw) == datetime(2025, 7, 20, 23, 59, 59)


def test_parse_date_us_layout_when_day_first_is_impossible() -> None:
    assert parse_date("12/31/2025") == datetime(2025, 12, 31, 23, 59, 59)


def test_parse_date_ambiguous_slash_date_is_day_first() -> None:
    assert parse_date("01/02/2003") == datetime(2003, 2, 1, 23, 59, 59)


def test_parse_date_strips_surrounding_whitespace() -> None:
    assert parse_date("  2025-01-05 ") == datetime(2025, 1, 5, 23, 59, 59)


@pytest.mark.parametrize("raw", ["", "   "])
def test_parse_date_empty_input(raw: str) -> None:
    with pytest.raises(InvalidInputError):
        parse_date(raw)


@pytest.mark.parametrize("raw", ["tomorrow", "2025-13-01", "31.02.2025", "2025-7-20", "2025.07.20"])
def test_parse_date_rejects_unknown_or_impossible_dates(raw: str) -> None:
    with pytest.raises(InvalidDateFormatError) as exc:
        parse_date(raw)

    assert exc.value.value == raw
    assert exc.value.supported_formats == SUPPORTED_FORMATS


def test_supported_formats_are_listed_in_priority_order() -> None:
    assert SUPPORTED_FORMATS == (
        "YYYY-MM-DD",
        "DD.MM.YYYY",
        "DD/MM/YYYY",
        "YYYY/MM/DD",
        "DD-MM-YYYY",
        "MM/DD/YYYY",
    )
