"""
Command-input parsing.

Components:
- dates.py: deadline date tokens (fixed, ordered list of formats)
- args.py: quote-aware argument splitting
- commands.py: /add and /edit grammar, task ID parsing
"""

from .args import split_command_args
from .commands import TaskEdit, TaskInput, parse_add_command, parse_edit_command, parse_task_id
from .dates import SUPPORTED_FORMATS, parse_date

__all__ = [
    "SUPPORTED_FORMATS",
    "TaskEdit",
    "TaskInput",
    "parse_add_command",
    "parse_date",
    "parse_edit_command",
    "parse_task_id",
    "split_command_args",
]
