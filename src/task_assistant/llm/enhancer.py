# src/task_assistant/llm/enhancer.py

"""
LLM rewrite of task descriptions.

The result goes to Task.processed_description; the user-authored
original_description is never touched. Every call is metered against the
user's monthly APILimit before the LLM is contacted.
"""

from __future__ import annotations

import logging

from ..core.errors import EnhancerError
from ..core.ports import LimitRepo, LLMClient, TaskRepo
from ..tasks.task_models import MAX_DESCRIPTION_LENGTH, Task
from .client import friendly_llm_error_message

logger = logging.getLogger(__name__)

ENHANCE_SYSTEM_PROMPT = (
    "You are a task description editor for a personal to-do assistant.\n"
    "Rewrite the user's task as one short, concrete, actionable sentence in the "
    "same language as the input. Keep every date, name and number. "
    "Reply with the rewritten task only: no quotes, no preamble, no markdown."
)


def _clean(text: str) -> str:
    out = text.strip().strip('"').strip("'").strip()
    return out[:MAX_DESCRIPTION_LENGTH]


def enhance_description(llm: LLMClient, description: str) -> str:
    messages = [{"role": "user", "content": description}]
    try:
        reply = "".join(llm.stream_chat(messages, ENHANCE_SYSTEM_PROMPT))
    except RuntimeError as e:
        logger.info("LLM enhance failed: %s", friendly_llm_error_message(e))
        raise EnhancerError(friendly_llm_error_message(e)) from e

    cleaned = _clean(reply)
    if not cleaned:
        raise EnhancerError("model produced no content")
    return cleaned


def enhance_task(
    task_store: TaskRepo,
    limit_store: LimitRepo,
    llm: LLMClient,
    task: Task,
) -> Task:
    """Consume one quota unit, rewrite the description and persist it."""
    limit_store.consume(task.user_id)

    task.processed_description = enhance_description(llm, task.original_description)
    updated = task_store.update(task)
    logger.info("Task %s enhanced for user_id=%s", task.id, task.user_id)
    return updated
