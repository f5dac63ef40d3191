# src/uniflow/core/advisor.py

"""
Advisory calls to the text-generation service.

Both functions are stateless and read-only: they never touch the store.
Every failure degrades to a fixed value; nothing is retried.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from typing import Any

from ..llm.client import classify_llm_error
from ..tasks.task_models import Task
from .ports import LLMClient, PromptSpec

logger = logging.getLogger(__name__)

SUBTASK_SYSTEM_INSTRUCTION = (
    "You are an expert academic productivity coach. Your goal is to reduce student "
    "overwhelm by breaking big tasks into small, manageable wins."
)

SUBTASK_SCHEMA: dict[str, Any] = {"type": "array", "items": {"type": "string"}}

ALL_CAUGHT_UP = "You're all caught up! Great job. Time to relax or get ahead on reading."
EMPTY_ADVICE_FALLBACK = "Focus on one thing at a time. You got this."
ADVICE_ERROR_FALLBACK = "Keep pushing forward!"

DEFAULT_ADVICE_TASK_LIMIT = 10
DEFAULT_ADVICE_MAX_TOKENS = 60
DEFAULT_ADVICE_TEMPERATURE = 0.7


def build_subtask_prompt(title: str, description: str | None = None) -> str:
    lines = [f'I am a college student. I have a task: "{title}".']
    if description:
        lines.append(f'Description: "{description}"')
    lines.append("")
    lines.append(
        "Please break this task down into 3 to 6 smaller, concrete, actionable steps "
        "that I can check off."
    )
    lines.append("Keep them concise.")
    return "\n".join(lines)


def build_advice_prompt(tasks: Sequence[Task], limit: int = DEFAULT_ADVICE_TASK_LIMIT) -> str | None:
    """Prompt from the first `limit` incomplete tasks; None when nothing is pending."""
    pending = [f"{t.title} (Priority: {t.priority.value})" for t in tasks if not t.completed][: max(0, limit)]
    if not pending:
        return None
    return (
        "Here are my current tasks:\n"
        f"{json.dumps(pending, ensure_ascii=False)}\n"
        "\n"
        "Give me one sentence of specific, punchy advice on what to tackle first or how to start."
    )


def _extract_json(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.strip("`")
        if raw.lower().startswith("json"):
            raw = raw[4:]
        raw = raw.strip()
    return raw


def parse_subtask_titles(raw: str) -> list[str]:
    """
    Accept a JSON array of strings, or an object wrapping one under
    "items"/"subtasks". Raises ValueError on anything else.
    """
    data = json.loads(_extract_json(raw))
    if isinstance(data, dict):
        for key in ("items", "subtasks", "steps"):
            if isinstance(data.get(key), list):
                data = data[key]
                break
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON list, got {type(data).__name__}")
    return [s.strip() for s in data if isinstance(s, str) and s.strip()]


async def generate_subtasks(llm: LLMClient, title: str, description: str | None = None) -> list[str]:
    """
    Ask the service for 3-6 concrete steps.

    Returns [] on any failure; callers treat that as "nothing produced".
    """
    spec = PromptSpec(
        prompt=build_subtask_prompt(title, description),
        system_instruction=SUBTASK_SYSTEM_INSTRUCTION,
        response_schema=SUBTASK_SCHEMA,
    )
    try:
        raw = await asyncio.to_thread(llm.send, spec)
    except Exception as e:
        logger.warning("Subtask generation failed (%s): %s", classify_llm_error(e), e)
        return []

    if not raw or not raw.strip():
        return []

    try:
        titles = parse_subtask_titles(raw)
    except Exception:
        logger.warning("Subtask generation returned malformed JSON. Raw=%r", raw[:500])
        return []

    logger.debug("Subtask generation produced %d steps", len(titles))
    return titles


async def get_smart_advice(
    llm: LLMClient,
    tasks: Sequence[Task],
    *,
    limit: int = DEFAULT_ADVICE_TASK_LIMIT,
    max_output_tokens: int = DEFAULT_ADVICE_MAX_TOKENS,
    temperature: float = DEFAULT_ADVICE_TEMPERATURE,
) -> str:
    prompt = build_advice_prompt(tasks, limit)
    if prompt is None:
        return ALL_CAUGHT_UP

    spec = PromptSpec(prompt=prompt, max_output_tokens=max_output_tokens, temperature=temperature)
    try:
        raw = await asyncio.to_thread(llm.send, spec)
    except Exception as e:
        logger.warning("Smart advice failed (%s): %s", classify_llm_error(e), e)
        return ADVICE_ERROR_FALLBACK

    text = (raw or "").strip()
    return text or EMPTY_ADVICE_FALLBACK
