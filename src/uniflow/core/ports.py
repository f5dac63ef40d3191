# src/uniflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/LLM providers swappable and makes testing easier.
"""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(slots=True, frozen=True)
class PromptSpec:
    """
    One request to the text-generation service.

    response_schema: JSON schema the reply must follow (None -> plain text).
    max_output_tokens / temperature: None -> provider default.
    """

    prompt: str
    system_instruction: str | None = None
    response_schema: dict[str, Any] | None = None
    max_output_tokens: int | None = None
    temperature: float | None = None


class LLMClient(Protocol):
    """Single-shot text generation. Raises on any failure."""

    def send(self, spec: PromptSpec) -> str: ...


class KeyValueSlot(Protocol):
    """One opaque text value: read it whole, overwrite it whole."""

    def load(self) -> str | None: ...
    def save(self, text: str) -> None: ...
