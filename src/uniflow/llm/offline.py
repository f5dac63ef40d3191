# src/uniflow/llm/offline.py

from __future__ import annotations

import json

from ..core.ports import PromptSpec


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Behavior:
    - Structured (subtask) requests -> a fixed JSON list of generic steps
    - Plain text (advice) requests -> a fixed study tip
    """

    STEPS = [
        "Skim the requirements and note what is being asked",
        "Gather the materials you need",
        "Do the first small piece for 25 minutes",
        "Review your work and list open questions",
    ]

    ADVICE = "Offline mode: start with your highest-priority task and work on it for 25 focused minutes."

    def send(self, spec: PromptSpec) -> str:
        if spec.response_schema is not None:
            return json.dumps(self.STEPS)
        return self.ADVICE
