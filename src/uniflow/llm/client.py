# src/uniflow/llm/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..core.ports import PromptSpec

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return True
    return exc.__class__.__name__ in {"Timeout", "ConnectTimeout", "ReadTimeout", "WriteTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible SDK uses NotFoundError for HTTP 404 (unknown model)
    return isinstance(exc, openai.NotFoundError)


def classify_llm_error(exc: Exception) -> str:
    """Short label for logs: auth / rate_limit / network / not_found / other."""
    if _is_auth_error(exc):
        return "auth"
    if _is_rate_limit_error(exc):
        return "rate_limit"
    if _is_connection_error(exc):
        return "network"
    if _is_not_found_error(exc):
        return "not_found"
    return "other"


def friendly_llm_error_message(err: Exception) -> str:
    kind = classify_llm_error(err)
    if kind == "auth":
        return "LLM authentication failed. Check UNIFLOW_OPENROUTER_API_KEY in .env."
    if kind == "rate_limit":
        return "LLM is rate-limited. Try again later."
    if kind == "network":
        return "LLM network/timeout error. Try again later."
    if kind == "not_found":
        return "LLM model not available. Check UNIFLOW_LLM_MODEL in .env."
    return str(err).strip() or "LLM error."


def _schema_response_format(schema: dict[str, Any]) -> dict[str, Any]:
    """
    OpenAI-style structured output.

    The API wants an object at the root, so a bare array schema is wrapped
    under "items"; callers accept both shapes back.
    """
    if schema.get("type") != "object":
        schema = {
            "type": "object",
            "properties": {"items": schema},
            "required": ["items"],
            "additionalProperties": False,
        }
    return {
        "type": "json_schema",
        "json_schema": {"name": "response", "strict": True, "schema": schema},
    }


class OpenRouterLLMClient:
    """
    OpenAI-compatible chat completions client (OpenRouter by default).

    One request per send(): automatic retries are disabled in the SDK.
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = getattr(settings, "openrouter_base_url", "") or ""
        model = getattr(settings, "llm_model", "") or ""

        if not api_key or not str(api_key).strip():
            raise RuntimeError("LLM API key is not set. Set UNIFLOW_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("LLM base URL is not set. Set UNIFLOW_OPENROUTER_BASE_URL in your .env.")
        if not model.strip():
            raise RuntimeError("LLM model is not set. Set UNIFLOW_LLM_MODEL in your .env.")

        connect_s = float(getattr(settings, "llm_connect_timeout", 5.0))
        read_s = float(getattr(settings, "llm_read_timeout", 25.0))

        self.model = model.strip()
        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._client = OpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s),
            max_retries=0,
        )

    def send(self, spec: PromptSpec) -> str:
        messages: list[dict[str, str]] = []
        if spec.system_instruction:
            messages.append({"role": "system", "content": spec.system_instruction})
        messages.append({"role": "user", "content": spec.prompt})

        kwargs: dict[str, Any] = {}
        if spec.max_output_tokens is not None:
            kwargs["max_tokens"] = int(spec.max_output_tokens)
        if spec.temperature is not None:
            kwargs["temperature"] = float(spec.temperature)
        if spec.response_schema is not None:
            kwargs["response_format"] = _schema_response_format(spec.response_schema)

        logger.debug("LLM: request model=%s structured=%s", self.model, spec.response_schema is not None)
        resp = self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            extra_headers=self._headers or None,
            **kwargs,
        )

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError):
            content = None
        return content or ""
