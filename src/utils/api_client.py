"""Singleton OpenAI wrapper with retry, structured JSON output, and usage tracking."""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when the generative text service cannot be reached after retries."""


class LLMClient:
    """Singleton OpenAI chat-completion wrapper.

    * ``chat()``       → plain text response
    * ``chat_json()``  → schema-constrained response parsed to ``dict``
    * Automatic retry with exponential back-off (``LLM_MAX_RETRIES`` attempts)
    * Per-session token usage tracking
    """

    _instance: Optional["LLMClient"] = None

    def __new__(cls) -> "LLMClient":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialised = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialised:
            return
        from config import settings

        self._settings = settings
        self._client: Any = None
        self._total_input_tokens: int = 0
        self._total_output_tokens: int = 0
        self._initialised = True

    # ── lazy OpenAI client ────────────────────────────────
    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                from openai import OpenAI

                kwargs: Dict[str, Any] = {"api_key": self._settings.OPENAI_API_KEY}
                if self._settings.OPENAI_BASE_URL:
                    kwargs["base_url"] = self._settings.OPENAI_BASE_URL
                self._client = OpenAI(**kwargs)
            except Exception as exc:
                logger.error("Failed to create OpenAI client: %s", exc)
                raise
        return self._client

    # ── public API ────────────────────────────────────────
    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
    ) -> str:
        """Send a chat completion request and return the assistant message text.

        When *json_schema* is given the service is asked for a structured
        response matching it. Retries with exponential back-off on any error.
        """
        temperature = temperature if temperature is not None else self._settings.OPENAI_TEMPERATURE
        max_tokens = max_tokens or self._settings.OPENAI_MAX_TOKENS

        kwargs: Dict[str, Any] = {
            "model": self._settings.OPENAI_MODEL,
            "messages": messages,
            "temperature": temperature,
            "top_p": self._settings.OPENAI_TOP_P,
            "max_tokens": max_tokens,
        }
        if json_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": json_schema, "strict": True},
            }

        attempts = max(1, self._settings.LLM_MAX_RETRIES)
        last_exc: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            try:
                response = self.client.chat.completions.create(**kwargs)
                usage = response.usage
                if usage:
                    self._total_input_tokens += usage.prompt_tokens
                    self._total_output_tokens += usage.completion_tokens
                return response.choices[0].message.content or ""
            except Exception as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                wait = self._settings.LLM_RETRY_BASE_DELAY * 2 ** (attempt - 1)
                logger.warning("LLM call attempt %d failed (%s). Retrying in %.1fs…", attempt, exc, wait)
                time.sleep(wait)

        raise LLMError(f"LLM call failed after {attempts} attempts: {last_exc}")

    def chat_json(
        self,
        messages: List[Dict[str, str]],
        *,
        json_schema: Dict[str, Any],
        schema_name: str = "response",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Any:
        """Like ``chat()`` but constrained to *json_schema* and parsed with ``json.loads``."""
        raw = self.chat(
            messages,
            temperature=temperature,
            max_tokens=max_tokens,
            json_schema=json_schema,
            schema_name=schema_name,
        )
        return json.loads(raw.strip())

    # ── usage tracking ────────────────────────────────────
    @property
    def total_input_tokens(self) -> int:
        return self._total_input_tokens

    @property
    def total_output_tokens(self) -> int:
        return self._total_output_tokens

    def reset_usage(self) -> None:
        self._total_input_tokens = 0
        self._total_output_tokens = 0


# Convenience module-level singleton
llm_client = LLMClient()
