"""Single non-spoiling hint per scene, generated as free text."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from config import settings
from src.engine.state import Turn
from src.nlg.prompt_templates import HINT_SYSTEM_PROMPT, build_hint_prompt
from src.nlg.scene_schema import Scene
from src.utils.api_client import LLMClient, llm_client

logger = logging.getLogger(__name__)

HINT_UNAVAILABLE = "No clues can be drawn out right now. Trust your instincts."


class HintGenerator:
    """Ask the LLM for a cryptic hint about the current scene's choices."""

    def __init__(self, client: Optional[LLMClient] = None) -> None:
        self._client = client

    @property
    def client(self) -> LLMClient:
        return self._client or llm_client

    def request_hint(self, history: Sequence[Turn], scene: Scene) -> str:
        """Return hint text, or ``HINT_UNAVAILABLE`` when the service fails."""
        messages = [
            {"role": "system", "content": HINT_SYSTEM_PROMPT},
            {"role": "user", "content": build_hint_prompt(history, scene, language=settings.STORY_LANGUAGE)},
        ]
        try:
            text = self.client.chat(
                messages,
                temperature=settings.HINT_TEMPERATURE,
                max_tokens=settings.HINT_MAX_TOKENS,
            ).strip()
        except Exception as exc:
            logger.warning("Hint generation failed: %s", exc)
            return HINT_UNAVAILABLE
        return text or HINT_UNAVAILABLE
