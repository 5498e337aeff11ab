"""Scene generation via OpenAI chat completions with a fixed in-story fallback.

``request_scene()`` never raises: transport errors, unparsable JSON and
responses that fail ``validate_scene()`` all yield ``FALLBACK_SCENE``.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from config import settings
from src.engine.state import Turn
from src.nlg.prompt_templates import SCENE_SYSTEM_PROMPT, build_scene_prompt
from src.nlg.scene_schema import SCENE_JSON_SCHEMA, Scene, Tone, validate_scene
from src.utils.api_client import LLMClient, llm_client

logger = logging.getLogger(__name__)

# Hardcoded safety net: an ending scene whose only choice restarts the case
FALLBACK_SCENE = Scene(
    narrative=(
        "Something unexpected has disrupted the course of events. It seems an "
        "outside force is tampering with the case file. Do you want to open a "
        "new investigation?"
    ),
    choices=("Start over",),
    is_ending=True,
    tone=Tone.NEGATIVE,
)


class StoryGenerator:
    """LLM-powered narrator producing one validated ``Scene`` per request."""

    def __init__(self, client: Optional[LLMClient] = None) -> None:
        self._client = client

    @property
    def client(self) -> LLMClient:
        return self._client or llm_client

    def request_scene(self, history: Sequence[Turn]) -> Scene:
        """Generate the next scene for *history* (the opening scene when empty)."""
        user_msg = build_scene_prompt(
            history,
            language=settings.STORY_LANGUAGE,
            num_choices=settings.OPENING_CHOICES,
        )
        messages = [
            {"role": "system", "content": SCENE_SYSTEM_PROMPT},
            {"role": "user", "content": user_msg},
        ]
        try:
            data = self.client.chat_json(
                messages,
                json_schema=SCENE_JSON_SCHEMA,
                schema_name="story_scene",
            )
            scene = validate_scene(data)
        except Exception as exc:
            logger.warning("Scene generation failed (%s) – using fallback scene.", exc)
            return FALLBACK_SCENE

        logger.info(
            "Scene %d generated: %d choices, tone=%s, ending=%s",
            len(history) + 1, len(scene.choices), scene.tone.value, scene.is_ending,
        )
        return scene
