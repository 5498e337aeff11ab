"""Shape of a generated scene and the validator applied to service responses.

``SCENE_JSON_SCHEMA`` is sent to the service as the response-format
constraint; ``validate_scene()`` re-checks whatever comes back, since a
constrained response can still be truncated or malformed.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)


class SceneValidationError(ValueError):
    """The service returned something that is not a usable scene."""


class Tone(str, Enum):
    """Coarse emotional register of a scene, used to pick a sound cue."""

    NEUTRAL = "neutral"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    SUSPENSE = "suspense"
    UNSPECIFIED = "unspecified"

    @classmethod
    def parse(cls, value: Any) -> "Tone":
        """Map a raw tone tag to a ``Tone``; absent or unknown tags become ``UNSPECIFIED``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNSPECIFIED


class Scene(BaseModel):
    """One unit of narrative plus the choices it offers."""

    model_config = ConfigDict(frozen=True)

    narrative: str
    choices: Tuple[str, ...]
    is_ending: bool = False
    tone: Tone = Tone.UNSPECIFIED


# Tones the service may choose from; "unspecified" is ours, never requested.
GENERATED_TONES: List[str] = [t.value for t in Tone if t is not Tone.UNSPECIFIED]

SCENE_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "narrative": {
            "type": "string",
            "description": "The next part of the interactive detective story, describing the current situation.",
        },
        "choices": {
            "type": "array",
            "description": "Between 2 and 4 options for the player, each leading somewhere different.",
            "items": {"type": "string"},
        },
        "is_ending": {
            "type": "boolean",
            "description": "true if this scene concludes the story, otherwise false.",
        },
        "tone": {
            "type": ["string", "null"],
            "description": (
                "Tone of this scene: 'neutral', 'positive' (progress made), "
                "'negative' (a trap or setback) or 'suspense' (tense, mysterious)."
            ),
            "enum": GENERATED_TONES + [None],
        },
    },
    "required": ["narrative", "choices", "is_ending", "tone"],
    "additionalProperties": False,
}


class _ScenePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    narrative: StrictStr = Field(validation_alias=AliasChoices("narrative", "scene"))
    choices: List[StrictStr]
    is_ending: StrictBool = Field(validation_alias=AliasChoices("is_ending", "isEnding"))
    tone: Any = Field(default=None, validation_alias=AliasChoices("tone", "sceneType"))

    @field_validator("narrative")
    @classmethod
    def _narrative_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("narrative is empty")
        return value

    @field_validator("choices")
    @classmethod
    def _choices_not_blank(cls, value: List[str]) -> List[str]:
        if any(not c.strip() for c in value):
            raise ValueError("choices contain a blank entry")
        return value

    @model_validator(mode="after")
    def _playable(self) -> "_ScenePayload":
        if not self.choices and not self.is_ending:
            raise ValueError("a scene that does not end the story needs at least one choice")
        return self


def validate_scene(payload: Any) -> Scene:
    """Build a ``Scene`` from a parsed service response.

    Raises ``SceneValidationError`` when narrative, choices or the ending
    flag are missing, have the wrong type, or are blank. Text is passed
    through unchanged.
    """
    if not isinstance(payload, dict):
        raise SceneValidationError(f"expected a JSON object, got {type(payload).__name__}")
    try:
        parsed = _ScenePayload.model_validate(payload)
    except ValidationError as exc:
        raise SceneValidationError(str(exc)) from exc
    return Scene(
        narrative=parsed.narrative,
        choices=tuple(parsed.choices),
        is_ending=parsed.is_ending,
        tone=Tone.parse(parsed.tone),
    )
