"""Audio cues driven by game events.

The engine only records *what* should be heard; the presentation layer
drains the queued cues and decides how to play them.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional

from config import settings
from src.nlg.scene_schema import Tone

logger = logging.getLogger(__name__)


class SoundCue(Enum):
    CHOICE = "choice"
    TRANSITION = "transition"
    HINT = "hint"
    POSITIVE = "positive"
    NEGATIVE = "negative"


_TONE_CUES: Dict[Tone, SoundCue] = {
    Tone.POSITIVE: SoundCue.POSITIVE,
    Tone.NEGATIVE: SoundCue.NEGATIVE,
    Tone.SUSPENSE: SoundCue.NEGATIVE,
    Tone.NEUTRAL: SoundCue.TRANSITION,
}


def cue_for_tone(tone: Tone) -> SoundCue:
    """Cue played when a scene of *tone* appears; neutral or unknown tones get the transition sound."""
    return _TONE_CUES.get(tone, SoundCue.TRANSITION)


def cue_url(cue: SoundCue) -> str:
    return {
        SoundCue.CHOICE: settings.CHOICE_SOUND_URL,
        SoundCue.TRANSITION: settings.TRANSITION_SOUND_URL,
        SoundCue.HINT: settings.HINT_SOUND_URL,
        SoundCue.POSITIVE: settings.POSITIVE_SOUND_URL,
        SoundCue.NEGATIVE: settings.NEGATIVE_SOUND_URL,
    }[cue]


class AudioController:
    """Ambient-music flag plus a queue of one-shot cues."""

    def __init__(self) -> None:
        self.ambient_playing = False
        self._ambient_changed = False
        self._queue: List[SoundCue] = []

    @property
    def ambient_url(self) -> str:
        return settings.AMBIENT_MUSIC_URL

    def start_ambient(self) -> None:
        if not self.ambient_playing:
            logger.debug("ambient music on")
            self.ambient_playing = True
            self._ambient_changed = True

    def stop_ambient(self) -> None:
        if self.ambient_playing:
            logger.debug("ambient music off")
            self.ambient_playing = False
            self._ambient_changed = True

    def take_ambient_change(self) -> Optional[bool]:
        """Return the ambient on/off flag if it changed since the last call, else ``None``."""
        if not self._ambient_changed:
            return None
        self._ambient_changed = False
        return self.ambient_playing

    def play(self, cue: SoundCue) -> None:
        self._queue.append(cue)

    def drain(self) -> List[SoundCue]:
        """Return and clear the cues queued since the last call."""
        cues, self._queue = self._queue, []
        return cues
