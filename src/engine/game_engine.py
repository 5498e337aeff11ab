"""Main game engine orchestrator for Case Files.

Per player action:
1. Apply the ``begin_*`` transition under the lock (guards + request token)
2. Call the story or hint generator with the lock released
3. Apply the matching ``complete_*`` transition; stale results are dropped
4. Fire audio side effects for whatever actually changed
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from src.engine import transitions
from src.engine.audio import AudioController, SoundCue, cue_for_tone
from src.engine.state import GamePhase, GameState
from src.engine.transitions import HintRequest, SceneRequest
from src.nlg.hint_generator import HintGenerator
from src.nlg.story_generator import FALLBACK_SCENE, StoryGenerator

logger = logging.getLogger(__name__)

HINT_FAILED = "Something went wrong while searching for a clue."


class GameEngine:
    """Holds the current ``GameState`` and drives it with generation results."""

    def __init__(
        self,
        story_generator: Optional[StoryGenerator] = None,
        hint_generator: Optional[HintGenerator] = None,
        audio: Optional[AudioController] = None,
    ):
        self.story_gen = story_generator or StoryGenerator()
        self.hint_gen = hint_generator or HintGenerator()
        self.audio = audio or AudioController()
        self._state = GameState()
        self._lock = threading.Lock()

    @property
    def state(self) -> GameState:
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start_game(self) -> GameState:
        """Request the opening scene. Only valid from ``START``."""
        with self._lock:
            self._state, request = transitions.begin_start(self._state)
        if request is None:
            return self._state
        logger.info("Starting a new case")
        self.audio.start_ambient()
        return self._run_scene_request(request)

    def choose_option(self, choice: str) -> GameState:
        """Record *choice* against the current scene and request the next one.

        A no-op unless the game is ``PLAYING`` with no scene request in flight.
        """
        with self._lock:
            self._state, request = transitions.begin_choice(self._state, choice)
        if request is None:
            return self._state
        self.audio.play(SoundCue.CHOICE)
        return self._run_scene_request(request)

    def request_hint(self) -> GameState:
        """Ask for the one hint allowed on the current scene."""
        with self._lock:
            self._state, request = transitions.begin_hint(self._state)
        if request is None:
            return self._state
        self.audio.play(SoundCue.HINT)
        return self._run_hint_request(request)

    def reset_game(self) -> GameState:
        """Drop the playthrough and return to ``START`` from any phase."""
        with self._lock:
            self._state = transitions.reset(self._state)
        self.audio.stop_ambient()
        return self._state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_scene_request(self, request: SceneRequest) -> GameState:
        try:
            scene = self.story_gen.request_scene(request.history)
        except Exception:
            logger.exception("Story generator raised – using fallback scene")
            scene = FALLBACK_SCENE

        with self._lock:
            applied = self._state.pending_token == request.token
            self._state = transitions.complete_scene(self._state, request.token, scene)
            state = self._state

        if applied:
            self.audio.play(cue_for_tone(scene.tone))
            if state.phase is GamePhase.ENDED:
                logger.info("Case closed after %d decisions", len(state.history))
                self.audio.stop_ambient()
        return state

    def _run_hint_request(self, request: HintRequest) -> GameState:
        try:
            text = self.hint_gen.request_hint(request.history, request.scene)
        except Exception:
            logger.exception("Hint generator raised")
            text = HINT_FAILED

        with self._lock:
            self._state = transitions.complete_hint(self._state, request.scene_serial, text)
            return self._state
