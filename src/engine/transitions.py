"""Pure transition functions of the story state machine.

Legal phase moves: START → PLAYING | ENDED, PLAYING → PLAYING | ENDED,
any → START (reset). ``begin_*`` functions return the new state together
with the request the caller must perform, or the unchanged state and
``None`` when the action is not allowed right now. Disallowed actions are
no-ops, not errors.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from src.engine.state import GamePhase, GameState, HintState, Turn
from src.nlg.scene_schema import Scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneRequest:
    token: int
    history: Tuple[Turn, ...]


@dataclass(frozen=True)
class HintRequest:
    scene_serial: int
    history: Tuple[Turn, ...]
    scene: Scene


def _issue(state: GameState, history: Tuple[Turn, ...]) -> Tuple[GameState, SceneRequest]:
    token = state.last_token + 1
    new_state = replace(state, history=history, pending_token=token, last_token=token)
    return new_state, SceneRequest(token=token, history=history)


def begin_start(state: GameState) -> Tuple[GameState, Optional[SceneRequest]]:
    if state.phase is not GamePhase.START or state.is_loading:
        logger.debug("start ignored (phase=%s, loading=%s)", state.phase.value, state.is_loading)
        return state, None
    return _issue(state, ())


def begin_choice(state: GameState, choice: str) -> Tuple[GameState, Optional[SceneRequest]]:
    if not state.can_choose:
        logger.debug("choice %r ignored (phase=%s, loading=%s)", choice, state.phase.value, state.is_loading)
        return state, None
    turn = Turn(scene=state.scene.narrative, choice=choice)
    return _issue(state, state.history + (turn,))


def complete_scene(state: GameState, token: int, scene: Scene) -> GameState:
    """Apply *scene* if it answers the request currently in flight."""
    if state.pending_token is None or token != state.pending_token:
        logger.debug("stale scene response dropped (token=%d, pending=%s)", token, state.pending_token)
        return state
    return replace(
        state,
        phase=GamePhase.ENDED if scene.is_ending else GamePhase.PLAYING,
        scene=scene,
        hint=HintState(),
        pending_token=None,
        scene_serial=state.scene_serial + 1,
    )


def begin_hint(state: GameState) -> Tuple[GameState, Optional[HintRequest]]:
    if not state.can_request_hint:
        logger.debug("hint ignored (used=%s, pending=%s)", state.hint.used, state.hint.pending)
        return state, None
    # used is set before the request goes out: one hint per scene, even on failure
    new_state = replace(state, hint=HintState(text=None, used=True, pending=True))
    return new_state, HintRequest(scene_serial=state.scene_serial, history=state.history, scene=state.scene)


def complete_hint(state: GameState, scene_serial: int, text: str) -> GameState:
    if scene_serial != state.scene_serial or not state.hint.pending:
        logger.debug("stale hint response dropped (serial=%d, current=%d)", scene_serial, state.scene_serial)
        return state
    return replace(state, hint=HintState(text=text, used=True, pending=False))


def reset(state: GameState) -> GameState:
    # the token counter survives so in-flight responses are recognised as stale
    return GameState(last_token=state.last_token, scene_serial=state.scene_serial)
