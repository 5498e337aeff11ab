"""Game state data structures for Case Files.

Everything here is immutable; transitions in ``src.engine.transitions``
return new ``GameState`` values instead of mutating them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from src.nlg.scene_schema import Scene


class GamePhase(Enum):
    START = "start"
    PLAYING = "playing"
    ENDED = "ended"


@dataclass(frozen=True)
class Turn:
    """A past scene paired with the choice the player made in response."""

    scene: str
    choice: str


@dataclass(frozen=True)
class HintState:
    """Hint bookkeeping for the current scene only."""

    text: Optional[str] = None
    used: bool = False
    pending: bool = False


@dataclass(frozen=True)
class GameState:
    """Snapshot of one playthrough.

    ``pending_token`` is the token of the scene request in flight (``None``
    when idle); ``last_token`` only ever grows, so a response issued before
    a reset can never match a later request. ``scene_serial`` counts applied
    scenes and ties a hint response to the scene it was asked about.
    """

    phase: GamePhase = GamePhase.START
    scene: Optional[Scene] = None
    history: Tuple[Turn, ...] = ()
    hint: HintState = field(default_factory=HintState)
    pending_token: Optional[int] = None
    last_token: int = 0
    scene_serial: int = 0

    @property
    def is_loading(self) -> bool:
        return self.pending_token is not None

    @property
    def can_choose(self) -> bool:
        return self.phase is GamePhase.PLAYING and self.scene is not None and not self.is_loading

    @property
    def can_request_hint(self) -> bool:
        return self.can_choose and not self.hint.used and not self.hint.pending

    def transcript(self) -> str:
        """Render the playthrough so far: every turn, then the current scene."""
        parts: List[str] = []
        for turn in self.history:
            parts.append(turn.scene)
            parts.append(f"> {turn.choice}")
        if self.scene is not None:
            parts.append(self.scene.narrative)
        return "\n\n".join(parts)
