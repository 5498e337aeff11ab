"""Prompt templates and builders consumed by the NLG layer (OpenAI chat completions).

Templates are *plain strings* with ``{placeholders}``; the ``build_*``
helpers fill them from the story history and are pure functions of it.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from src.engine.state import Turn
    from src.nlg.scene_schema import Scene

# ── System prompts ────────────────────────────────────────
SCENE_SYSTEM_PROMPT = """\
You are a writer of interactive detective fiction.

Rules:
1. Narrate in the second person ("You notice…", "You hear…").
2. Keep each scene short: one or two tight paragraphs.
3. Stay consistent with every earlier scene and decision.
4. Plant clues fairly; never solve the case for the player.
5. Never mention game mechanics or that you are an AI.
6. Reply with JSON only, matching the requested schema.
"""

HINT_SYSTEM_PROMPT = """\
You are a wise and mysterious mentor in an interactive detective game. \
You speak in short, cryptic sentences and never give away answers.
"""

# ── Opening scene ─────────────────────────────────────────
OPENING_PROMPT = """\
Begin a short, mysterious detective story in {language}, in the style of a \
classic young-detective mystery. Place the player in a situation that \
requires a decision. Describe the scene, then offer exactly {num_choices} \
different choices the player could make. Make it gripping. Do not end the \
story at this stage: set "is_ending" to false.
"""

# ── Continue story ────────────────────────────────────────
CONTINUE_PROMPT = """\
These are the events of the story so far:

{history}

Based on the last decision, continue the story with a new, exciting scene \
in {language}. Describe what happens next, then offer 2-4 new choices for \
the player. One of the choices may lead to the end of the story. If this \
is the final scene, set "is_ending" to true. Classify the new scene's tone \
as "neutral", "positive", "negative" or "suspense".
"""

# ── Hint ──────────────────────────────────────────────────
HINT_PROMPT = """\
The player now faces a difficult choice.

Summary of the story so far:
{history}

The scene the player is looking at:
"{narrative}"

The choices available to the player:
{choices}

Give one short, cryptic hint in {language} to help the player. **Do not \
reveal the right answer or the direct outcome of any choice.** The hint \
should be subtle and thought-provoking.
Examples of good hints: "Sometimes the quietest rooms hold the loudest \
secrets." or "The direct approach is not always the fastest road to the truth."
"""

EMPTY_HISTORY = "No history yet."


def format_history(history: Sequence["Turn"]) -> str:
    """Render every turn as ``Scene <i>: …`` / ``Choice made: …``, in order."""
    if not history:
        return EMPTY_HISTORY
    return "\n\n".join(
        f"Scene {i}: {turn.scene}\nChoice made: {turn.choice}"
        for i, turn in enumerate(history, start=1)
    )


def build_scene_prompt(
    history: Sequence["Turn"],
    language: str = "English",
    num_choices: int = 3,
) -> str:
    """Opening prompt for an empty history, continuation prompt otherwise."""
    if not history:
        return OPENING_PROMPT.format(language=language, num_choices=num_choices)
    return CONTINUE_PROMPT.format(history=format_history(history), language=language)


def build_hint_prompt(
    history: Sequence["Turn"],
    scene: "Scene",
    language: str = "English",
) -> str:
    choices = "\n".join(f"- {c}" for c in scene.choices)
    return HINT_PROMPT.format(
        history=format_history(history),
        narrative=scene.narrative,
        choices=choices,
        language=language,
    )
