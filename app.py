"""Case Files – Gradio UI for the AI detective story.

Layout (gr.Blocks):
  Start screen:  title  +  "Open the case" button
  Case screen:   scene text  +  choice Radio  +  hint button/panel  +  case file  +  "New case" button
  Hidden HTML:   ambient music (touched only when it starts or stops)  +  one-shot sound cues
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Dict

import gradio as gr

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import settings
from src.engine.audio import AudioController, cue_url
from src.engine.game_engine import GameEngine
from src.engine.state import GamePhase, GameState

logger = logging.getLogger(__name__)

# Order of the values returned by every callback
OUTPUTS = (
    "start_col", "case_col", "scene", "choices", "hint_btn",
    "hint", "case_file", "new_case", "ambient", "cues",
)

# ── One engine per browser session ───────────────────────────────────────
_engines: Dict[str, GameEngine] = {}


def _get_engine(request: gr.Request) -> GameEngine:
    key = request.session_hash or "default"
    if key not in _engines:
        _engines[key] = GameEngine()
    return _engines[key]


def _drop_engine(request: gr.Request) -> None:
    _engines.pop(request.session_hash or "default", None)


# ── Helpers ──────────────────────────────────────────────────────────────

def _ambient_update(audio: AudioController):
    playing = audio.take_ambient_change()
    if playing is None:
        return gr.update()
    if playing:
        return f'<audio src="{audio.ambient_url}" autoplay loop></audio>'
    return ""


def _cues_html(audio: AudioController) -> str:
    return "".join(f'<audio src="{cue_url(cue)}" autoplay></audio>' for cue in audio.drain())


def _hint_markdown(state: GameState) -> str:
    if state.hint.pending:
        return "*Searching for a clue…*"
    if state.hint.text:
        return f'> *"{state.hint.text}"*'
    return ""


def _render(engine: GameEngine, state: GameState):
    playing = state.phase is GamePhase.PLAYING
    ended = state.phase is GamePhase.ENDED
    on_case = state.phase is not GamePhase.START

    story = state.scene.narrative if state.scene else ""
    if ended:
        story += "\n\n**The case is closed.**"
    choices = list(state.scene.choices) if state.scene else []
    hint_label = "Hint used" if state.hint.used else "Ask for a hint"

    return (
        gr.update(visible=not on_case),                                  # start column
        gr.update(visible=on_case),                                      # case column
        story,                                                           # scene markdown
        gr.update(choices=choices, value=None, visible=bool(choices)),   # choice radio
        gr.update(value=hint_label, interactive=state.can_request_hint, visible=playing),
        _hint_markdown(state),                                           # hint markdown
        gr.update(value=state.transcript() if ended else "", visible=ended),  # case file
        gr.update(visible=ended),                                        # new case button
        _ambient_update(engine.audio),                                   # ambient html
        _cues_html(engine.audio),                                        # cue html
    )


# ── Callbacks ────────────────────────────────────────────────────────────

def start_game(request: gr.Request):
    engine = _get_engine(request)
    return _render(engine, engine.start_game())


def choose(choice: str | None, request: gr.Request):
    engine = _get_engine(request)
    if not choice:
        return _render(engine, engine.state)
    if engine.state.phase is GamePhase.ENDED:
        # choices on an ending scene are restart affordances
        engine.reset_game()
        return _render(engine, engine.start_game())
    return _render(engine, engine.choose_option(choice))


def get_hint(request: gr.Request):
    engine = _get_engine(request)
    return _render(engine, engine.request_hint())


def new_case(request: gr.Request):
    engine = _get_engine(request)
    return _render(engine, engine.reset_game())


# ── UI Layout ────────────────────────────────────────────────────────────

def build_ui() -> gr.Blocks:
    with gr.Blocks(
        title="Case Files – AI Detective Story",
        theme=gr.themes.Soft(primary_hue="amber", secondary_hue="slate"),
    ) as demo:
        components = {}
        with gr.Column(visible=True) as components["start_col"]:
            gr.Markdown(
                "# Case Files\n"
                "Step into an interactive detective story shaped by your choices. "
                "Every decision opens a new path in the case!"
            )
            start_btn = gr.Button("Open the case", variant="primary")

        with gr.Column(visible=False) as components["case_col"]:
            gr.Markdown("## Chapters of the case…")
            components["scene"] = gr.Markdown("")
            components["choices"] = gr.Radio(choices=[], label="What do you do?", interactive=True, visible=False)
            components["hint_btn"] = gr.Button("Ask for a hint", variant="secondary")
            components["hint"] = gr.Markdown("")
            components["case_file"] = gr.Textbox(label="Case file", lines=12, interactive=False, visible=False)
            components["new_case"] = gr.Button("New case", variant="primary", visible=False)

        components["ambient"] = gr.HTML("")
        components["cues"] = gr.HTML("")

        outputs = [components[name] for name in OUTPUTS]

        # ── Wiring ──
        start_btn.click(fn=start_game, outputs=outputs)
        components["choices"].input(fn=choose, inputs=[components["choices"]], outputs=outputs)
        components["hint_btn"].click(fn=get_hint, outputs=outputs)
        components["new_case"].click(fn=new_case, outputs=outputs)
        demo.unload(_drop_engine)

    return demo


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    demo = build_ui()
    demo.launch(server_name="0.0.0.0", server_port=settings.GRADIO_PORT, share=False)
