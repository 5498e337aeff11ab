"""Integration tests: full engine with real generators and a mocked LLM client."""
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.engine.audio import AudioController
from src.engine.game_engine import GameEngine
from src.engine.state import GamePhase, HintState, Turn
from src.nlg.hint_generator import HINT_UNAVAILABLE, HintGenerator
from src.nlg.scene_schema import Tone
from src.nlg.story_generator import FALLBACK_SCENE, StoryGenerator
from src.utils.api_client import LLMError


# ── Shared mock helpers ─────────────────────────────────────────────

def _mock_llm():
    """Return a mock that covers chat() and chat_json()."""
    m = MagicMock()
    m.chat_json.return_value = {"narrative": "X", "choices": ["A", "B", "C"], "is_ending": False}
    m.chat.return_value = "Not every locked door hides a secret."
    return m


@pytest.fixture
def llm():
    return _mock_llm()


@pytest.fixture
def engine(llm):
    return GameEngine(
        story_generator=StoryGenerator(client=llm),
        hint_generator=HintGenerator(client=llm),
        audio=AudioController(),
    )


class TestPlaythrough:
    def test_start_enters_playing(self, engine):
        state = engine.start_game()
        assert state.phase is GamePhase.PLAYING
        assert state.scene.narrative == "X"
        assert state.scene.choices == ("A", "B", "C")

    def test_choice_to_ending(self, engine, llm):
        engine.start_game()
        llm.chat_json.return_value = {"narrative": "Y", "choices": ["Z"], "is_ending": True}
        state = engine.choose_option("A")
        assert state.history == (Turn(scene="X", choice="A"),)
        assert state.phase is GamePhase.ENDED
        assert state.scene.narrative == "Y"
        prompt = llm.chat_json.call_args.args[0][1]["content"]
        assert "Scene 1: X\nChoice made: A" in prompt

    def test_transport_error_yields_fallback(self, engine, llm):
        engine.start_game()
        llm.chat_json.side_effect = LLMError("connection reset")
        state = engine.choose_option("B")
        assert state.scene == FALLBACK_SCENE
        assert state.phase is GamePhase.ENDED
        assert state.scene.tone is Tone.NEGATIVE
        assert state.scene.choices

    def test_malformed_response_yields_fallback(self, engine, llm):
        llm.chat_json.return_value = {"narrative": "X", "choices": ["A"], "is_ending": "no"}
        state = engine.start_game()
        assert state.scene == FALLBACK_SCENE
        assert state.phase is GamePhase.ENDED

    def test_hint_twice_sends_one_request(self, engine, llm):
        engine.start_game()
        first = engine.request_hint()
        second = engine.request_hint()
        assert llm.chat.call_count == 1
        assert first.hint.text == "Not every locked door hides a secret."
        assert second.hint == first.hint

    def test_hint_failure_placeholder_still_uses_hint(self, engine, llm):
        engine.start_game()
        llm.chat.side_effect = LLMError("timeout")
        state = engine.request_hint()
        assert state.hint == HintState(text=HINT_UNAVAILABLE, used=True, pending=False)
        engine.request_hint()
        assert llm.chat.call_count == 1

    def test_full_case_then_new_case(self, engine, llm):
        engine.start_game()
        llm.chat_json.return_value = {
            "narrative": "The gardener flinches.", "choices": ["Press him", "Leave"],
            "is_ending": False, "tone": "suspense",
        }
        engine.choose_option("B")
        llm.chat_json.return_value = {
            "narrative": "He confesses.", "choices": ["Close the case"],
            "is_ending": True, "tone": "positive",
        }
        state = engine.choose_option("Press him")
        assert state.phase is GamePhase.ENDED
        assert [t.choice for t in state.history] == ["B", "Press him"]
        assert "He confesses." in state.transcript()

        state = engine.reset_game()
        assert state.phase is GamePhase.START
        llm.chat_json.return_value = {"narrative": "A new case.", "choices": ["Go"], "is_ending": False}
        state = engine.start_game()
        assert state.history == ()
        assert state.scene.narrative == "A new case."
        opening_prompt = llm.chat_json.call_args.args[0][1]["content"]
        assert "Scene 1" not in opening_prompt


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
