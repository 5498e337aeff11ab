"""Global configuration for Case Files — an AI-driven detective story game."""
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Centralised settings read from .env file automatically."""

    # ── OpenAI / LLM API ──────────────────────────────────
    OPENAI_API_KEY: str = Field(default="", description="OpenAI API key")
    OPENAI_BASE_URL: str = Field(default="", description="OpenAI-compatible API base URL (e.g. https://your-server.com/v1)")
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_MAX_TOKENS: int = 1024
    OPENAI_TEMPERATURE: float = 0.9
    OPENAI_TOP_P: float = 0.95
    LLM_MAX_RETRIES: int = 3
    LLM_RETRY_BASE_DELAY: float = 1.0

    # ── Story Config ──────────────────────────────────────
    STORY_LANGUAGE: str = "English"
    OPENING_CHOICES: int = 3
    HINT_TEMPERATURE: float = 0.7
    HINT_MAX_TOKENS: int = 120

    # ── Audio cues ────────────────────────────────────────
    AMBIENT_MUSIC_URL: str = "https://cdn.pixabay.com/audio/2022/11/17/audio_87743206a4.mp3"
    CHOICE_SOUND_URL: str = "https://cdn.pixabay.com/audio/2022/03/15/audio_2825a60642.mp3"
    TRANSITION_SOUND_URL: str = "https://cdn.pixabay.com/audio/2022/10/05/audio_2d31535b44.mp3"
    HINT_SOUND_URL: str = "https://cdn.pixabay.com/audio/2021/08/04/audio_bb630283e7.mp3"
    POSITIVE_SOUND_URL: str = "https://cdn.pixabay.com/audio/2022/01/18/audio_835824b693.mp3"
    NEGATIVE_SOUND_URL: str = "https://cdn.pixabay.com/audio/2022/02/11/audio_a50b396253.mp3"

    # ── Gradio / logging ──────────────────────────────────
    GRADIO_PORT: int = 7860
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton settings instance used by every module
settings = Settings()
