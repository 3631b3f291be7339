"""Configuration from .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Unset key = simulated coaching (booth still runs offline)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    LOG_LEVEL: str = "INFO"

    # Live sessions drop after ~10 minutes; reconnect a little before that.
    SESSION_MAX_AGE_SECONDS: int = 540
    MAX_RECONNECT_ATTEMPTS: int = 3
    RECONNECT_DELAY_SECONDS: float = 5.0
    COST_PER_1K_TOKENS: float = 0.004

    SESSION_STORE_PATH: str = "data/sessions.json"
    DEFAULT_TICKS: int = 120  # Simulated game seconds per CLI session

    ELEVENLABS_API_KEY: str | None = None
    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io"
    # Base voice id (used as a fallback).
    ELEVENLABS_VOICE_ID: str = "21m00Tcm4TlvDq8ikWAM"

    # One voice per coach persona picked at signup.
    ELEVENLABS_VOICE_ID_COACH: str = "21m00Tcm4TlvDq8ikWAM"
    ELEVENLABS_VOICE_ID_MENTOR: str = "21m00Tcm4TlvDq8ikWAM"
    ELEVENLABS_VOICE_ID_ANALYST: str = "21m00Tcm4TlvDq8ikWAM"

    # Voice settings (0.0 - 1.0), used to shape delivery.
    ELEVENLABS_COACH_STABILITY: float = 0.6
    ELEVENLABS_COACH_SIMILARITY_BOOST: float = 0.75
    ELEVENLABS_COACH_STYLE: float = 0.3

    ELEVENLABS_MENTOR_STABILITY: float = 0.7
    ELEVENLABS_MENTOR_SIMILARITY_BOOST: float = 0.8
    ELEVENLABS_MENTOR_STYLE: float = 0.2

    ELEVENLABS_ANALYST_STABILITY: float = 0.3
    ELEVENLABS_ANALYST_SIMILARITY_BOOST: float = 0.7
    ELEVENLABS_ANALYST_STYLE: float = 0.7

    USE_ELEVENLABS_VOICE_SETTINGS: bool = True
    # If true, the CLI writes synthesized mp3s to data/audio/ for debugging.
    SAVE_TTS_AUDIO: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
