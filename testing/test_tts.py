"""Tests for persona voice selection."""

import pytest

from esports_coach.config import settings
from esports_coach.services.tts import ElevenLabsTTS, voice_profile_for_persona


def test_text_only_has_no_voice():
    assert voice_profile_for_persona("Text Only") is None
    assert voice_profile_for_persona(None) is None


def test_persona_voice_settings(monkeypatch):
    monkeypatch.setattr(settings, "USE_ELEVENLABS_VOICE_SETTINGS", True)

    voice_id, voice_settings = voice_profile_for_persona("Competitive Analyst")

    assert voice_id == settings.ELEVENLABS_VOICE_ID_ANALYST
    assert voice_settings["stability"] == settings.ELEVENLABS_ANALYST_STABILITY
    assert voice_settings["style"] == settings.ELEVENLABS_ANALYST_STYLE
    assert voice_settings["use_speaker_boost"] is True


def test_persona_voice_without_settings(monkeypatch):
    monkeypatch.setattr(settings, "USE_ELEVENLABS_VOICE_SETTINGS", False)

    assert voice_profile_for_persona("Friendly Mentor") == (settings.ELEVENLABS_VOICE_ID_MENTOR, {})


def test_unknown_persona_uses_base_voice():
    assert voice_profile_for_persona("Hype Caster") == (settings.ELEVENLABS_VOICE_ID, {})


def test_tts_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "ELEVENLABS_API_KEY", None)

    with pytest.raises(ValueError):
        ElevenLabsTTS()


def test_text_only_persona_skips_synthesis():
    tts = ElevenLabsTTS(api_key="test-key")

    assert tts.synthesize_for_persona("Ward river", "Text Only") is None
