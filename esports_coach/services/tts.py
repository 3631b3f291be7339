"""Text-to-speech for coach voice personas.

This module provides a small ElevenLabs wrapper that can:
- pick a voice_id + voice_settings from the visitor's persona choice
- synthesize a coaching line with that voice
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from esports_coach.config import settings

TEXT_ONLY = "Text Only"


def voice_profile_for_persona(persona: Optional[str]) -> Optional[tuple[str, dict[str, Any]]]:
    """Map a voice persona to a voice id + voice_settings dict.

    Returns None when no audio should be produced.
    """
    if not persona or persona == TEXT_ONLY:
        return None

    profiles = {
        "Professional Coach": (
            settings.ELEVENLABS_VOICE_ID_COACH,
            settings.ELEVENLABS_COACH_STABILITY,
            settings.ELEVENLABS_COACH_SIMILARITY_BOOST,
            settings.ELEVENLABS_COACH_STYLE,
        ),
        "Friendly Mentor": (
            settings.ELEVENLABS_VOICE_ID_MENTOR,
            settings.ELEVENLABS_MENTOR_STABILITY,
            settings.ELEVENLABS_MENTOR_SIMILARITY_BOOST,
            settings.ELEVENLABS_MENTOR_STYLE,
        ),
        "Competitive Analyst": (
            settings.ELEVENLABS_VOICE_ID_ANALYST,
            settings.ELEVENLABS_ANALYST_STABILITY,
            settings.ELEVENLABS_ANALYST_SIMILARITY_BOOST,
            settings.ELEVENLABS_ANALYST_STYLE,
        ),
    }
    if persona not in profiles:
        return (settings.ELEVENLABS_VOICE_ID, {})

    voice_id, stability, similarity, style = profiles[persona]
    if not settings.USE_ELEVENLABS_VOICE_SETTINGS:
        return (voice_id, {})
    return (
        voice_id,
        {
            "stability": stability,
            "similarity_boost": similarity,
            "style": style,
            "use_speaker_boost": True,
        },
    )


class ElevenLabsTTS:
    """Simple ElevenLabs TTS client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        voice_id: Optional[str] = None,
        model_id: str = "eleven_multilingual_v2",
        output_format: str = "mp3_44100_128",
    ) -> None:
        # .env values sometimes contain accidental leading spaces
        self.api_key = (api_key or settings.ELEVENLABS_API_KEY or "").strip() or None
        self.base_url = (base_url or settings.ELEVENLABS_BASE_URL).strip()
        self.voice_id = (voice_id or settings.ELEVENLABS_VOICE_ID).strip()
        self.model_id = model_id
        self.output_format = output_format

        if not self.api_key:
            raise ValueError("ELEVENLABS_API_KEY is not set")
        if not self.voice_id:
            raise ValueError("ELEVENLABS_VOICE_ID is not set")

    def synthesize(self, text: str) -> bytes:
        """Return raw audio bytes for the given text using the default voice."""
        return self.synthesize_with_voice(text=text, voice_id=self.voice_id)

    def synthesize_for_persona(self, text: str, persona: Optional[str]) -> Optional[bytes]:
        """Speak `text` in the persona's voice; None for text-only visitors."""
        profile = voice_profile_for_persona(persona)
        if profile is None:
            return None
        voice_id, voice_settings = profile
        return self.synthesize_with_voice(
            text=text, voice_id=voice_id, voice_settings=voice_settings
        )

    def synthesize_with_voice(
        self,
        text: str,
        voice_id: str,
        voice_settings: Optional[dict[str, Any]] = None,
    ) -> bytes:
        """Return raw audio bytes for the given text.

        Args:
            text: Text to speak.
            voice_id: ElevenLabs voice id to use.
            voice_settings: Optional dict sent as `voice_settings`.
                Typical keys: stability, similarity_boost, style, use_speaker_boost.
        """
        url = f"{self.base_url}/v1/text-to-speech/{voice_id}"
        headers = {
            "xi-api-key": self.api_key,
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "text": text,
            "model_id": self.model_id,
            "output_format": self.output_format,
        }

        if voice_settings:
            payload["voice_settings"] = voice_settings

        with httpx.Client(timeout=30) as client:
            response = client.post(url, headers=headers, json=payload)
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                # ElevenLabs returns JSON error details on failure.
                try:
                    detail = response.json()
                except ValueError:
                    detail = response.text
                raise httpx.HTTPStatusError(
                    f"{e} | ElevenLabs detail: {detail}",
                    request=e.request,
                    response=e.response,
                ) from e
            return response.content
