"""OpenAI coaching service with verified advice and a simulated fallback."""

import json
import logging
import random
import re
import time
from typing import Callable, Optional

import httpx
from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from esports_coach.config import settings
from esports_coach.models import (
    ChatReply,
    GameContext,
    GameSession,
    KeyMoment,
    PostGameAnalysis,
    SessionMetrics,
    SessionReport,
    UserProfile,
)
from esports_coach.prompts import (
    CHAT_RESPONSE,
    COACHING_ADVICE,
    INITIALIZE,
    POST_GAME_ANALYSIS,
    RESUME,
    get_system_prompt,
)
from esports_coach.services.tts import TEXT_ONLY, ElevenLabsTTS
from esports_coach.verifier import CoachingVerifier

log = logging.getLogger(__name__)

VIDEO_TOKENS_PER_FRAME = 263
AUDIO_TOKENS_PER_SEGMENT = 32
TOKENS_PER_TEXT_REQUEST = 100
VIDEO_FRAME_STRIDE = 4  # Send every 4th frame during active play
ACTIVE_GAME_STATES = ("playing", "teamfight", "objective", "laning")

FALLBACK_ADVICE = "Keep focusing on your fundamentals"
FALLBACK_CHAT = "Let me help you with that."

SIMULATED_ADVICE = [
    "Focus on positioning",
    "Watch your spacing",
    "Good pressure!",
    "Consider passing",
    "Defensive positioning needed",
    "Nice tactical decision",
    "Try a through ball",
    "Maintain formation",
    "Ward objectives",
    "Time your abilities",
]

SIMULATED_CHAT = [
    "Focus on your positioning and timing",
    "Try to maintain better map awareness",
    "Your decision making is improving",
    "Consider adjusting your strategy",
    "Good question - work on those fundamentals",
]
SIMULATED_CHAT_CONFIDENCE = 0.7


def _now_ms() -> float:
    return time.time() * 1000


def default_analysis() -> PostGameAnalysis:
    """Canned recap used when no model is configured."""
    return PostGameAnalysis(
        summary="Good game! You showed improvement in several areas.",
        strengths=["Tactical awareness", "Decision making under pressure"],
        improvements=["Defensive positioning", "Communication with team"],
        drills=[
            {"name": "Positioning Drill", "description": "Practice maintaining formation"},
            {"name": "Reaction Training", "description": "Improve response time to threats"},
        ],
    )


def parse_analysis(raw_text: str) -> PostGameAnalysis:
    """Parse model JSON leniently, falling back to the raw text as summary."""
    try:
        return PostGameAnalysis(**json.loads(raw_text))
    except (json.JSONDecodeError, TypeError, ValidationError):
        pass

    cleaned = raw_text
    # Extract JSON from markdown code blocks if present
    json_match = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", cleaned)
    if json_match:
        cleaned = json_match.group(1)
    cleaned = re.sub(r'\\(?!["\\/bfnrtu])', r"\\\\", cleaned)  # Fix invalid escapes
    try:
        return PostGameAnalysis(**json.loads(cleaned))
    except (json.JSONDecodeError, TypeError, ValidationError):
        return PostGameAnalysis(
            summary=raw_text or "Session completed successfully",
            strengths=["Consistent performance"],
            improvements=["Continue practicing fundamentals"],
            drills=[{"name": "General Practice", "description": "Keep working on your skills"}],
        )


class CoachingLLMService:
    def __init__(
        self,
        client: Optional[OpenAI] = None,
        tts: Optional[ElevenLabsTTS] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        reconnect_delay: Optional[float] = None,
    ):
        if client is None and settings.OPENAI_API_KEY:
            client = OpenAI(api_key=settings.OPENAI_API_KEY)
        if client is None:
            log.warning("OpenAI API key not found. AI coaching will use simulated responses.")
        self.client = client
        self.model = settings.OPENAI_MODEL
        self.tts = tts
        self.rng = rng or random.Random()
        self.clock = clock or _now_ms
        self.reconnect_delay = (
            settings.RECONNECT_DELAY_SECONDS if reconnect_delay is None else reconnect_delay
        )
        self.max_reconnect_attempts = settings.MAX_RECONNECT_ATTEMPTS

        self.verifier: Optional[CoachingVerifier] = None
        self.profile: Optional[UserProfile] = None
        self.system_prompt = ""
        self.live = False
        self.reconnect_attempts = 0
        self.metrics = self._initialize_metrics()
        self._connected_at = self.metrics.start_time
        self._frame_ticks = 0
        self._recent_advice: list[str] = []
        self._last_game_state: Optional[str] = None

    def _initialize_metrics(self) -> SessionMetrics:
        return SessionMetrics(start_time=self.clock())

    def _get_tts(self) -> Optional[ElevenLabsTTS]:
        if self.tts is not None:
            return self.tts
        try:
            self.tts = ElevenLabsTTS()
        except ValueError:
            self.tts = None
        return self.tts

    def _synthesize_for_persona(self, text: str) -> Optional[bytes]:
        persona = self.profile.voice_preference if self.profile else None
        if not text or not persona or persona == TEXT_ONLY:
            return None
        tts = self._get_tts()
        if not tts:
            return None
        try:
            audio = tts.synthesize_for_persona(text=text, persona=persona)
        except (httpx.HTTPError, ValueError) as e:
            log.warning(f"TTS failed, continuing text-only: {e}")
            return None
        if audio:
            self.metrics.audio_segments_sent += 1
        return audio

    def _complete(self, prompt: str) -> str:
        response = self.client.responses.create(
            model=self.model,
            instructions=self.system_prompt,
            input=prompt,
        )
        return response.output_text

    def initialize_live_coaching(self, game_category: str, profile: UserProfile) -> bool:
        """Start a coaching session. Returns True when a live model is connected."""
        self.verifier = CoachingVerifier(game_category, clock=self.clock)
        self.profile = profile
        self.metrics = self._initialize_metrics()
        self._connected_at = self.metrics.start_time
        self._recent_advice = []

        if self.client is None:
            log.warning("OpenAI API not available, using simulated coaching")
            self.live = False
            return False

        self.system_prompt = get_system_prompt(
            game_category=game_category,
            player_name=profile.name,
            in_game_name=profile.in_game_name,
            rank=profile.current_rank,
            voice_preference=profile.voice_preference,
        )
        try:
            self._complete(INITIALIZE)
            self.live = True
        except OpenAIError as e:
            log.error(f"Failed to initialize live coaching: {e}")
            self.live = False
            self._handle_reconnection()
        return self.live

    def _handle_reconnection(self) -> None:
        while self.reconnect_attempts < self.max_reconnect_attempts:
            self.reconnect_attempts += 1
            log.info(
                f"Attempting reconnection "
                f"{self.reconnect_attempts}/{self.max_reconnect_attempts}"
            )
            try:
                self._complete(RESUME.format(context_summary=self._compress_session_context()))
            except OpenAIError as e:
                log.error(f"Reconnection failed: {e}")
                if self.reconnect_attempts < self.max_reconnect_attempts and self.reconnect_delay:
                    time.sleep(self.reconnect_delay)
                continue
            self.live = True
            self.reconnect_attempts = 0
            self._connected_at = self.clock()
            log.info("Successfully reconnected to coaching model")
            return

        log.error("Max reconnection attempts reached. Falling back to simulated mode.")
        self.live = False

    def _compress_session_context(self) -> str:
        return json.dumps(
            {
                "session_time_ms": round(self.clock() - self.metrics.start_time),
                "recent_advice": self._recent_advice[-3:],
                "game_state": self._last_game_state,
            }
        )

    def monitor_session(self) -> None:
        """Reconnect ahead of the provider's session timeout; refresh cost metrics."""
        age_s = (self.clock() - self._connected_at) / 1000
        if self.live and age_s > settings.SESSION_MAX_AGE_SECONDS:
            log.info(f"Session age {age_s:.0f}s, refreshing connection")
            self.reconnect_attempts = 0
            self._handle_reconnection()
        self.update_cost_metrics()

    def update_cost_metrics(self) -> None:
        m = self.metrics
        m.token_count = (
            m.video_frames_sent * VIDEO_TOKENS_PER_FRAME
            + m.audio_segments_sent * AUDIO_TOKENS_PER_SEGMENT
            + m.text_requests_sent * TOKENS_PER_TEXT_REQUEST
        )
        m.session_cost = (m.token_count / 1000) * settings.COST_PER_1K_TOKENS
        log.debug(f"Session metrics: {m.token_count} tokens, ${m.session_cost:.4f} cost")

    def should_send_video_frame(self, context: Optional[GameContext]) -> bool:
        """Sample every 4th frame, and only during active gameplay."""
        tick = self._frame_ticks
        self._frame_ticks += 1
        game_state = context.game_state if context else None
        if game_state in ACTIVE_GAME_STATES and tick % VIDEO_FRAME_STRIDE == 0:
            self.metrics.video_frames_sent += 1
            return True
        return False

    def get_coaching_advice(self, situation: str, context: GameContext) -> str:
        """Return verified advice, or simulated advice when offline/invalid."""
        issued_at = self.clock()
        self._last_game_state = context.game_state

        if not self.live or self.verifier is None:
            return self._simulated_advice()

        self.should_send_video_frame(context)
        try:
            raw_advice = self._complete(
                COACHING_ADVICE.format(
                    situation=situation,
                    context=context.model_dump_json(exclude_none=True),
                )
            ) or FALLBACK_ADVICE
        except OpenAIError as e:
            log.error(f"Failed to get coaching advice: {e}")
            return self._simulated_advice()
        self.metrics.text_requests_sent += 1

        verdict = self.verifier.verify_advice(raw_advice, context)
        is_timely = self.verifier.validate_time_sensitivity(
            raw_advice, issued_at, context.game_time
        )
        if not verdict.is_valid:
            log.warning(f"Invalid advice filtered: {raw_advice}")
            return verdict.modified_advice or self._simulated_advice()
        if not is_timely:
            # Accepted verdicts always set modified_advice; stale text must not leak through it.
            log.warning(f"Outdated advice filtered: {raw_advice}")
            return self._simulated_advice()

        advice = verdict.modified_advice or raw_advice
        self._recent_advice.append(advice)
        return advice

    def respond_to_chat(self, message: str, context: GameContext) -> ChatReply:
        """Answer a player question (text + optional persona audio)."""
        if not self.live or self.verifier is None:
            return self._simulated_chat_response()

        try:
            raw_text = self._complete(
                CHAT_RESPONSE.format(
                    message=message,
                    context=context.model_dump_json(exclude_none=True),
                )
            ) or FALLBACK_CHAT
        except OpenAIError as e:
            log.error(f"Failed to respond to chat: {e}")
            return self._simulated_chat_response()

        self.metrics.text_requests_sent += 1
        verdict = self.verifier.verify_advice(raw_text, context)
        text = verdict.modified_advice or raw_text
        return ChatReply(
            text=text,
            audio=self._synthesize_for_persona(text),
            confidence=verdict.confidence,
        )

    def generate_post_game_analysis(
        self,
        session: GameSession,
        key_moments: list[KeyMoment],
        profile: Optional[UserProfile] = None,
    ) -> PostGameAnalysis:
        if self.client is None:
            return default_analysis()

        prompt = POST_GAME_ANALYSIS.format(
            player=profile.model_dump_json(include={"in_game_name", "current_rank"})
            if profile
            else "{}",
            session=session.model_dump_json(exclude={"chat_history"}),
            key_moments=json.dumps([m.model_dump() for m in key_moments]),
        )
        try:
            raw_text = self._complete(prompt)
        except OpenAIError as e:
            log.error(f"Failed to generate post-game analysis: {e}")
            return PostGameAnalysis(
                summary="Session completed successfully",
                strengths=["Participation", "Effort"],
                improvements=["Keep practicing"],
                drills=[{"name": "Continued Practice", "description": "Regular training sessions"}],
            )
        return parse_analysis(raw_text or "")

    def get_session_metrics(self) -> SessionMetrics:
        return self.metrics.model_copy()

    def end_session(self) -> SessionReport:
        """Close the live session and return analytics for the recap."""
        self.update_cost_metrics()
        final_metrics = self.get_session_metrics()
        self.live = False
        return SessionReport(
            metrics=final_metrics,
            errors=self.verifier.get_session_errors() if self.verifier else [],
            duration=self.clock() - final_metrics.start_time,
        )

    def reset_for_next_user(self) -> None:
        """Reset metrics and verifier log between booth visitors."""
        self.metrics = self._initialize_metrics()
        self.reconnect_attempts = 0
        self._frame_ticks = 0
        self._recent_advice = []
        if self.verifier:
            self.verifier.reset_session()
        log.info("Service reset for next user")

    def _simulated_advice(self) -> str:
        return self.rng.choice(SIMULATED_ADVICE)

    def _simulated_chat_response(self) -> ChatReply:
        return ChatReply(
            text=self.rng.choice(SIMULATED_CHAT),
            confidence=SIMULATED_CHAT_CONFIDENCE,
        )
