"""Pydantic models for type safety."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

GameCategory = Literal["moba", "fighting", "sport"]
VoicePreference = Literal[
    "Professional Coach", "Friendly Mentor", "Competitive Analyst", "Text Only"
]


class UserProfile(BaseModel):
    """Booth visitor captured by the signup form."""
    name: str = Field(min_length=1)
    age: int = Field(ge=13, le=120)
    gender: Literal["Male", "Female", "Non-binary", "Prefer not to say"]
    location: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    in_game_name: str = Field(min_length=1)
    current_rank: str = Field(min_length=1)
    game_category: GameCategory
    training_mode: Literal["live", "post"] = "live"
    voice_preference: VoicePreference = "Text Only"


class LiveStats(BaseModel):
    accuracy: float = Field(default=0.0, ge=0.0, le=100.0)
    apm: float = Field(default=0.0, ge=0.0)
    score: int = Field(default=0, ge=0)


class FinalStats(BaseModel):
    overall_score: int
    attacking: int
    defending: int
    decision_making: int
    coach_following: int


class GameContext(BaseModel):
    """Situational metadata passed alongside a piece of advice.

    Every field is optional; unknown keys from loosely-built dicts are dropped.
    """
    model_config = ConfigDict(extra="ignore")

    game_category: Optional[str] = None
    game_state: Optional[str] = None  # "playing" | "teamfight" | "objective" | "laning" | ...
    game_time: Optional[float] = None  # Seconds since game start
    timestamp: Optional[float] = None  # Epoch milliseconds
    stats: Optional[LiveStats] = None


class Verdict(BaseModel):
    """Result of verifying one piece of coaching advice."""
    is_valid: bool
    modified_advice: Optional[str] = None
    category: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    warning: Optional[str] = None


class AIMessage(BaseModel):
    timestamp: str  # "m:ss" game clock
    message: str
    followed: Optional[bool] = None


class ChatEntry(BaseModel):
    timestamp: str
    sender: Literal["user", "ai"]
    message: str


class GameSession(BaseModel):
    """One visitor's play session."""
    id: str
    user_id: str
    game_category: GameCategory
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None  # ms
    ai_messages: List[AIMessage] = []
    chat_history: List[ChatEntry] = []
    live_stats: LiveStats = Field(default_factory=LiveStats)
    final_stats: Optional[FinalStats] = None


class KeyMoment(BaseModel):
    id: str
    session_id: str
    timestamp: str
    type: Literal["goal", "defense", "missed_opportunity", "achievement"]
    title: str
    description: str
    xp_gained: Optional[int] = None


class Drill(BaseModel):
    name: str
    description: str


class PostGameAnalysis(BaseModel):
    """Recap content shown after the game."""
    summary: str
    strengths: List[str] = []
    improvements: List[str] = []
    drills: List[Drill] = []


class ChatReply(BaseModel):
    text: str
    audio: Optional[bytes] = None
    confidence: float = Field(ge=0.0, le=1.0)


class SessionMetrics(BaseModel):
    """Token/cost accounting for one live coaching session."""
    token_count: int = 0
    session_cost: float = 0.0
    start_time: float  # Epoch milliseconds
    video_frames_sent: int = 0
    audio_segments_sent: int = 0
    text_requests_sent: int = 0


class SessionReport(BaseModel):
    metrics: SessionMetrics
    errors: List[str] = []
    duration: float  # ms
