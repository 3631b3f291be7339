"""Booth state: current visitor, live session and recap history."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from esports_coach.models import (
    AIMessage,
    ChatEntry,
    FinalStats,
    GameSession,
    KeyMoment,
    LiveStats,
    UserProfile,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BoothState:
    """State for one kiosk. Mutators are no-ops when there is no active session."""

    def __init__(self) -> None:
        self.user: Optional[UserProfile] = None
        self.current_session: Optional[GameSession] = None
        self.key_moments: list[KeyMoment] = []
        self.session_history: list[GameSession] = []

    def set_user(self, user: UserProfile) -> None:
        self.user = user

    def start_session(self, game_category: Optional[str] = None) -> Optional[GameSession]:
        if self.user is None:
            return None
        self.current_session = GameSession(
            id=str(uuid.uuid4()),
            user_id=self.user.in_game_name,
            game_category=game_category or self.user.game_category,
            start_time=_now(),
        )
        self.key_moments = []
        return self.current_session

    def end_session(self, final_stats: FinalStats) -> Optional[GameSession]:
        session = self.current_session
        if session is None:
            return None
        end_time = _now()
        session.end_time = end_time
        session.duration = int((end_time - session.start_time).total_seconds() * 1000)
        session.final_stats = final_stats
        self.session_history.append(session)
        return session

    def add_ai_message(self, message: str, game_time: str, followed: Optional[bool] = None) -> None:
        if self.current_session is None:
            return
        self.current_session.ai_messages.append(
            AIMessage(timestamp=game_time, message=message, followed=followed)
        )

    def add_chat_message(self, message: str, sender: str) -> None:
        if self.current_session is None:
            return
        self.current_session.chat_history.append(
            ChatEntry(timestamp=_now().strftime("%H:%M:%S"), sender=sender, message=message)
        )

    def update_live_stats(self, stats: LiveStats) -> None:
        if self.current_session is None:
            return
        self.current_session.live_stats = stats

    def add_key_moment(self, moment: dict[str, Any]) -> Optional[KeyMoment]:
        if self.current_session is None:
            return None
        key_moment = KeyMoment(
            **moment,
            id=str(uuid.uuid4()),
            session_id=self.current_session.id,
        )
        self.key_moments.append(key_moment)
        return key_moment

    def reset_to_signup(self) -> None:
        """Drop the current session; history is kept for the operator."""
        self.current_session = None
        self.key_moments = []
