"""Persistence for finished booth sessions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from esports_coach.models import GameSession, KeyMoment


class SessionStore:
    """Store finished sessions, key moments and rejected advice in a JSON file."""

    def __init__(self, path: str | Path = "data/sessions.json"):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> dict[str, dict[str, Any]]:
        """Load stored sessions from disk."""
        if not self.path.exists():
            return {}
        try:
            data: Any = json.loads(self.path.read_text())
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, sessions: dict[str, dict[str, Any]]) -> None:
        """Write sessions to disk."""
        self.path.write_text(json.dumps(sessions, indent=2))

    def save_session(
        self,
        session: GameSession,
        key_moments: list[KeyMoment],
        errors: list[str],
    ) -> dict[str, dict[str, Any]]:
        """Add or replace one session and return merged data."""
        sessions = self.load()
        sessions[session.id] = {
            "session": session.model_dump(mode="json"),
            "key_moments": [m.model_dump(mode="json") for m in key_moments],
            "errors": list(errors),
        }
        self.save(sessions)
        return sessions

    def get_session(self, session_id: str) -> GameSession | None:
        entry = self.load().get(session_id)
        if not entry:
            return None
        return GameSession.model_validate(entry["session"])

    def list_sessions(self) -> list[dict[str, Any]]:
        """All stored entries, oldest first."""
        return list(self.load().values())
