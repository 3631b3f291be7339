"""Tests for session persistence."""

import json
from datetime import datetime, timezone

from esports_coach.models import GameSession, KeyMoment
from esports_coach.services.session_store import SessionStore


def make_session(session_id: str) -> GameSession:
    return GameSession(
        id=session_id,
        user_id="NovaX",
        game_category="moba",
        start_time=datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc),
        duration=90_000,
    )


def test_session_store_load_missing_returns_empty(tmp_path):
    store = SessionStore(tmp_path / "sessions.json")

    assert store.load() == {}
    assert store.list_sessions() == []


def test_session_store_load_corrupt_returns_empty(tmp_path):
    path = tmp_path / "sessions.json"
    path.write_text("{not json")

    assert SessionStore(path).load() == {}


def test_session_store_save_session_writes_and_merges(tmp_path):
    store = SessionStore(tmp_path / "nested" / "sessions.json")
    moment = KeyMoment(
        id="m1", session_id="s1", timestamp="0:45", type="goal", title="Goal", description="Nice"
    )
    errors = ["2026-10-16T12:00:01+00:00: Invalid advice detected: always engage"]

    store.save_session(make_session("s1"), [moment], errors)
    data = json.loads(store.path.read_text())
    assert data["s1"]["errors"] == errors
    assert data["s1"]["key_moments"][0]["title"] == "Goal"

    store.save_session(make_session("s2"), [], [])
    data = json.loads(store.path.read_text())
    assert set(data) == {"s1", "s2"}
    assert [e["session"]["id"] for e in store.list_sessions()] == ["s1", "s2"]


def test_session_store_get_session_round_trip(tmp_path):
    store = SessionStore(tmp_path / "sessions.json")
    original = make_session("s1")
    store.save_session(original, [], [])

    loaded = store.get_session("s1")

    assert loaded is not None
    assert loaded.model_dump() == original.model_dump()
    assert store.get_session("missing") is None
