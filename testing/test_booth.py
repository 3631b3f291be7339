"""Tests for booth session state."""

from esports_coach.booth import BoothState
from esports_coach.models import FinalStats, LiveStats, UserProfile


def make_profile() -> UserProfile:
    return UserProfile(
        name="Kai",
        age=17,
        gender="Male",
        location="Berlin",
        email="kai@example.com",
        in_game_name="KaiFist",
        current_rank="Master",
        game_category="fighting",
    )


FINAL = FinalStats(
    overall_score=88, attacking=80, defending=75, decision_making=90, coach_following=70
)


def test_start_session_requires_user():
    booth = BoothState()

    assert booth.start_session("moba") is None
    assert booth.current_session is None


def test_session_lifecycle():
    booth = BoothState()
    booth.set_user(make_profile())

    session = booth.start_session()
    booth.add_ai_message("Block low attacks", "0:12")
    booth.add_chat_message("How do I anti-air?", "user")
    booth.update_live_stats(LiveStats(accuracy=55.0, apm=120.0, score=300))
    moment = booth.add_key_moment(
        {"type": "achievement", "title": "Streak Bonus", "description": "3 in a row", "timestamp": "0:30"}
    )
    ended = booth.end_session(FINAL)

    assert session.user_id == "KaiFist"
    assert session.game_category == "fighting"
    assert ended is session
    assert ended.ai_messages[0].message == "Block low attacks"
    assert ended.chat_history[0].sender == "user"
    assert ended.live_stats.score == 300
    assert moment.session_id == session.id
    assert ended.final_stats == FINAL
    assert ended.end_time >= ended.start_time
    assert ended.duration >= 0
    assert booth.session_history == [session]


def test_mutators_without_session_are_noops():
    booth = BoothState()

    booth.add_ai_message("ignored", "0:01")
    booth.add_chat_message("ignored", "user")
    booth.update_live_stats(LiveStats())

    assert booth.add_key_moment({"type": "goal", "title": "x", "description": "y", "timestamp": "0:01"}) is None
    assert booth.end_session(FINAL) is None


def test_start_session_clears_previous_key_moments():
    booth = BoothState()
    booth.set_user(make_profile())
    booth.start_session()
    booth.add_key_moment({"type": "goal", "title": "x", "description": "y", "timestamp": "0:01"})

    booth.start_session()

    assert booth.key_moments == []


def test_reset_to_signup_keeps_history():
    booth = BoothState()
    booth.set_user(make_profile())
    booth.start_session()
    booth.end_session(FINAL)

    booth.reset_to_signup()

    assert booth.current_session is None
    assert booth.key_moments == []
    assert len(booth.session_history) == 1
