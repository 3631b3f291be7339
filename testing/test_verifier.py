"""Tests for the coaching verification layer."""

import pytest

from esports_coach.models import GameContext
from esports_coach.syllabus import Principle
from esports_coach.verifier import CoachingVerifier


class FakeClock:
    """Millisecond clock the test can move by hand."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_invalid_pattern_rejected_with_correction():
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("I should always engage without vision")

    assert verdict.is_valid is False
    assert verdict.modified_advice == "Ward before engaging"
    assert verdict.category == "positioning"
    assert verdict.confidence == 0.3
    assert verdict.warning == "Advice contradicts expert principles for positioning"


def test_rejections_accumulate_in_session_log():
    verifier = CoachingVerifier("moba")

    verifier.verify_advice("I should always engage without vision")
    assert len(verifier.get_session_errors()) == 1

    verifier.verify_advice("I should always engage without vision")
    errors = verifier.get_session_errors()

    assert len(errors) == 2
    assert all(e.endswith("Invalid advice detected: I should always engage without vision") for e in errors)


def test_invalid_pattern_pass_runs_before_positive_matches():
    verifier = CoachingVerifier("moba")

    # Positive phrase for lane positioning, forbidden pattern for teamfight.
    verdict = verifier.verify_advice("Stay behind minions and fight without team")

    assert verdict.is_valid is False
    assert verdict.category == "teamfight"
    assert verdict.modified_advice == "Coordinate with your team"


def test_invalid_pattern_without_correction_uses_generic_advice():
    verifier = CoachingVerifier("fighting")

    verdict = verifier.verify_advice("Just mash buttons when you're knocked down")

    assert verdict.is_valid is False
    assert verdict.category == "fundamentals"
    assert verdict.modified_advice == "Practice your basics"


def test_correction_key_matches_exact_pattern():
    verifier = CoachingVerifier("sport")

    verdict = verifier.verify_advice("Dive in on every tackle")

    assert verdict.modified_advice == "Stay disciplined in defense"
    assert verdict.category == "defense"


def test_correction_lookup_matches_in_both_directions():
    syllabus = {
        "moba": (
            Principle(
                category="laning",
                keywords=("lane",),
                valid_advice=(),
                invalid_patterns=("feed kills",),
                corrections={"feed": "Play safe until your jungler arrives"},
            ),
            Principle(
                category="diving",
                keywords=("tower",),
                valid_advice=(),
                invalid_patterns=("dive",),
                corrections={"dive under tower": "Wait for minions to tank tower"},
            ),
        )
    }
    verifier = CoachingVerifier("moba", syllabus=syllabus)

    key_in_pattern = verifier.verify_advice("Feed kills to the enemy carry")
    pattern_in_key = verifier.verify_advice("Dive the support")

    assert key_in_pattern.modified_advice == "Play safe until your jungler arrives"
    assert pattern_in_key.modified_advice == "Wait for minions to tank tower"
    assert pattern_in_key.category == "diving"


def test_unknown_topic_label_gets_default_generic_advice():
    syllabus = {
        "moba": (
            Principle(
                category="macro",
                keywords=(),
                valid_advice=(),
                invalid_patterns=("afk farm",),
            ),
        )
    }
    verifier = CoachingVerifier("moba", syllabus=syllabus)

    verdict = verifier.verify_advice("Just AFK farm all game")

    assert verdict.modified_advice == "Focus on fundamentals"
    assert verdict.category == "macro"


def test_invalid_matching_is_case_insensitive():
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("CHASE KILLS EVERYWHERE")

    assert verdict.is_valid is False
    assert verdict.modified_advice == "Focus on objectives"


def test_valid_phrase_accepts_advice():
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("Stay behind minions")

    assert verdict.is_valid is True
    assert verdict.category == "positioning"
    assert verdict.confidence >= 0.3
    assert verdict.confidence == pytest.approx(3 / 7)
    assert verdict.modified_advice == "Stay behind minions"
    assert verdict.warning is None
    assert verifier.get_session_errors() == []


def test_positioning_advice_is_enhanced():
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("Position for objectives")

    assert verdict.is_valid is True
    assert verdict.category == "positioning"
    assert verdict.modified_advice == "Position for objectives - Consider enemy threat ranges"


def test_itemization_advice_is_enhanced():
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("Buy magic resist and build armor against AD")

    assert verdict.is_valid is True
    assert verdict.category == "itemization"
    assert verdict.confidence == pytest.approx(6 / 10)
    assert verdict.modified_advice == (
        "Buy magic resist and build armor against AD - Check enemy builds first"
    )


def test_score_exactly_at_threshold_is_not_a_match():
    # buy (+1) and one phrase (+2) over 6 keywords + 4 phrases = 0.3
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("Buy magic resist")

    assert verdict.is_valid is False
    assert verdict.category is None
    assert verdict.confidence == 0.6
    assert verdict.warning == "Advice not aligned with coaching principles"


def test_confidence_is_clamped_to_one():
    verifier = CoachingVerifier("fighting")

    verdict = verifier.verify_advice(
        "Mix highs and lows, use throw techs, create frame traps, "
        "reset to neutral with pressure and an overhead setup"
    )

    assert verdict.is_valid is True
    assert verdict.category == "mixups"
    assert verdict.confidence == 1.0


def test_unknown_category_uses_generic_heuristic():
    verifier = CoachingVerifier("chess")

    accepted = verifier.verify_advice("Try to focus on your opening")
    rejected = verifier.verify_advice("Always engage, you will never lose")

    assert verifier.principles == ()
    assert accepted.is_valid is True
    assert accepted.confidence == 0.6
    assert accepted.modified_advice is None
    assert accepted.warning is None
    assert rejected.is_valid is False
    assert rejected.confidence == 0.6
    assert rejected.category is None
    assert rejected.warning == "Advice not aligned with coaching principles"
    # Generic rejections are not syllabus violations.
    assert verifier.get_session_errors() == []


def test_generic_heuristic_requires_actionable_language():
    verifier = CoachingVerifier("moba")

    verdict = verifier.verify_advice("Nice play")

    assert verdict.is_valid is False
    assert verdict.confidence == 0.6


def test_empty_advice_falls_through_to_generic():
    verifier = CoachingVerifier("sport")

    verdict = verifier.verify_advice("")

    assert verdict.is_valid is False
    assert verdict.confidence == 0.6


def test_verify_is_idempotent_apart_from_log():
    verifier = CoachingVerifier("moba")

    first = verifier.verify_advice("Consider improving your last hits")
    second = verifier.verify_advice("Consider improving your last hits")

    assert first == second


def test_context_accepts_model_dict_or_garbage():
    verifier = CoachingVerifier("moba")
    advice = "Always engage without vision"

    with_model = verifier.verify_advice(advice, GameContext(game_state="teamfight"))
    with_dict = verifier.verify_advice(advice, {"game_state": "laning", "extra": 1})
    with_bad_dict = verifier.verify_advice(advice, {"game_time": "not a number"})

    assert with_model == with_dict == with_bad_dict
    assert len(verifier.get_session_errors()) == 3


def test_get_session_errors_returns_copy():
    verifier = CoachingVerifier("moba")
    verifier.verify_advice("Ignore map and farm")

    snapshot = verifier.get_session_errors()
    snapshot.append("tampered")
    snapshot.clear()

    assert len(verifier.get_session_errors()) == 1


def test_reset_session_clears_log_but_keeps_syllabus():
    verifier = CoachingVerifier("moba")
    verifier.verify_advice("I should always engage without vision")

    verifier.reset_session()

    assert verifier.get_session_errors() == []
    assert verifier.verify_advice("Stay behind minions").is_valid is True


def test_time_sensitivity_immediate_tier():
    clock = FakeClock()
    verifier = CoachingVerifier("moba", clock=clock)
    issued_at = clock.now

    clock.now = issued_at + 2999
    assert verifier.validate_time_sensitivity("Engage now", issued_at) is True

    clock.now = issued_at + 3001
    assert verifier.validate_time_sensitivity("Engage now", issued_at) is False


def test_time_sensitivity_reactive_and_positional_tiers():
    clock = FakeClock()
    verifier = CoachingVerifier("moba", clock=clock)
    issued_at = clock.now

    clock.now = issued_at + 4000
    assert verifier.validate_time_sensitivity("Retreat to tower", issued_at) is True
    clock.now = issued_at + 6000
    assert verifier.validate_time_sensitivity("Retreat to tower", issued_at) is False

    clock.now = issued_at + 9000
    assert verifier.validate_time_sensitivity("Farm the side lane", issued_at) is True
    clock.now = issued_at + 10001
    assert verifier.validate_time_sensitivity("Farm the side lane", issued_at) is False


def test_time_sensitivity_first_tier_wins():
    clock = FakeClock()
    verifier = CoachingVerifier("moba", clock=clock)
    issued_at = clock.now
    clock.now = issued_at + 5000

    # "push" (3s) outranks "ward" (10s)
    assert verifier.validate_time_sensitivity("Push then ward", issued_at) is False


def test_time_sensitivity_unmatched_advice_never_expires():
    clock = FakeClock()
    verifier = CoachingVerifier("moba", clock=clock)
    issued_at = clock.now
    clock.now = issued_at + 10**9

    assert verifier.validate_time_sensitivity("Great rotation", issued_at, 42.0) is True
