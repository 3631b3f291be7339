"""Tests for the live-game simulator."""

import random

from esports_coach.models import LiveStats
from esports_coach.services.simulation import (
    KEY_MOMENT_TEMPLATES,
    LiveGameSimulator,
    format_game_time,
)


class AlwaysLowRandom(random.Random):
    def random(self) -> float:
        return 0.0


def test_format_game_time():
    assert format_game_time(0) == "0:00"
    assert format_game_time(5) == "0:05"
    assert format_game_time(75) == "1:15"
    assert format_game_time(600.9) == "10:00"


def test_next_stats_stays_in_bounds():
    simulator = LiveGameSimulator(random.Random(3))
    stats = LiveStats(accuracy=99.0, apm=1.0, score=0)

    for _ in range(500):
        previous = stats
        stats = simulator.next_stats(stats)
        assert 0.0 <= stats.accuracy <= 100.0
        assert stats.apm >= 0.0
        assert previous.score <= stats.score < previous.score + 100


def test_same_seed_same_game():
    a = LiveGameSimulator(random.Random(11))
    b = LiveGameSimulator(random.Random(11))

    assert a.final_stats() == b.final_stats()
    assert a.advice_interval() == b.advice_interval()


def test_final_stats_ranges():
    simulator = LiveGameSimulator(random.Random(5))

    for _ in range(200):
        final = simulator.final_stats()
        assert 70 <= final.overall_score <= 99
        for value in (final.attacking, final.defending, final.decision_making, final.coach_following):
            assert 60 <= value <= 99


def test_advice_interval_range():
    simulator = LiveGameSimulator(random.Random(9))

    assert all(8 <= simulator.advice_interval() <= 15 for _ in range(200))


def test_key_moment_stamped_with_game_clock():
    simulator = LiveGameSimulator(AlwaysLowRandom())

    moment = simulator.maybe_key_moment(95)

    assert moment is not None
    assert moment["timestamp"] == "1:35"
    assert moment["type"] in {t["type"] for t in KEY_MOMENT_TEMPLATES}


def test_key_moment_can_be_skipped():
    class AlwaysHighRandom(random.Random):
        def random(self) -> float:
            return 0.99

    simulator = LiveGameSimulator(AlwaysHighRandom())

    assert simulator.maybe_key_moment(30) is None
