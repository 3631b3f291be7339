"""Simulated live-game feed for the booth demo (stats, key moments, final stats)."""

from __future__ import annotations

import random
from typing import Any, Optional

from esports_coach.models import FinalStats, LiveStats

KEY_MOMENT_CHANCE = 0.3

KEY_MOMENT_TEMPLATES: list[dict[str, Any]] = [
    {
        "type": "goal",
        "title": "Goal Scored",
        "description": "Perfect timing on the through ball as coached",
        "xp_gained": 1500,
    },
    {
        "type": "defense",
        "title": "Successful Defense",
        "description": "Great positioning prevented opponent's attack",
        "xp_gained": 800,
    },
    {
        "type": "missed_opportunity",
        "title": "Missed Opportunity",
        "description": "Could have passed instead of shooting from distance",
    },
    {
        "type": "achievement",
        "title": "Streak Bonus",
        "description": "Three successful plays in a row",
        "xp_gained": 1200,
    },
]


def format_game_time(seconds: float) -> str:
    """Format a game clock as m:ss."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


class LiveGameSimulator:
    """Random-walk stand-in for a real game telemetry feed."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def next_stats(self, stats: LiveStats) -> LiveStats:
        return LiveStats(
            accuracy=max(0.0, min(100.0, stats.accuracy + (self.rng.random() - 0.5) * 10)),
            apm=max(0.0, stats.apm + (self.rng.random() - 0.5) * 20),
            score=stats.score + self.rng.randrange(100),
        )

    def maybe_key_moment(self, game_time: float) -> Optional[dict[str, Any]]:
        """30% chance of a key moment; returns the moment fields without ids."""
        if self.rng.random() >= KEY_MOMENT_CHANCE:
            return None
        moment = dict(self.rng.choice(KEY_MOMENT_TEMPLATES))
        moment["timestamp"] = format_game_time(game_time)
        return moment

    def final_stats(self) -> FinalStats:
        return FinalStats(
            overall_score=self.rng.randint(70, 99),
            attacking=self.rng.randint(60, 99),
            defending=self.rng.randint(60, 99),
            decision_making=self.rng.randint(60, 99),
            coach_following=self.rng.randint(60, 99),
        )

    def advice_interval(self) -> float:
        """Seconds until the next coaching call (8-15s)."""
        return 8 + self.rng.random() * 7
