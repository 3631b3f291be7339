"""Expert coaching syllabus per game category.

Each principle lists the specific mistakes it can correct ahead of the broader
absolute-language patterns, so a targeted correction is found before the
generic fallback would be used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Principle:
    """One coaching topic: weak keywords, strong phrases, forbidden patterns."""

    category: str
    keywords: tuple[str, ...]
    valid_advice: tuple[str, ...]
    invalid_patterns: tuple[str, ...]
    corrections: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(k.lower() for k in self.keywords))
        object.__setattr__(
            self, "valid_advice", tuple(v.lower() for v in self.valid_advice)
        )
        object.__setattr__(
            self, "invalid_patterns", tuple(p.lower() for p in self.invalid_patterns)
        )
        object.__setattr__(
            self,
            "corrections",
            MappingProxyType({k.lower(): v for k, v in self.corrections.items()}),
        )


GENERIC_ADVICE: Mapping[str, str] = MappingProxyType(
    {
        "positioning": "Focus on safe positioning",
        "itemization": "Build according to game state",
        "teamfight": "Coordinate with your team",
        "fundamentals": "Practice your basics",
        "mixups": "Vary your approach",
        "possession": "Maintain ball control",
        "defense": "Stay organized defensively",
        "attacking": "Look for scoring opportunities",
    }
)
DEFAULT_GENERIC_ADVICE = "Focus on fundamentals"


_MOBA = (
    # Lane positioning
    Principle(
        category="positioning",
        keywords=("minion", "lane", "safe", "distance"),
        valid_advice=(
            "Stay behind minions",
            "Maintain safe distance",
            "Hold the wave near tower",
        ),
        invalid_patterns=("never retreat", "tank minions"),
        corrections={
            "never retreat": "Back off when the enemy jungler is missing",
            "tank minions": "Stay behind your minion wave",
        },
    ),
    # Map positioning
    Principle(
        category="positioning",
        keywords=("position", "map", "ward", "vision", "engage"),
        valid_advice=(
            "Ward river bushes",
            "Position for objectives",
            "Group with team",
        ),
        invalid_patterns=(
            "engage without vision",
            "chase kills",
            "always engage",
            "ignore map",
        ),
        corrections={
            "engage without vision": "Ward before engaging",
            "chase kills": "Focus on objectives",
        },
    ),
    Principle(
        category="itemization",
        keywords=("item", "build", "buy", "gold", "shop", "upgrade"),
        valid_advice=(
            "Build armor against AD",
            "Buy magic resist",
            "Prioritize core items",
            "Ward instead of damage",
        ),
        invalid_patterns=(
            "build same every game",
            "always same build",
            "ignore enemy comp",
        ),
        corrections={
            "build same every game": "Adapt to enemy composition",
            "ignore enemy comp": "Check enemy builds before buying",
        },
    ),
    Principle(
        category="teamfight",
        keywords=("fight", "team", "engage", "disengage", "focus", "target"),
        valid_advice=(
            "Focus carry targets",
            "Protect your ADC",
            "Wait for initiation",
            "Disengage when low",
        ),
        invalid_patterns=("1v5 engage", "fight without team", "chase into jungle"),
        corrections={
            "1v5 engage": "Wait for team coordination",
            "chase into jungle": "Let them go and take objectives",
        },
    ),
)

_FIGHTING = (
    Principle(
        category="fundamentals",
        keywords=("block", "punish", "frame", "spacing", "neutral", "combo"),
        valid_advice=(
            "Block low attacks",
            "Punish unsafe moves",
            "Maintain proper spacing",
            "Practice anti-airs",
            "Learn frame data",
        ),
        invalid_patterns=(
            "button mashing",
            "always aggressive",
            "mash buttons",
            "always attack",
            "ignore defense",
        ),
        corrections={
            "button mashing": "Focus on precise inputs",
            "always aggressive": "Mix offense with defense",
        },
    ),
    Principle(
        category="mixups",
        keywords=("mix", "overhead", "throw", "pressure", "reset", "setup"),
        valid_advice=(
            "Mix highs and lows",
            "Use throw techs",
            "Create frame traps",
            "Reset to neutral",
        ),
        invalid_patterns=(
            "repetitive offense",
            "same combo always",
            "predictable patterns",
        ),
        corrections={"repetitive offense": "Vary your attack patterns"},
    ),
)

_SPORT = (
    Principle(
        category="possession",
        keywords=("pass", "possession", "ball", "control", "tempo", "build"),
        valid_advice=(
            "Maintain possession",
            "Pass to open players",
            "Control game tempo",
            "Build from defense",
            "Switch play wide",
        ),
        invalid_patterns=(
            "rush forward",
            "ignore passing",
            "always sprint",
            "long ball only",
            "ignore midfield",
        ),
        corrections={
            "rush forward": "Build play patiently",
            "ignore passing": "Use short passes to maintain control",
        },
    ),
    Principle(
        category="defense",
        keywords=("defend", "pressure", "tackle", "cover", "shape", "compact"),
        valid_advice=(
            "Press high",
            "Maintain defensive shape",
            "Cover passing lanes",
            "Track runner",
        ),
        invalid_patterns=(
            "dive in",
            "chase ball",
            "always tackle",
            "break formation",
            "ball watching",
        ),
        corrections={
            "dive in": "Stay disciplined in defense",
            "chase ball": "Maintain positional discipline",
        },
    ),
    Principle(
        category="attacking",
        keywords=("attack", "cross", "shoot", "run", "overlap", "finish"),
        valid_advice=(
            "Make overlapping runs",
            "Cross early",
            "Shoot when in box",
            "Create width",
        ),
        invalid_patterns=(
            "selfish play",
            "shoot from anywhere",
            "never pass",
            "static attack",
        ),
        corrections={"selfish play": "Look for better positioned teammates"},
    ),
)

SYLLABUS: Mapping[str, tuple[Principle, ...]] = MappingProxyType(
    {"moba": _MOBA, "fighting": _FIGHTING, "sport": _SPORT}
)


def get_principles(
    game_category: str, syllabus: Mapping[str, tuple[Principle, ...]] = SYLLABUS
) -> tuple[Principle, ...]:
    """Principles for a category; unknown categories get an empty rule set."""
    return tuple(syllabus.get(game_category, ()))


def get_generic_advice(category: str) -> str:
    return GENERIC_ADVICE.get(category, DEFAULT_GENERIC_ADVICE)
