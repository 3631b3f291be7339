"""Coaching verification layer.

Checks AI-generated coaching advice against the expert syllabus for the
session's game category. Matching is literal and case-insensitive:

1. Invalid-pattern pass: the first forbidden substring across all principles
   rejects the advice and substitutes a correction (or generic advice).
2. Positive pass: the first principle whose keyword/phrase score exceeds 0.3
   accepts the advice.
3. Generic pass: otherwise advice must use actionable language and avoid
   absolutes.

A verifier is owned by one coaching session and is not thread-safe.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from esports_coach.models import GameContext, Verdict
from esports_coach.syllabus import SYLLABUS, Principle, get_generic_advice, get_principles

log = logging.getLogger(__name__)

INVALID_CONFIDENCE = 0.3
MATCH_THRESHOLD = 0.3
GENERIC_CONFIDENCE = 0.6

ABSOLUTE_TERMS = ("always", "never", "impossible", "guaranteed")
ACTIONABLE_TERMS = ("try", "focus", "consider", "practice", "improve", "work on")

# (terms, max age in ms); checked in order, first tier hit decides.
TIME_SENSITIVE_TIERS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("engage", "attack", "push"), 3000),
    (("defend", "retreat", "back"), 5000),
    (("ward", "position", "farm"), 10000),
)

# (category, trigger term, appended clause)
ENHANCEMENTS: tuple[tuple[str, str, str], ...] = (
    ("positioning", "position", "Consider enemy threat ranges"),
    ("itemization", "buy", "Check enemy builds first"),
)


def _now_ms() -> float:
    return time.time() * 1000


class CoachingVerifier:
    """Verifies coaching advice for one game session."""

    def __init__(
        self,
        game_category: str,
        syllabus: Mapping[str, tuple[Principle, ...]] = SYLLABUS,
        clock: Callable[[], float] = _now_ms,
    ):
        self.game_category = game_category
        self.principles = get_principles(game_category, syllabus)
        self.clock = clock
        self._session_errors: list[str] = []
        if not self.principles:
            log.info(
                f"No syllabus for '{game_category}'; using generic validation only"
            )

    def verify_advice(
        self,
        advice: str,
        context: GameContext | Mapping[str, Any] | None = None,
    ) -> Verdict:
        """Verify one piece of advice against the syllabus.

        Args:
            advice: Raw advice text, typically an LLM response.
            context: Optional game context. Only used for diagnostics.

        Returns:
            A Verdict. Invalid-pattern hits go to the session error log, never raised.
        """
        lower_advice = advice.lower()

        for principle in self.principles:
            for pattern in principle.invalid_patterns:
                if pattern in lower_advice:
                    correction = self._find_correction(pattern, principle.corrections)
                    self._log_error(f"Invalid advice detected: {advice}", context)
                    return Verdict(
                        is_valid=False,
                        modified_advice=correction
                        or get_generic_advice(principle.category),
                        category=principle.category,
                        confidence=INVALID_CONFIDENCE,
                        warning=(
                            "Advice contradicts expert principles for "
                            f"{principle.category}"
                        ),
                    )

        for principle in self.principles:
            confidence = self._match_confidence(lower_advice, principle)
            if confidence > MATCH_THRESHOLD:
                return Verdict(
                    is_valid=True,
                    modified_advice=self._enhance_advice(advice, principle),
                    category=principle.category,
                    confidence=confidence,
                )

        is_valid = self._is_generally_valid(lower_advice)
        return Verdict(
            is_valid=is_valid,
            confidence=GENERIC_CONFIDENCE,
            warning=None if is_valid else "Advice not aligned with coaching principles",
        )

    def validate_time_sensitivity(
        self,
        advice: str,
        issued_at: float,
        current_game_time: Optional[float] = None,
    ) -> bool:
        """Return True if the advice is still actionable.

        `issued_at` is epoch milliseconds. `current_game_time` is accepted but
        not used for matching.
        """
        elapsed = self.clock() - issued_at
        lower_advice = advice.lower()

        for terms, max_delay in TIME_SENSITIVE_TIERS:
            if any(term in lower_advice for term in terms):
                return elapsed <= max_delay

        return True

    def get_session_errors(self) -> list[str]:
        """Snapshot of rejected advice for this session."""
        return list(self._session_errors)

    def reset_session(self) -> None:
        """Clear error tracking for the next booth visitor."""
        self._session_errors = []

    @staticmethod
    def _match_confidence(lower_advice: str, principle: Principle) -> float:
        max_score = len(principle.keywords) + len(principle.valid_advice)
        if max_score == 0:
            return 0.0

        score = sum(1 for keyword in principle.keywords if keyword in lower_advice)
        score += sum(2 for phrase in principle.valid_advice if phrase in lower_advice)
        return min(score / max_score, 1.0)

    @staticmethod
    def _find_correction(pattern: str, corrections: Mapping[str, str]) -> Optional[str]:
        for key, correction in corrections.items():
            if key in pattern or pattern in key:
                return correction
        return None

    @staticmethod
    def _enhance_advice(advice: str, principle: Principle) -> str:
        lower_advice = advice.lower()
        for category, trigger, clause in ENHANCEMENTS:
            if principle.category == category and trigger in lower_advice:
                return f"{advice} - {clause}"
        return advice

    @staticmethod
    def _is_generally_valid(lower_advice: str) -> bool:
        has_absolutes = any(term in lower_advice for term in ABSOLUTE_TERMS)
        has_actionable = any(term in lower_advice for term in ACTIONABLE_TERMS)
        return has_actionable and not has_absolutes

    def _log_error(
        self, error: str, context: GameContext | Mapping[str, Any] | None
    ) -> None:
        stamp = datetime.now(timezone.utc).isoformat()
        self._session_errors.append(f"{stamp}: {error}")

        game_context = _coerce_context(context)
        phase = game_context.game_state if game_context else None
        log.warning(
            f"Coaching verification error ({self.game_category}, "
            f"phase={phase or 'unknown'}): {error}"
        )


def _coerce_context(
    context: GameContext | Mapping[str, Any] | None,
) -> Optional[GameContext]:
    if context is None or isinstance(context, GameContext):
        return context
    try:
        return GameContext.model_validate(dict(context))
    except (ValidationError, TypeError, ValueError):
        return None
