#!/usr/bin/env python3
"""Esports booth coach - headless session runner.

Usage:
    python -m esports_coach.main --name Nova --ign NovaX --game moba
    python -m esports_coach.main --game sport --ticks 300         # 5 simulated minutes
    python -m esports_coach.main --chat "How do I beat zoners?"   # Queue a player question
    python -m esports_coach.main --seed 7                         # Reproducible simulation
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Any, Optional

from esports_coach.booth import BoothState
from esports_coach.config import settings
from esports_coach.models import GameContext, UserProfile
from esports_coach.services.llm import CoachingLLMService
from esports_coach.services.session_store import SessionStore
from esports_coach.services.simulation import LiveGameSimulator, format_game_time

log = logging.getLogger(__name__)

STATS_EVERY = 3  # seconds
KEY_MOMENT_EVERY = 15  # seconds


def game_phase(game_category: str, tick: int, ticks: int) -> str:
    """Coarse game phase used for video sampling and prompts."""
    if game_category != "moba":
        return "playing"
    if tick < ticks / 3:
        return "laning"
    if tick < 2 * ticks / 3:
        return "playing"
    return "objective"


def chat_schedule(questions: list[str], ticks: int) -> dict[int, str]:
    """Spread queued chat questions evenly across the session."""
    return {
        max(1, ticks * (i + 1) // (len(questions) + 1)): question
        for i, question in enumerate(questions)
    }


def run_live_session(
    llm: CoachingLLMService,
    simulator: LiveGameSimulator,
    store: SessionStore,
    booth: BoothState,
    ticks: int,
    chat_questions: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Run one simulated booth session for the current visitor."""
    user = booth.user
    if user is None:
        raise ValueError("A visitor must sign up before a session can start")

    name = user.in_game_name
    session = booth.start_session()
    category = session.game_category
    log.info(f"[{name}] Starting: {category} session ({ticks}s, rank {user.current_rank})")

    live = llm.initialize_live_coaching(category, user)
    log.info(f"[{name}] Coach mode: {'live' if live else 'simulated'}")

    questions = chat_schedule(chat_questions or [], ticks)
    next_advice_at = simulator.advice_interval()

    for tick in range(1, ticks + 1):
        context = GameContext(
            game_category=category,
            game_state=game_phase(category, tick, ticks),
            game_time=tick,
            stats=session.live_stats,
        )

        if tick % STATS_EVERY == 0:
            booth.update_live_stats(simulator.next_stats(session.live_stats))

        if tick >= next_advice_at:
            advice = llm.get_coaching_advice("gameplay_situation", context)
            booth.add_ai_message(advice, format_game_time(tick))
            log.info(f"[{name}] [{format_game_time(tick)}] Coach: {advice}")
            next_advice_at = tick + simulator.advice_interval()

        if tick % KEY_MOMENT_EVERY == 0:
            moment = simulator.maybe_key_moment(tick)
            if moment:
                booth.add_key_moment(moment)
                log.info(f"[{name}] [{moment['timestamp']}] Key moment: {moment['title']}")

        if tick in questions:
            question = questions[tick]
            booth.add_chat_message(question, "user")
            reply = llm.respond_to_chat(question, context)
            booth.add_chat_message(reply.text, "ai")
            log.info(f"[{name}] Player: {question}")
            log.info(f"[{name}] Coach (conf={reply.confidence:.2f}): {reply.text}")
            if reply.audio and settings.SAVE_TTS_AUDIO:
                audio_dir = Path("data/audio")
                audio_dir.mkdir(parents=True, exist_ok=True)
                (audio_dir / f"{session.id}_{tick}.mp3").write_bytes(reply.audio)

        llm.monitor_session()

    ended = booth.end_session(simulator.final_stats())
    report = llm.end_session()
    analysis = llm.generate_post_game_analysis(ended, booth.key_moments, user)
    store.save_session(ended, booth.key_moments, report.errors)

    for error in report.errors:
        log.warning(f"[{name}] Rejected advice: {error}")
    log.info(
        f"[{name}] === Session Complete: Score={ended.final_stats.overall_score}, "
        f"Advice={len(ended.ai_messages)}, Rejected={len(report.errors)}, "
        f"Cost=${report.metrics.session_cost:.4f} ==="
    )
    log.info(f"[{name}] Recap: {analysis.summary}")

    result = {
        "session_id": ended.id,
        "analysis": analysis,
        "report": report,
        "key_moments": list(booth.key_moments),
    }
    llm.reset_for_next_user()
    booth.reset_to_signup()
    return result


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Esports booth coach")
    parser.add_argument("--name", type=str, default="Booth Visitor")
    parser.add_argument("--ign", type=str, default="Player1", help="In-game name")
    parser.add_argument("--rank", type=str, default="Unranked")
    parser.add_argument("--game", choices=["moba", "fighting", "sport"], default="moba")
    parser.add_argument(
        "--voice",
        choices=["Professional Coach", "Friendly Mentor", "Competitive Analyst", "Text Only"],
        default="Text Only",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=settings.DEFAULT_TICKS,
        help="Simulated game seconds (default: 120)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulation")
    parser.add_argument(
        "--chat", action="append", default=[], help="Player question (repeatable)"
    )
    parser.add_argument("--store", type=str, default=settings.SESSION_STORE_PATH)
    args = parser.parse_args(argv)

    log.info(
        f"Config: game={args.game}, ticks={args.ticks}, voice={args.voice}, "
        f"seed={args.seed if args.seed is not None else 'random'}"
    )

    rng = random.Random(args.seed)
    booth = BoothState()
    booth.set_user(
        UserProfile(
            name=args.name,
            age=18,
            gender="Prefer not to say",
            location="Booth",
            email="visitor@booth.local",
            in_game_name=args.ign,
            current_rank=args.rank,
            game_category=args.game,
            voice_preference=args.voice,
        )
    )
    llm = CoachingLLMService(rng=rng)
    simulator = LiveGameSimulator(rng)
    store = SessionStore(args.store)

    run_live_session(llm, simulator, store, booth, args.ticks, args.chat)
    return 0


if __name__ == "__main__":
    sys.exit(main())
