#!/usr/bin/env python3
"""Analyze stored booth sessions: scores, advice volume and filtered advice."""

import sys
from collections import Counter
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from esports_coach.config import settings
from esports_coach.services.session_store import SessionStore
from esports_coach.ui_utils import parse_session_error, summarize_sessions


def analyze_sessions(path: str = settings.SESSION_STORE_PATH):
    store_path = Path(path)

    if not store_path.exists():
        print("No session store found. Run a booth session first.")
        return

    entries = SessionStore(store_path).list_sessions()
    if not entries:
        print("No sessions recorded yet.")
        return

    summary = summarize_sessions(entries)

    print(f"\n{'='*72}")
    print(f"BOOTH SESSION ANALYSIS ({len(entries)} sessions)")
    print(f"{'='*72}\n")

    print(f"{'#':<4} {'Started':<20} {'Player':<14} {'Game':<9} {'Score':<6} {'Advice':<7} {'Rejected':<8}")
    print("-" * 72)

    for row in summary["rows"]:
        score = row["Score"]
        if score is None:
            score_str = "-"
        elif score >= 90:
            score_str = f"\033[92m{score}\033[0m"  # Green
        elif score >= 80:
            score_str = f"\033[93m{score}\033[0m"  # Yellow
        else:
            score_str = f"\033[91m{score}\033[0m"  # Red
        print(
            f"{row['#']:<4} {row['Started']:<20} {row['Player'][:13]:<14} {row['Game']:<9} "
            f"{score_str:<6} {row['Advice']:<7} {row['Rejected']:<8}"
        )

    print("-" * 72)

    if summary["stats"]:
        stats = summary["stats"]
        print(f"\nStatistics:")
        print(f"  Best score:  {stats['best']:.0f}")
        print(f"  Worst score: {stats['worst']:.0f}")
        print(f"  Average:     {stats['avg']:.1f}")

    rejected = Counter(
        parse_session_error(error)["advice"]
        for entry in entries
        for error in entry.get("errors", [])
    )
    print(f"\nFiltered advice: {summary['total_errors']}")
    for advice, count in rejected.most_common(5):
        print(f"  {count}x  {advice}")

    print(f"\n{'='*72}\n")


if __name__ == "__main__":
    analyze_sessions(*sys.argv[1:2])
