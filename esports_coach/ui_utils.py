"""Helpers for the Streamlit kiosk."""

from __future__ import annotations

from typing import Any, Iterable

from esports_coach.services.simulation import format_game_time

GAME_DISPLAY_NAMES = {
    "moba": "MOBA",
    "fighting": "Fighting",
    "sport": "Sports",
}

KEY_MOMENT_ICONS = {
    "goal": "⚽",
    "defense": "🛡️",
    "missed_opportunity": "⚠️",
    "achievement": "🏆",
}

ERROR_MARKER = ": Invalid advice detected: "


def format_duration(ms: float | None) -> str:
    """Format a duration in milliseconds as m:ss."""
    if not ms:
        return "0:00"
    return format_game_time(int(ms) // 1000)


def game_display_name(category: str) -> str:
    return GAME_DISPLAY_NAMES.get(category, category.title() if category else "Unknown")


def key_moment_icon(moment_type: str) -> str:
    return KEY_MOMENT_ICONS.get(moment_type, "⭐")


def parse_session_error(entry: str) -> dict[str, str]:
    """Split a verifier log entry into timestamp and rejected advice."""
    if ERROR_MARKER in entry:
        timestamp, advice = entry.split(ERROR_MARKER, 1)
        return {"timestamp": timestamp, "advice": advice}
    timestamp, sep, rest = entry.partition(": ")
    if not sep:
        return {"timestamp": "", "advice": entry}
    return {"timestamp": timestamp, "advice": rest}


def summarize_sessions(entries: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Summarize stored sessions for the operator dashboard."""
    rows: list[dict[str, Any]] = []
    scores: list[float] = []
    total_errors = 0
    for idx, entry in enumerate(entries, 1):
        session = entry.get("session", {}) if isinstance(entry.get("session"), dict) else {}
        final = session.get("final_stats") or {}
        errors = entry.get("errors") or []
        overall = final.get("overall_score")
        rows.append(
            {
                "#": idx,
                "Player": session.get("user_id", ""),
                "Game": game_display_name(session.get("game_category", "")),
                "Started": str(session.get("start_time", ""))[:19].replace("T", " "),
                "Duration": format_duration(session.get("duration")),
                "Score": overall,
                "Advice": len(session.get("ai_messages") or []),
                "Rejected": len(errors),
            }
        )
        total_errors += len(errors)
        if isinstance(overall, (int, float)):
            scores.append(float(overall))

    stats = None
    if scores:
        stats = {
            "best": max(scores),
            "worst": min(scores),
            "avg": sum(scores) / len(scores),
        }

    return {"rows": rows, "stats": stats, "total_errors": total_errors}
