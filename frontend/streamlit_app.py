"""Streamlit kiosk for the esports coaching booth."""

from __future__ import annotations

import sys
from pathlib import Path

import altair as alt
import streamlit as st
from pydantic import ValidationError

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from esports_coach.booth import BoothState
from esports_coach.config import settings
from esports_coach.main import KEY_MOMENT_EVERY, STATS_EVERY, game_phase
from esports_coach.models import GameContext, UserProfile
from esports_coach.services.llm import CoachingLLMService
from esports_coach.services.session_store import SessionStore
from esports_coach.services.simulation import LiveGameSimulator
from esports_coach.ui_utils import (
    format_duration,
    format_game_time,
    game_display_name,
    key_moment_icon,
    parse_session_error,
    summarize_sessions,
)

SESSION_STORE = SessionStore(ROOT_DIR / settings.SESSION_STORE_PATH)
STEP_SECONDS = 5
PLANNED_SECONDS = 600  # Phase boundaries assume a 10 minute booth game


def init_state() -> None:
    """Initialize Streamlit session state keys."""
    st.session_state.setdefault("screen", "signup")
    st.session_state.setdefault("booth", BoothState())
    st.session_state.setdefault("llm", CoachingLLMService())
    st.session_state.setdefault("simulator", LiveGameSimulator())
    st.session_state.setdefault("game_time", 0)
    st.session_state.setdefault("next_advice_at", 0.0)
    st.session_state.setdefault("stats_history", [])
    st.session_state.setdefault("recap", None)


def current_context() -> GameContext:
    booth: BoothState = st.session_state["booth"]
    session = booth.current_session
    game_time = st.session_state["game_time"]
    return GameContext(
        game_category=session.game_category,
        game_state=game_phase(session.game_category, game_time, PLANNED_SECONDS),
        game_time=game_time,
        stats=session.live_stats,
    )


def advance_game(seconds: int) -> None:
    """Advance the simulated game clock and collect advice/moments."""
    booth: BoothState = st.session_state["booth"]
    llm: CoachingLLMService = st.session_state["llm"]
    simulator: LiveGameSimulator = st.session_state["simulator"]
    session = booth.current_session

    for _ in range(seconds):
        st.session_state["game_time"] += 1
        tick = st.session_state["game_time"]
        if tick % STATS_EVERY == 0:
            booth.update_live_stats(simulator.next_stats(session.live_stats))
            st.session_state["stats_history"].append(
                {"second": tick, **session.live_stats.model_dump()}
            )
        if tick >= st.session_state["next_advice_at"]:
            advice = llm.get_coaching_advice("gameplay_situation", current_context())
            booth.add_ai_message(advice, format_game_time(tick))
            st.session_state["next_advice_at"] = tick + simulator.advice_interval()
        if tick % KEY_MOMENT_EVERY == 0:
            moment = simulator.maybe_key_moment(tick)
            if moment:
                booth.add_key_moment(moment)
        llm.monitor_session()


def render_signup() -> None:
    st.title("🎮 AI Coach Booth")
    st.caption("Sign up, play, and get a live AI coach in your ear.")
    with st.form("signup"):
        cols = st.columns(2)
        with cols[0]:
            name = st.text_input("Name")
            age = st.number_input("Age", min_value=13, max_value=120, value=18)
            gender = st.selectbox(
                "Gender", ["Male", "Female", "Non-binary", "Prefer not to say"]
            )
            location = st.text_input("Location")
            email = st.text_input("Email")
        with cols[1]:
            in_game_name = st.text_input("In-game name")
            current_rank = st.text_input("Current rank / stats")
            game_category = st.radio(
                "Game", ["moba", "fighting", "sport"], format_func=game_display_name
            )
            training_mode = st.radio(
                "Training mode",
                ["live", "post"],
                format_func=lambda m: "Live coaching" if m == "live" else "Post-game review",
            )
            voice_preference = st.selectbox(
                "Coach voice",
                ["Professional Coach", "Friendly Mentor", "Competitive Analyst", "Text Only"],
            )
        submitted = st.form_submit_button("Start playing")

    if not submitted:
        return
    try:
        profile = UserProfile(
            name=name,
            age=int(age),
            gender=gender,
            location=location,
            email=email,
            in_game_name=in_game_name,
            current_rank=current_rank,
            game_category=game_category,
            training_mode=training_mode,
            voice_preference=voice_preference,
        )
    except ValidationError as exc:
        for err in exc.errors():
            st.error(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        return

    booth: BoothState = st.session_state["booth"]
    booth.set_user(profile)
    booth.start_session()
    st.session_state["llm"].initialize_live_coaching(profile.game_category, profile)
    st.session_state["game_time"] = 0
    st.session_state["next_advice_at"] = st.session_state["simulator"].advice_interval()
    st.session_state["stats_history"] = []
    st.session_state["screen"] = "live"
    st.rerun()


def render_live() -> None:
    booth: BoothState = st.session_state["booth"]
    llm: CoachingLLMService = st.session_state["llm"]
    session = booth.current_session
    user = booth.user

    st.title(f"{game_display_name(session.game_category)} · {user.in_game_name}")
    mode = "Live AI" if llm.live else "Simulated"
    st.caption(f"Coach: {mode} · Game clock {format_game_time(st.session_state['game_time'])}")

    left, right = st.columns([2, 1], gap="large")
    with left:
        metric_cols = st.columns(3)
        metric_cols[0].metric("Accuracy", f"{round(session.live_stats.accuracy)}%")
        metric_cols[1].metric("APM", round(session.live_stats.apm))
        metric_cols[2].metric("Score", f"{session.live_stats.score:,}")

        history = st.session_state["stats_history"]
        if history:
            chart = (
                alt.Chart(alt.Data(values=history))
                .mark_line(point=True)
                .encode(
                    x=alt.X("second:Q", title="Game second"),
                    y=alt.Y("accuracy:Q", title="Accuracy (%)", scale=alt.Scale(domain=[0, 100])),
                )
                .properties(height=220)
            )
            st.altair_chart(chart, use_container_width=True)

        controls = st.columns(2)
        if controls[0].button(f"▶ Play {STEP_SECONDS}s"):
            advance_game(STEP_SECONDS)
            st.rerun()
        if controls[1].button("🏁 End game"):
            finish_game()
            st.rerun()

    with right:
        st.subheader("Coach feed")
        for message in reversed(session.ai_messages[-8:]):
            st.info(f"[{message.timestamp}] {message.message}")

        st.subheader("Ask the coach")
        for entry in session.chat_history[-6:]:
            with st.chat_message("user" if entry.sender == "user" else "assistant"):
                st.markdown(entry.message)
        question = st.chat_input("Ask a question")
        if question:
            booth.add_chat_message(question, "user")
            reply = llm.respond_to_chat(question, current_context())
            booth.add_chat_message(reply.text, "ai")
            if reply.audio:
                st.audio(reply.audio, format="audio/mpeg")
            st.rerun()


def finish_game() -> None:
    booth: BoothState = st.session_state["booth"]
    llm: CoachingLLMService = st.session_state["llm"]
    ended = booth.end_session(st.session_state["simulator"].final_stats())
    report = llm.end_session()
    analysis = llm.generate_post_game_analysis(ended, booth.key_moments, booth.user)
    SESSION_STORE.save_session(ended, booth.key_moments, report.errors)
    st.session_state["recap"] = {"analysis": analysis, "report": report}
    st.session_state["screen"] = "recap"


def render_recap() -> None:
    booth: BoothState = st.session_state["booth"]
    session = booth.current_session
    recap = st.session_state["recap"]
    analysis = recap["analysis"]
    report = recap["report"]
    final = session.final_stats

    st.title("📊 Post-game recap")
    st.caption(
        f"{game_display_name(session.game_category)} · "
        f"{format_duration(session.duration)} played"
    )
    st.metric("Overall score", final.overall_score)

    skills = [
        {"skill": "Attacking", "value": final.attacking},
        {"skill": "Defending", "value": final.defending},
        {"skill": "Decision making", "value": final.decision_making},
        {"skill": "Coach following", "value": final.coach_following},
    ]
    st.altair_chart(
        alt.Chart(alt.Data(values=skills))
        .mark_bar()
        .encode(
            x=alt.X("value:Q", title="Score", scale=alt.Scale(domain=[0, 100])),
            y=alt.Y("skill:N", title=None, sort=None),
        )
        .properties(height=180),
        use_container_width=True,
    )

    st.markdown(f"**Summary**: {analysis.summary}")
    cols = st.columns(2)
    with cols[0]:
        st.markdown("**Strengths**")
        for item in analysis.strengths:
            st.write(f"✅ {item}")
    with cols[1]:
        st.markdown("**Improve next**")
        for item in analysis.improvements:
            st.write(f"🎯 {item}")

    if analysis.drills:
        st.markdown("**Recommended drills**")
        for drill in analysis.drills:
            st.write(f"- **{drill.name}**: {drill.description}")

    if booth.key_moments:
        st.markdown("**Key moments**")
        for moment in booth.key_moments:
            xp = f" (+{moment.xp_gained} XP)" if moment.xp_gained else ""
            st.write(f"{key_moment_icon(moment.type)} [{moment.timestamp}] {moment.title}{xp}")

    with st.expander(f"Filtered coaching advice ({len(report.errors)})"):
        if report.errors:
            st.dataframe([parse_session_error(e) for e in report.errors], use_container_width=True)
        else:
            st.caption("No advice was filtered this session.")

    if st.button("Next visitor"):
        st.session_state["llm"].reset_for_next_user()
        booth.reset_to_signup()
        st.session_state["recap"] = None
        st.session_state["screen"] = "signup"
        st.rerun()


def render_operator_panel() -> None:
    with st.sidebar:
        st.subheader("Operator")
        summary = summarize_sessions(SESSION_STORE.list_sessions())
        if summary["rows"]:
            st.dataframe(summary["rows"], use_container_width=True)
            if summary["stats"]:
                st.metric("Average score", f"{summary['stats']['avg']:.1f}")
            st.metric("Filtered advice", summary["total_errors"])
        else:
            st.info("No finished sessions yet.")


st.set_page_config(page_title="AI Coach Booth", layout="wide")
init_state()
render_operator_panel()

screen = st.session_state["screen"]
if screen == "live" and st.session_state["booth"].current_session:
    render_live()
elif screen == "recap" and st.session_state["recap"]:
    render_recap()
else:
    render_signup()
