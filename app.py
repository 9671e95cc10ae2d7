"""
Divot Lab — Streamlit Dashboard

Run with:
    .venv/bin/streamlit run app.py
"""
from __future__ import annotations

import math
import sys
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

sys.path.insert(0, str(Path(__file__).parent / "src"))

from divot_lab.charts import NEGATIVE_COLOR, POSITIVE_COLOR
from divot_lab.client import DataGolfClient
from divot_lab.config import Settings
from divot_lab.field_strength import playing_style
from divot_lab.formatting import format_percent, format_sg, short_name
from divot_lab.models import parse_iso_date
from divot_lab.pipeline import SOURCES, LabDataLoader, LoadCycleResult, fallback_result
from divot_lab.predictions import PredictionsToggle
from divot_lab.tournament import format_tournament_date, end_date, upcoming_date_label

SETTINGS = Settings.from_env()
SERIES_COLORS = ["#5BBF85", "#5A8FA8", "#E76F51", "#DDA15E", "#B392AC"]
TIER_COLORS = {"1-3": "#5BBF85", "4-10": "#5A8FA8", "11-15": "#808080"}


# ──────────────────────────────────────────────
# Cached data loader
# ──────────────────────────────────────────────
@st.cache_data(ttl=SETTINGS.refresh_seconds, show_spinner=False)
def load_lab() -> LoadCycleResult:
    try:
        client = DataGolfClient(api_key=SETTINGS.api_key, cache_dir=SETTINGS.cache_dir)
    except KeyError:
        return fallback_result()
    return LabDataLoader(client, tour=SETTINGS.tour).load()


def _toggle_for(result: LoadCycleResult) -> PredictionsToggle:
    toggle = result.predictions.toggle()
    toggle.select(st.session_state.get("pred_source", "live"))
    return toggle


# ──────────────────────────────────────────────
# Sections
# ──────────────────────────────────────────────
def render_banner(result: LoadCycleResult) -> None:
    t = result.tournament
    label = {"UPCOMING": "Upcoming", "LIVE": "Live"}.get(t.label or "", "This Week")
    if t.label == "LIVE" and t.current_round:
        label += f" · R{t.current_round}"
    st.caption(label.upper())
    st.header(t.event_name)
    details = [c for c in [t.course.replace(";", "; "), f"{t.field_size} players" if t.field_size else ""] if c]
    if details:
        st.markdown(" · ".join(details))
    if t.label == "UPCOMING":
        st.caption(upcoming_date_label(t.start_date))
    else:
        start_d = parse_iso_date(t.start_date)
        if start_d:
            st.caption(format_tournament_date(t.start_date, end_date(start_d).isoformat()))


def render_field_strength(result: LoadCycleResult) -> None:
    fs = result.field_strength
    st.subheader("Field Strength")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Rating", f"{fs.rating_display}/10", fs.label, delta_color="off")
    c2.metric("Elite (SG 1.5+)", fs.elite_count)
    c3.metric("Top Tier (SG 1.0+)", fs.top_tier)
    c4.metric("Top-20 Avg SG", format_sg(fs.top20_avg))
    st.progress(min(1.0, fs.rating / 10))


def render_leaderboard(result: LoadCycleResult) -> None:
    t = result.tournament
    if result.leaderboard:
        st.subheader(f"🔴 Live Scores · {t.event_name}")
        df = pd.DataFrame([{
            "Pos": row.position,
            "Player": row.player_name,
            "Score": row.score,
            "Today": row.today,
            "Thru": row.thru,
            **{f"R{i}": score if score is not None else "-" for i, score in enumerate(row.rounds, 1)},
        } for row in result.leaderboard])
        st.dataframe(df, hide_index=True, use_container_width=True, height=600)
        return

    st.subheader(f"Field · {t.event_name}")
    field = sorted(
        result.roster,
        key=lambda p: (p.sg_total is None, -(p.sg_total or 0.0)),
    )
    if not field:
        st.info("Field not yet available")
        return
    df = pd.DataFrame([{
        "#": i,
        "Player": p.player_name,
        "DG Rating": format_sg(p.sg_total) if p.sg_total is not None else "—",
        "Source": (p.skill_source or "field").title(),
    } for i, p in enumerate(field, 1)])
    st.dataframe(df, hide_index=True, use_container_width=True, height=400)


def render_predictions(result: LoadCycleResult) -> None:
    toggle = _toggle_for(result)
    view = toggle.view()
    title = "Live Predictions" if view.source == "live" else "Pre-Tournament Predictions"
    st.subheader(f"{title} · {view.event_name or 'Current Tournament'}")

    if view.stale:
        st.info("Predictions will be available Tuesday/Wednesday of event week.")
        return
    if view.is_empty:
        st.info("No predictions available yet")
        return

    if view.toggle_label and st.button(view.toggle_label, key="pred_toggle"):
        st.session_state.pred_source = toggle.toggle().source
        st.rerun()

    df = pd.DataFrame([{
        "Rank": i,
        "Player": row.player_name,
        "Win %": format_percent(row.win),
        "Top 5 %": format_percent(row.top_5),
        "Top 10 %": format_percent(row.top_10),
        "Top 20 %": format_percent(row.top_20),
        "Make Cut %": format_percent(row.make_cut),
    } for i, row in enumerate(view.rows, 1)])
    st.dataframe(df, hide_index=True, use_container_width=True)


def render_top_players(result: LoadCycleResult) -> None:
    ranking = result.charts.ranking
    if ranking is None:
        return
    by_name = {p.player_name: p for p in result.roster}
    st.subheader("Top 10 by SG: Total")
    df = pd.DataFrame([{
        "Player": bar.player_name,
        "Style": playing_style(by_name[bar.player_name]).name,
        "SG Total": format_sg(bar.value),
        "OTT": format_sg(by_name[bar.player_name].sg_ott),
        "APP": format_sg(by_name[bar.player_name].sg_app),
        "ARG": format_sg(by_name[bar.player_name].sg_arg),
        "PUTT": format_sg(by_name[bar.player_name].sg_putt),
    } for bar in ranking.bars])
    st.dataframe(df, hide_index=True, use_container_width=True)


def render_charts(result: LoadCycleResult) -> None:
    charts = result.charts
    if charts.radar is None:
        st.info("No player data available")
        return

    col_a, col_b = st.columns(2)

    with col_a:
        st.markdown("#### Skill Radar · Top 5")
        radar = charts.radar
        fig = go.Figure()
        theta = [math.degrees(a) for a in radar.angles]
        for i, s in enumerate(radar.series):
            fig.add_trace(go.Scatterpolar(
                r=list(s.radii) + [s.radii[0]],
                theta=theta + [theta[0]],
                mode="lines+markers",
                name=short_name(s.player_name),
                line_color=SERIES_COLORS[i % len(SERIES_COLORS)],
                fill="toself",
                opacity=0.7,
                text=[format_sg(v) for v in s.values] + [format_sg(s.values[0])],
            ))
        fig.update_layout(
            polar=dict(
                radialaxis=dict(range=[-1, 1], showticklabels=False),
                angularaxis=dict(
                    tickmode="array",
                    tickvals=theta,
                    ticktext=list(radar.labels),
                    direction="clockwise",
                    rotation=90,
                ),
            ),
            margin=dict(l=30, r=30, t=20, b=20),
            height=380,
        )
        st.plotly_chart(fig, use_container_width=True)

    with col_b:
        st.markdown("#### Putting vs Tee-to-Green · Top 15")
        sc = charts.scatter
        fig = go.Figure()
        for tier, color in TIER_COLORS.items():
            pts = [p for p in sc.points if p.tier == tier]
            if not pts:
                continue
            fig.add_trace(go.Scatter(
                x=[p.x for p in pts],
                y=[p.y for p in pts],
                mode="markers+text",
                name=f"Rank {tier}",
                marker=dict(color=color, size=12),
                text=[str(p.rank) for p in pts],
                textfont=dict(size=8, color="#0A0A0A"),
                hovertext=[f"{short_name(p.player_name)} (#{p.rank})" for p in pts],
                hoverinfo="text",
            ))
        fig.add_hline(y=0, line_dash="dot", opacity=0.4)
        fig.add_vline(x=0, line_dash="dot", opacity=0.4)
        fig.update_layout(
            xaxis=dict(title="SG: Putting", range=list(sc.x_range)),
            yaxis=dict(title="SG: Tee-to-Green", range=list(sc.y_range)),
            margin=dict(l=0, r=10, t=20, b=30),
            height=380,
        )
        st.plotly_chart(fig, use_container_width=True)

    col_c, col_d = st.columns(2)

    with col_c:
        st.markdown("#### SG: Total · Top 10")
        bars = charts.ranking.bars
        fig = go.Figure(go.Bar(
            x=[short_name(b.player_name) for b in bars],
            y=[b.height for b in bars],
            marker_color=[b.color for b in bars],
            text=[format_sg(b.value) for b in bars],
            textposition="outside",
        ))
        fig.update_layout(
            yaxis=dict(range=[-1.15, 1.15], showticklabels=False, zeroline=True),
            margin=dict(l=0, r=10, t=20, b=30),
            height=320,
        )
        st.plotly_chart(fig, use_container_width=True)

    with col_d:
        st.markdown("#### Average SG by Category · Top 10")
        line = charts.categories
        fig = go.Figure(go.Scatter(
            x=[p.x for p in line.points],
            y=[p.average for p in line.points],
            mode="lines+markers+text",
            line_color=POSITIVE_COLOR,
            marker=dict(
                size=10,
                color=[POSITIVE_COLOR if p.average >= 0 else NEGATIVE_COLOR for p in line.points],
            ),
            text=[format_sg(p.average) for p in line.points],
            textposition="top center",
        ))
        fig.update_layout(
            xaxis=dict(
                range=[0, 1],
                tickmode="array",
                tickvals=[p.x for p in line.points],
                ticktext=[p.label for p in line.points],
            ),
            yaxis=dict(range=[-line.bound * 1.15, line.bound * 1.15], zeroline=True),
            margin=dict(l=0, r=10, t=20, b=30),
            height=320,
        )
        st.plotly_chart(fig, use_container_width=True)


# ──────────────────────────────────────────────
# Page
# ──────────────────────────────────────────────
st.set_page_config(page_title="Divot Lab", layout="wide")

with st.sidebar:
    st.markdown("**The Lab**")
    if st.button("↺ Refresh live data", use_container_width=True):
        st.cache_data.clear()
        st.session_state.pop("pred_source", None)
        st.rerun()

with st.spinner("Loading lab data…"):
    lab = load_lab()

with st.sidebar:
    for source in SOURCES:
        ok = source in lab.sources_ok
        st.markdown(f"{'✅' if ok else '❌'} {source.replace('_', ' ').title()}")
    st.caption(f"Updated: {lab.loaded_at:%Y-%m-%d %H:%M} UTC")

if lab.is_fallback:
    st.warning("Live data is unavailable right now. Showing placeholder values.")

render_banner(lab)
st.divider()
render_field_strength(lab)
st.divider()
render_leaderboard(lab)
st.divider()
render_predictions(lab)
st.divider()
render_top_players(lab)
render_charts(lab)
