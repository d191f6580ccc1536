"""
Streamlit Dashboard for Rebound Edge
Player rebound probability calculator: probability, fair odds, quarter Kelly
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from dashboard.utils import (
    api_get,
    api_post,
    american_odds_text,
    parse_odds,
    probability_text,
    quarter_kelly_text,
    sidebar_api_key,
)

st.set_page_config(
    page_title="Rebound Edge",
    page_icon="🏀",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
    <style>
    .stApp { background-color: black; color: white; }
    section[data-testid="stSidebar"] { background-color: #333333; }
    .stTextInput input, .stNumberInput input {
        background-color: #333333; color: white; border: 1px solid #555555;
    }
    .stButton button { background-color: #555555; color: white; border: none; }
    .stButton button:hover { background-color: #777777; }
    </style>
""", unsafe_allow_html=True)

sidebar_api_key()

st.title("Player Rebound Probability Calculator")


# ==============================================================================
# INPUT FORM
# ==============================================================================

with st.sidebar:
    search = st.text_input("Search Players:", value="")
    picked = ""
    if search.strip():
        found = api_get("/api/athletes", params={"q": search.strip(), "limit": 50})
        if found and found["athletes"]:
            picked = st.selectbox("Matches:", found["athletes"])
        elif found is not None:
            st.caption(f"No players match {search.strip()!r}.")

    with st.form("rebound_form"):
        player = st.text_input("Enter Player Name:", value=picked)
        threshold = st.number_input("Rebound Threshold:", min_value=1, value=None, step=1)
        sb_odds_raw = st.text_input("Enter Sports Book Odds:", value="")
        submitted = st.form_submit_button("Calculate")

if submitted:
    try:
        sb_odds = parse_odds(sb_odds_raw)
    except ValueError:
        st.error("Sports book odds must be a non-zero number, e.g. -120 or +150.")
        st.stop()

    if not player.strip() or threshold is None:
        st.warning("Enter a player name and a rebound threshold.")
        st.stop()

    payload = {"athlete": player.strip(), "threshold": int(threshold)}
    if sb_odds is not None:
        payload["sportsbook_odds"] = sb_odds

    # Only the latest successful result is kept for re-renders
    st.session_state["result"] = api_post("/api/rebounds/evaluate", payload)

result = st.session_state.get("result")
if not result:
    st.stop()


# ==============================================================================
# RESULTS
# ==============================================================================

st.write(probability_text(result))
st.write(american_odds_text(result))
qk = quarter_kelly_text(result)
if qk:
    st.write(qk)

prob = result["probability"]
with st.expander("Model details"):
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("λ ORB", f"{prob['rates']['lambda_orb']:.2f}")
    c2.metric("λ DRB", f"{prob['rates']['lambda_drb']:.2f}")
    c3.metric("Max TRB considered", prob["max_trb_considered"])
    hit_rate = prob.get("historical_hit_rate")
    c4.metric("Historical hit rate", f"{hit_rate:.1%}" if hit_rate is not None else "—")
    if prob.get("untruncated_probability") is not None:
        st.caption(
            f"Untruncated tail: {prob['untruncated_probability']:.4f} "
            f"(gap {prob['untruncated_probability'] - prob['probability']:.2e})"
        )
    stake = result.get("stake")
    if stake:
        st.caption(
            f"Sports book implied probability: {stake['implied_probability']:.4f} "
            f"(model {prob['probability']:.4f})"
        )


# ==============================================================================
# REBOUNDS CHART
# ==============================================================================

df = pd.DataFrame(prob["games"])
df = df[df["rebounds"].notna()]
if df.empty:
    st.info("No rebound history to plot.")
    st.stop()

df["game_date"] = pd.to_datetime(df["game_date"])
df["bar_color"] = df["met_threshold"].map({True: "green", False: "red"})

fig = go.Figure()
fig.add_trace(go.Bar(
    x=df["game_date"],
    y=df["rebounds"],
    marker_color=df["bar_color"],
    marker_line_width=0,
))
fig.add_hline(y=prob["threshold"], line_dash="dash", line_color="blue")
fig.update_layout(
    title=dict(text="Player Rebounds Per Game", x=0.5, font=dict(color="white")),
    xaxis_title="Game Date",
    yaxis_title="Total Rebounds",
    bargap=0,
    height=400,
    showlegend=False,
    plot_bgcolor="black",
    paper_bgcolor="black",
    font=dict(color="white", size=15),
    margin=dict(l=10, r=10, t=50, b=10),
)
st.plotly_chart(fig, use_container_width=True)
