"""Chopsticks Solver — Streamlit Dashboard.

Four-tab interactive dashboard for exploring a chopsticks solve:
  Tab 1 — Rank Heat Maps        (matplotlib, ranks + classifications)
  Tab 2 — Interactive Lookup    (Plotly, hover for state details + best move)
  Tab 3 — Self-Play Simulation  (rank-guided vs random policies)
  Tab 4 — Solver Report         (summary, move table, contested ranks)

Run:
    streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Chopsticks Solver",
    page_icon="✋",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_analysis_modules():
    """Import heavy analysis modules once (cached for the process lifetime)."""
    import pandas as pd

    from chopsticks.analysis.heat_maps import (
        plot_classification_heatmap,
        plot_rank_heatmap,
    )
    from chopsticks.analysis.plotly_lookup import build_rank_lookup_figure
    from chopsticks.analysis.simulator import (
        make_random_policy,
        make_rank_policy,
        simulate_games,
    )
    from chopsticks.analysis.strategy_report import (
        print_move_table,
        print_contested_ranks,
        print_solve_summary,
    )

    return {
        "pd": pd,
        "plot_rank_heatmap": plot_rank_heatmap,
        "plot_classification_heatmap": plot_classification_heatmap,
        "build_rank_lookup_figure": build_rank_lookup_figure,
        "make_random_policy": make_random_policy,
        "make_rank_policy": make_rank_policy,
        "simulate_games": simulate_games,
        "print_solve_summary": print_solve_summary,
        "print_move_table": print_move_table,
        "print_contested_ranks": print_contested_ranks,
    }


@st.cache_resource
def _run_solver(fingers_per_hand: int, switching_allowed: bool, skipping_allowed: bool):
    """Solve once per ruleset (cached on the three rule values)."""
    from chopsticks.solvers.solver import solve

    return solve(fingers_per_hand, switching_allowed, skipping_allowed)


# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("✋ Chopsticks Solver")
    st.markdown("---")

    fingers = st.slider(
        "Fingers per hand",
        min_value=2,
        max_value=10,
        value=5,
        step=1,
    )
    switching = st.checkbox("Switching allowed", value=True)
    skipping = st.checkbox(
        "Skipping allowed",
        value=False,
        disabled=not switching,
        help="A switch that leaves your hands unchanged (a pass).",
    )

    st.markdown("---")
    n_games = st.slider(
        "Self-play games",
        min_value=100,
        max_value=5_000,
        value=1_000,
        step=100,
    )

    st.markdown("---")
    st.caption("Hand set → Graph → Retrograde → Ranks")

# ─── Solve ────────────────────────────────────────────────────────────────────

with st.spinner(f"Solving {fingers}-finger chopsticks …"):
    result = _run_solver(fingers, switching, skipping)

counts = result.counts()
st.sidebar.success(
    f"{result.state_count} states | "
    + " | ".join(f"{label.value}: {n}" for label, n in counts.items())
)

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Rank Heat Maps",
        "Interactive Lookup",
        "Self-Play Simulation",
        "Solver Report",
    ]
)

m = _load_analysis_modules()
pd = m["pd"]
hand_labels = [f"{a}-{b}" for a, b in result.hand_set]

# ── Tab 1: Rank Heat Maps ─────────────────────────────────────────────────────

with tab1:
    st.header("Rank Heat Maps")
    st.caption(
        "Rows = hands of the side to move | Cols = opponent hands | "
        "Green = WIN or contested with only WIN exits, Red = LOSS"
    )

    st.subheader(f"Ranks — {result.ruleset.label()}")
    st.pyplot(m["plot_rank_heatmap"](result, show=False))

    st.markdown("---")

    st.subheader("Retrograde Classification")
    st.pyplot(m["plot_classification_heatmap"](result, show=False))

# ── Tab 2: Interactive Lookup ────────────────────────────────────────────────

with tab2:
    st.header("Interactive State Lookup")
    st.caption("Hover over any cell to see the state, classification, rank and best move.")
    st.plotly_chart(m["build_rank_lookup_figure"](result), use_container_width=True)

# ── Tab 3: Self-Play Simulation ──────────────────────────────────────────────

with tab3:
    st.header("Self-Play Simulation")
    st.caption(
        "Games start from 1-1 vs 1-1. Outcomes are from the first mover's view; "
        "games longer than 200 moves count as unfinished."
    )

    rank_policy = m["make_rank_policy"](result)
    random_policy = m["make_random_policy"](result)
    matchups = [
        ("Rank vs Random", rank_policy, random_policy),
        ("Random vs Rank", random_policy, rank_policy),
        ("Random vs Random", random_policy, random_policy),
    ]

    rows = []
    with st.spinner(f"Simulating {n_games:,} games per matchup …"):
        for label, first, second in matchups:
            sim = m["simulate_games"](result, first, second, n_games=n_games, seed=42)
            rows.append(
                {
                    "Matchup": label,
                    "Wins": sim.n_wins,
                    "Losses": sim.n_losses,
                    "Draws": sim.n_draws,
                    "Unfinished": sim.n_unfinished,
                    "Win rate": f"{sim.win_rate:.3f}",
                    "95% CI": f"[{sim.ci_95_low:.3f}, {sim.ci_95_high:.3f}]",
                    "Mean plies": f"{sim.mean_plies:.1f}",
                }
            )
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

# ── Tab 4: Solver Report ──────────────────────────────────────────────────────

with tab4:
    st.header("Solver Report")

    col1, col2 = st.columns(2)
    player_label = col1.selectbox("Side to move", hand_labels, index=hand_labels.index("1-1"))
    opponent_label = col2.selectbox("Opponent", hand_labels, index=hand_labels.index("1-1"))
    chosen = (
        result.hand_set[hand_labels.index(player_label)],
        result.hand_set[hand_labels.index(opponent_label)],
    )

    for section_fn, label, args in [
        (m["print_solve_summary"], "Summary", ()),
        (m["print_move_table"], "Moves From Selected State", (chosen,)),
        (m["print_contested_ranks"], "Contested Ranks", (10,)),
    ]:
        st.subheader(label)
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            section_fn(result, *args)
        st.code(buf.getvalue(), language=None)
