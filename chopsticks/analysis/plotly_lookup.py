"""Interactive Plotly state lookup for a chopsticks solve.

Two public functions:

    build_rank_lookup_figure(result)
        — H×H rank heatmap; hover over a cell to see the state, its
          classification, rank, move count and best move.
    save_lookup_html(fig, path)
        — Export the figure to a self-contained HTML file.

Figures open in a browser via ``fig.show()`` or embed in Jupyter notebooks.
"""

from __future__ import annotations

import plotly.graph_objects as go

from chopsticks.analysis.heat_maps import build_rank_matrix
from chopsticks.engine.hands import pair_to_str
from chopsticks.engine.state_index import state_to_str
from chopsticks.solvers.solver import SolveResult

_RANK_COLORSCALE: str = "RdYlGn"


# ─── Hover text builder ───────────────────────────────────────────────────────


def _build_hover(result: SolveResult) -> list[list[str]]:
    """Return an H×H list of HTML hover strings, one per state.

    Each cell shows State, Classification, Rank, Moves (distinct / raw) and,
    for non-terminal states, the best move with its value to the mover.
    """
    h = len(result.hand_set)
    rows: list[list[str]] = []
    for r in range(h):
        row: list[str] = []
        for c in range(h):
            index = r * h + c
            state = result.state_of(index)
            lines = [
                f"State: <b>{state_to_str(state)}</b>",
                f"Class: {result.classifications[index].value}",
                f"Rank: <b>{result.ranks[index]:.4f}</b>",
                f"Moves: {len(result.graph.children[index])} distinct / "
                f"{result.graph.total_moves(index)} raw",
            ]
            best = result.best_move(state)
            if best is not None:
                kind, child, value = best
                lines.append(
                    f"Best: {kind.name.lower()} → {state_to_str(child)} ({value:.3f})"
                )
            row.append("<br>".join(lines))
        rows.append(row)
    return rows


# ─── Public figure builder ────────────────────────────────────────────────────


def build_rank_lookup_figure(result: SolveResult) -> go.Figure:
    """Build an interactive Plotly heatmap of every state's rank.

    Rows are the hands of the side to move, columns the opponent's hands, in
    hand-set order.  Hover text gives the full state details.

    Args:
        result: SolveResult from solver.solve().

    Returns:
        go.Figure with one heatmap trace.
    """
    labels = [pair_to_str(p) for p in result.hand_set]
    data = build_rank_matrix(result)

    trace = go.Heatmap(
        z=data.tolist(),
        x=labels,
        y=labels,
        colorscale=_RANK_COLORSCALE,
        zmin=0.0,
        zmax=1.0,
        text=_build_hover(result),
        hovertemplate="%{text}<extra></extra>",
        colorbar={"title": "Rank"},
        name="rank",
    )

    fig = go.Figure(data=[trace])
    fig.update_layout(
        title={"text": f"Chopsticks State Lookup  ({result.ruleset.label()})"},
        height=700,
        width=800,
    )
    fig.update_xaxes(title_text="Opponent hands", type="category")
    fig.update_yaxes(title_text="Hands of side to move", type="category", autorange="reversed")
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    Plotly JS is loaded from the CDN so the file itself remains compact.

    Args:
        fig:  Any go.Figure produced by this module.
        path: Destination file path (e.g. ``"chopsticks_lookup.html"``).
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from chopsticks.solvers.solver import solve

    fingers = int(sys.argv[1]) if len(sys.argv) > 1 else 5
    print(f"Solving chopsticks with {fingers} fingers per hand …")
    solved = solve(fingers)
    save_lookup_html(build_rank_lookup_figure(solved), "chopsticks_lookup.html")
    print("Saved: chopsticks_lookup.html")
