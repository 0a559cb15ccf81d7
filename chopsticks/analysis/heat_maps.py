"""Rank and classification heat maps for a chopsticks solve.

Two public data-builder functions return NumPy matrices that can be used
programmatically or passed to the plot helpers:

    build_rank_matrix(result)            — H×H float ranks in [0, 1]
    build_classification_matrix(result)  — H×H codes (see CLASS_CODES)

Two public plot functions render matplotlib figures:

    plot_rank_heatmap(result, ...)            — continuous RdYlGn rank map
    plot_classification_heatmap(result, ...)  — discrete WIN/LOSS/DRAW/CONTESTED map

Matrix convention (both builders):
    Shape  : (H, H) with H = len(result.hand_set)
    Rows   : side to move's hand-pair, in hand-set order
    Cols   : opponent's hand-pair, in hand-set order
    Cell   : value for state (row_pair, col_pair), i.e. index row*H + col
"""

from __future__ import annotations

import matplotlib
import matplotlib.axes
import matplotlib.colors
import matplotlib.figure
import matplotlib.patches
import matplotlib.pyplot as plt
import numpy as np

from chopsticks.engine.hands import pair_to_str
from chopsticks.solvers.classify import Classification
from chopsticks.solvers.solver import SolveResult

# ─── Constants ────────────────────────────────────────────────────────────────

CLASS_CODES: dict[Classification, int] = {
    Classification.LOSS: 0,
    Classification.CONTESTED: 1,
    Classification.DRAW: 2,
    Classification.WIN: 3,
}
"""Integer code per classification used in build_classification_matrix."""

_CLASS_COLORS: list[str] = ["#d62728", "#ffdd57", "#9e9e9e", "#2ca02c"]
_CLASS_LETTERS: dict[int, str] = {0: "L", 1: "", 2: "D", 3: "W"}

# Cell annotations become unreadable past this many hand-pairs per axis.
_ANNOTATE_MAX: int = 15


# ─── Colormaps ────────────────────────────────────────────────────────────────


def _make_class_cmap() -> matplotlib.colors.ListedColormap:
    """Red=LOSS, yellow=CONTESTED, grey=DRAW, green=WIN."""
    return matplotlib.colors.ListedColormap(_CLASS_COLORS)


def _make_rank_cmap() -> matplotlib.colors.Colormap:
    """RdYlGn gradient: red=rank 0 (LOSS), green=rank 1 (WIN, and anchored contested)."""
    return matplotlib.colormaps["RdYlGn"].copy()


# ─── Data builders ────────────────────────────────────────────────────────────


def build_rank_matrix(result: SolveResult) -> np.ndarray:
    """Return the (H, H) rank matrix of a solve.

    Row-major reshape of result.ranks, which is valid because
    index = player_rank * H + opponent_rank.
    """
    h = len(result.hand_set)
    return np.array(result.ranks, dtype=np.float64).reshape(h, h)


def build_classification_matrix(result: SolveResult) -> np.ndarray:
    """Return the (H, H) int8 matrix of classification codes (CLASS_CODES)."""
    h = len(result.hand_set)
    codes = np.array([CLASS_CODES[c] for c in result.classifications], dtype=np.int8)
    return codes.reshape(h, h)


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _label_axes(ax: matplotlib.axes.Axes, result: SolveResult) -> None:
    labels = [pair_to_str(p) for p in result.hand_set]
    fontsize = 8 if len(labels) <= _ANNOTATE_MAX else 6
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, fontsize=fontsize, rotation=90)
    ax.set_yticks(range(len(labels)))
    ax.set_yticklabels(labels, fontsize=fontsize)
    ax.set_xlabel("Opponent hands", fontsize=9)
    ax.set_ylabel("Hands of side to move", fontsize=9)


def _finish(
    fig: matplotlib.figure.Figure,
    show: bool,
    save_path: str | None,
) -> matplotlib.figure.Figure:
    plt.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()
    return fig


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_rank_heatmap(
    result: SolveResult,
    *,
    annotate: bool | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot every state's rank as a continuous heat map.

    Args:
        result:    SolveResult from solver.solve().
        annotate:  Write the rank into each cell.  Defaults to True when the
                   hand set is small enough to stay legible.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    data = build_rank_matrix(result)
    if annotate is None:
        annotate = data.shape[0] <= _ANNOTATE_MAX

    fig, ax = plt.subplots(figsize=(8, 7))
    fig.suptitle(f"State Ranks  ({result.ruleset.label()})", fontsize=13, fontweight="bold")
    im = ax.imshow(data, cmap=_make_rank_cmap(), vmin=0.0, vmax=1.0, aspect="auto")
    _label_axes(ax, result)

    if annotate:
        for r in range(data.shape[0]):
            for c in range(data.shape[1]):
                val = data[r, c]
                text_color = "black" if 0.25 < val < 0.75 else "white"
                ax.text(c, r, f"{val:.2f}", ha="center", va="center",
                        fontsize=6, color=text_color)

    plt.colorbar(
        im, ax=ax, label="Rank (WIN 1, LOSS 0, contested: WIN-exit share)",
        fraction=0.046, pad=0.04,
    )
    return _finish(fig, show, save_path)


def plot_classification_heatmap(
    result: SolveResult,
    *,
    annotate: bool | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the retrograde classification of every state.

    Args:
        result:    SolveResult from solver.solve().
        annotate:  Write W/L/D letters into resolved cells.  Defaults to True
                   for small hand sets.
        show:      If True, call plt.show().
        save_path: If not None, save to path.

    Returns:
        matplotlib.figure.Figure.
    """
    data = build_classification_matrix(result)
    if annotate is None:
        annotate = data.shape[0] <= _ANNOTATE_MAX

    fig, ax = plt.subplots(figsize=(8, 7))
    fig.suptitle(
        f"State Classification  ({result.ruleset.label()})", fontsize=13, fontweight="bold"
    )
    ax.imshow(data, cmap=_make_class_cmap(), vmin=-0.5, vmax=3.5, aspect="auto")
    _label_axes(ax, result)

    if annotate:
        for r in range(data.shape[0]):
            for c in range(data.shape[1]):
                letter = _CLASS_LETTERS[int(data[r, c])]
                if letter:
                    ax.text(c, r, letter, ha="center", va="center",
                            fontsize=7, color="white", fontweight="bold")

    handles = [
        matplotlib.patches.Patch(color=_CLASS_COLORS[code], label=label.value)
        for label, code in CLASS_CODES.items()
    ]
    ax.legend(handles=handles, loc="upper left", bbox_to_anchor=(1.01, 1.0), fontsize=8)
    return _finish(fig, show, save_path)
