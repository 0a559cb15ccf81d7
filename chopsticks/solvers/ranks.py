"""
Continuous rank for every state via one sparse linear solve.

Resolved states are pinned to their classification score:

    rank[i] = score(i)                      (WIN 1.0, LOSS 0.0, DRAW 0.5)

A CONTESTED state with k raw moves (duplicates counted) takes the average
rank of the states its moves lead to:

    k * rank[i] - sum_j count(i -> j) * rank[j] = 0

Every contested row is weakly diagonally dominant. The system is nonsingular
as long as each contested state can reach a pinned state through contested
states. Contested states that cannot (closed contested cycles) are pinned to
0.5 before the solve.

The average does not flip perspective between plies, so a contested rank is
not the mover's prospect. It is the chance that a uniformly random line of
play leaves the contested region into a WIN-labelled state (whoever is to
move there), with cycle-pinned states counting 0.5. A contested state never
has a LOSS child, and no move leads to the all-zero DRAW state, so every
exit is a WIN: a contested state ranks exactly 1.0 unless some contested
path drifts into a cycle-pinned state, and never below 0.5.
"""

from __future__ import annotations

import logging
import warnings
from collections import deque

import numpy as np
import scipy.sparse
import scipy.sparse.linalg
from scipy.sparse.linalg import MatrixRankWarning

from chopsticks.engine.errors import SolveFailure
from chopsticks.solvers.classify import Classification
from chopsticks.solvers.graph import GameGraph

logger = logging.getLogger(__name__)

CYCLE_RANK: float = 0.5
"""Rank given to contested states with no path to a resolved state."""

RANK_TOLERANCE: float = 1e-9
"""Allowed numerical excursion outside [0, 1] before the solve is rejected."""


def find_closed_contested(
    graph: GameGraph,
    classifications: tuple[Classification, ...],
) -> np.ndarray:
    """Return a boolean mask of contested states that never reach a resolved state.

    Walks backward from every resolved state through contested parents; any
    contested state not visited has no escaping path.
    """
    n = graph.state_count
    contested = np.array([c is Classification.CONTESTED for c in classifications], dtype=bool)
    anchored = ~contested
    queue: deque[int] = deque(int(i) for i in np.flatnonzero(anchored))

    while queue:
        current = queue.popleft()
        for parent in graph.parents[current]:
            if not anchored[parent]:
                anchored[parent] = True
                queue.append(parent)

    closed = contested & ~anchored
    # A contested state with no moves cannot occur (terminal states are resolved),
    # but treat one as closed rather than emit an all-zero row.
    for i in np.flatnonzero(contested & anchored):
        if graph.total_moves(int(i)) == 0:
            closed[i] = True
    return closed


def build_rank_system(
    graph: GameGraph,
    pinned: np.ndarray,
) -> tuple[scipy.sparse.csr_matrix, np.ndarray]:
    """Assemble the sparse matrix A and right-hand side b of A @ rank = b.

    Args:
        graph:  Move graph.
        pinned: float array; NaN for states to solve, otherwise the
                fixed rank of that state.
    """
    n = graph.state_count
    rows: list[int] = []
    cols: list[int] = []
    vals: list[float] = []
    rhs = np.zeros(n)

    for i in range(n):
        if not np.isnan(pinned[i]):
            rows.append(i)
            cols.append(i)
            vals.append(1.0)
            rhs[i] = pinned[i]
            continue

        k = graph.total_moves(i)
        rows.append(i)
        cols.append(i)
        vals.append(float(k))
        for child, count in zip(graph.children[i], graph.move_counts[i]):
            rows.append(i)
            cols.append(child)
            vals.append(-float(count))

    # COO sums duplicate (row, col) entries, so a self-loop folds into the diagonal.
    matrix = scipy.sparse.coo_matrix((vals, (rows, cols)), shape=(n, n)).tocsr()
    return matrix, rhs


def compute_ranks(
    graph: GameGraph,
    classifications: tuple[Classification, ...],
) -> tuple[np.ndarray, int]:
    """Solve for every state's rank.

    Returns:
        (ranks, n_cycle_pinned): float64 array of length state_count with all
        values in [0, 1], and how many contested states were pinned to
        CYCLE_RANK because they sit in a closed contested component.

    Raises:
        SolveFailure: If the matrix is singular or the solution leaves [0, 1].
    """
    n = graph.state_count
    if len(classifications) != n:
        raise ValueError(
            f"Got {len(classifications)} classifications for {n} states"
        )

    pinned = np.full(n, np.nan)
    for i, label in enumerate(classifications):
        if label.score is not None:
            pinned[i] = label.score

    closed = find_closed_contested(graph, classifications)
    pinned[closed] = CYCLE_RANK
    n_closed = int(closed.sum())
    if n_closed:
        logger.info("Pinned %d closed contested states to %.1f", n_closed, CYCLE_RANK)

    if not np.isnan(pinned).any():
        return pinned, n_closed

    matrix, rhs = build_rank_system(graph, pinned)

    with warnings.catch_warnings():
        warnings.simplefilter("error", MatrixRankWarning)
        try:
            ranks = scipy.sparse.linalg.spsolve(matrix, rhs)
        except MatrixRankWarning as exc:
            raise SolveFailure(f"Rank system is singular: {exc}") from exc

    ranks = np.asarray(ranks, dtype=np.float64).reshape(n)
    if not np.all(np.isfinite(ranks)):
        raise SolveFailure("Rank system produced non-finite values")
    low, high = float(ranks.min()), float(ranks.max())
    if low < -RANK_TOLERANCE or high > 1.0 + RANK_TOLERANCE:
        raise SolveFailure(f"Ranks outside [0, 1]: min={low:.6g}, max={high:.6g}")

    ranks = np.clip(ranks, 0.0, 1.0)
    fixed = ~np.isnan(pinned)
    ranks[fixed] = pinned[fixed]
    return ranks, n_closed
