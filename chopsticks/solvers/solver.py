"""
Full chopsticks solve: hand set → indexing → move graph → retrograde
classification → rank solve.

Everything is computed once per ruleset and returned as a single immutable
SolveResult. Changing any rule means calling solve() again; nothing is cached
at module level.

Run:
    python -m chopsticks.solvers.solver [fingers] [--no-switch] [--skip]
"""

from __future__ import annotations

import functools
import logging
import time
from collections import Counter
from dataclasses import dataclass

import numpy as np

from chopsticks.engine.hands import HandPair
from chopsticks.engine.moves import MoveKind, legal_moves
from chopsticks.engine.rules import DEFAULT_FINGERS, Ruleset
from chopsticks.engine.state_index import State, StateIndexer
from chopsticks.solvers.classify import Classification, classify_states
from chopsticks.solvers.graph import GameGraph, build_graph
from chopsticks.solvers.ranks import compute_ranks

logger = logging.getLogger(__name__)


# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class SolveResult:
    """Everything computed for one ruleset.

    Attributes:
        ruleset:              Rules the solve was run under.
        hand_set:             Every sorted hand-pair, lexicographic.
        state_count:          len(hand_set) ** 2.
        graph:                Move graph (children / parents / move_counts).
        classifications:      One Classification per state index.
        ranks:                Read-only float64 array, one rank in [0, 1] per index.
        n_evaluations:        Work-queue evaluations done by classification.
        n_pinned_cycle_states: Contested states with no escape, pinned to 0.5.
    """

    ruleset: Ruleset
    hand_set: tuple[HandPair, ...]
    state_count: int
    graph: GameGraph
    classifications: tuple[Classification, ...]
    ranks: np.ndarray
    n_evaluations: int
    n_pinned_cycle_states: int

    @functools.cached_property
    def indexer(self) -> StateIndexer:
        return StateIndexer(self.ruleset.fingers_per_hand)

    @property
    def children(self) -> tuple[tuple[int, ...], ...]:
        return self.graph.children

    @property
    def parents(self) -> tuple[tuple[int, ...], ...]:
        return self.graph.parents

    # ── State-level lookups ───────────────────────────────────────────────────

    def index_of(self, state: State) -> int:
        return self.indexer.state_to_index(state)

    def state_of(self, index: int) -> State:
        return self.indexer.index_to_state(index)

    def classification_of(self, state: State) -> Classification:
        return self.classifications[self.index_of(state)]

    def rank_of(self, state: State) -> float:
        return float(self.ranks[self.index_of(state)])

    def children_of(self, state: State) -> list[State]:
        return [self.state_of(i) for i in self.graph.children[self.index_of(state)]]

    def parents_of(self, state: State) -> list[State]:
        return [self.state_of(i) for i in self.graph.parents[self.index_of(state)]]

    def move_values(self, state: State) -> list[tuple[MoveKind, State, float]]:
        """Return each distinct legal move from state with its value to the mover.

        The value is 1 - rank[successor]. For a resolved successor that is
        the mover's outcome: 1.0 for leaving the opponent a LOSS, 0.0 for
        handing them a WIN. Contested successors rank 1.0 unless they can
        drift into a cycle-pinned state (see chopsticks.solvers.ranks), so
        they usually score 0.0 as well; use classifications to tell them
        apart from a losing move.

        Returns:
            List of (kind, successor, value) sorted best-first; ties broken by
            successor index. When an attack and a switch reach the same
            successor, only the first (attack) is kept.
        """
        indexer = self.indexer
        seen: set[int] = set()
        moves: list[tuple[MoveKind, State, float, int]] = []
        for kind, child in legal_moves(state, self.ruleset, self.hand_set):
            child_index = indexer.state_to_index(child)
            if child_index in seen:
                continue
            seen.add(child_index)
            value = 1.0 - float(self.ranks[child_index])
            moves.append((kind, child, value, child_index))
        moves.sort(key=lambda m: (-m[2], m[3]))
        return [(kind, child, value) for kind, child, value, _ in moves]

    def best_move(self, state: State) -> tuple[MoveKind, State, float] | None:
        """Highest-value move from state, or None if state is terminal."""
        moves = self.move_values(state)
        return moves[0] if moves else None

    def counts(self) -> dict[Classification, int]:
        """Number of states carrying each classification (all keys present)."""
        tally = Counter(self.classifications)
        return {label: tally.get(label, 0) for label in Classification}


# ─── Entry points ─────────────────────────────────────────────────────────────


def solve_ruleset(ruleset: Ruleset) -> SolveResult:
    """Run the full pipeline for ruleset.

    Raises:
        IndexOutOfRange: Never for a consistent pipeline; surfaced if raised.
        SolveFailure:    If the rank system cannot be solved.
    """
    t0 = time.perf_counter()
    indexer = StateIndexer(ruleset.fingers_per_hand)
    logger.info(
        "Solving chopsticks (%s): %d hand pairs, %d states",
        ruleset.label(), indexer.hand_count, indexer.state_count,
    )

    graph = build_graph(indexer, ruleset)
    t_graph = time.perf_counter()
    logger.info("Graph: %d edges in %.3fs", graph.edge_count, t_graph - t0)

    classifications, n_evaluations = classify_states(graph, indexer)
    t_classify = time.perf_counter()
    logger.info(
        "Classification: %d evaluations in %.3fs", n_evaluations, t_classify - t_graph
    )

    ranks, n_pinned = compute_ranks(graph, classifications)
    ranks.setflags(write=False)
    logger.info("Ranks solved in %.3fs", time.perf_counter() - t_classify)

    return SolveResult(
        ruleset=ruleset,
        hand_set=indexer.hand_set,
        state_count=indexer.state_count,
        graph=graph,
        classifications=classifications,
        ranks=ranks,
        n_evaluations=n_evaluations,
        n_pinned_cycle_states=n_pinned,
    )


def solve(
    fingers_per_hand: int = DEFAULT_FINGERS,
    switching_allowed: bool = True,
    skipping_allowed: bool = False,
) -> SolveResult:
    """Solve chopsticks for the given rules.

    Args:
        fingers_per_hand:  Hand values are taken mod this (default 5).
        switching_allowed: Allow redistributing fingers between own hands.
        skipping_allowed:  Allow a switch that leaves the hands unchanged.
                           Ignored when switching is disabled.

    Raises:
        InvalidConfiguration: If fingers_per_hand < 1.
        SolveFailure:         If the rank system is singular.
    """
    ruleset = Ruleset(
        fingers_per_hand=fingers_per_hand,
        switching_allowed=switching_allowed,
        skipping_allowed=skipping_allowed,
    )
    return solve_ruleset(ruleset)


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from chopsticks.analysis.strategy_report import print_contested_ranks, print_solve_summary

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    fingers = int(args[0]) if args else DEFAULT_FINGERS
    result = solve(
        fingers,
        switching_allowed="--no-switch" not in sys.argv,
        skipping_allowed="--skip" in sys.argv,
    )
    print_solve_summary(result)
    print_contested_ranks(result, n=10)
