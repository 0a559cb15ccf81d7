"""Text report for a chopsticks solve.

Three public functions format a SolveResult into human-readable tables:

    print_solve_summary(result)        — ruleset, sizes, classification histogram
    print_move_table(result, state)    — every move from a state, best first
    print_contested_ranks(result, n)   — how contested ranks split, lowest first
"""

from __future__ import annotations

import numpy as np

from chopsticks.engine.state_index import State, state_to_str
from chopsticks.solvers.classify import Classification
from chopsticks.solvers.ranks import CYCLE_RANK, RANK_TOLERANCE, find_closed_contested
from chopsticks.solvers.solver import SolveResult

START_STATE: State = ((1, 1), (1, 1))
"""Opening position: both players show one finger on each hand."""


# ─── Public report functions ──────────────────────────────────────────────────

def print_solve_summary(result: SolveResult) -> None:
    """Print ruleset, state space size and classification counts.

    Args:
        result: SolveResult returned by solver.solve().
    """
    counts = result.counts()
    total = result.state_count

    print("=" * 56)
    print("Chopsticks Solve Summary")
    print("=" * 56)
    print(f"  Rules:           {result.ruleset.label()}")
    print(f"  Hand pairs:      {len(result.hand_set)}")
    print(f"  States:          {total}")
    print(f"  Edges:           {result.graph.edge_count}")
    print(f"  Evaluations:     {result.n_evaluations}")
    print(f"  Cycle-pinned:    {result.n_pinned_cycle_states}")
    print()
    print(f"  {'Class':<10}  {'Count':>6}  {'Share':>7}")
    print(f"  {'-----':<10}  {'-----':>6}  {'-----':>7}")
    for label in Classification:
        n = counts[label]
        print(f"  {label.value:<10}  {n:>6}  {n / total:>7.1%}")

    if result.ruleset.fingers_per_hand > 1:
        start = START_STATE
        print()
        print(
            f"  Opening {state_to_str(start)}: "
            f"{result.classification_of(start).value}, rank {result.rank_of(start):.4f}"
        )
    print()


def print_move_table(result: SolveResult, state: State) -> None:
    """Print every distinct move from state with its value to the mover.

    Args:
        result: SolveResult returned by solver.solve().
        state:  Position to analyse, side to move first.
    """
    print("=" * 56)
    print(f"Moves from {state_to_str(state)}  "
          f"[{result.classification_of(state).value}, rank {result.rank_of(state):.4f}]")
    print("=" * 56)

    moves = result.move_values(state)
    if not moves:
        print("  (terminal: no legal moves)")
        print()
        return

    print(f"  {'Kind':<7}  {'Result':<12}  {'Class':<10}  {'Value':>6}")
    print(f"  {'----':<7}  {'------':<12}  {'-----':<10}  {'-----':>6}")
    for kind, child, value in moves:
        label = result.classification_of(child).value
        print(f"  {kind.name.lower():<7}  {state_to_str(child):<12}  {label:<10}  {value:>6.3f}")
    print()


def print_contested_ranks(result: SolveResult, n: int = 10) -> None:
    """Print how contested ranks split between WIN exits and pinned cycles.

    A contested rank is 1.0 when every random line of play out of the
    contested region ends on a WIN-labelled state; anything lower comes from
    paths drifting into cycle-pinned states. Lists the n lowest of those.

    Args:
        result: SolveResult returned by solver.solve().
        n:      Rows in the lowest-rank table.
    """
    contested = np.array(
        [c is Classification.CONTESTED for c in result.classifications], dtype=bool
    )
    pinned = find_closed_contested(result.graph, result.classifications)
    at_one = contested & ~pinned & np.isclose(result.ranks, 1.0, rtol=0.0, atol=RANK_TOLERANCE)
    mixed = np.flatnonzero(contested & ~pinned & ~at_one)

    print("=" * 56)
    print("Contested State Ranks")
    print("=" * 56)
    if not contested.any():
        print("  (no contested states)")
        print()
        return

    print(f"  Contested states:      {int(contested.sum())}")
    print(f"  Rank 1.0 (WIN exits):  {int(at_one.sum())}")
    print(f"  Cycle-pinned ({CYCLE_RANK}):    {int(pinned.sum())}")
    print(f"  Between:               {mixed.size}")

    if mixed.size:
        # Stable sort keeps ties in index order.
        order = mixed[np.argsort(result.ranks[mixed], kind="stable")]
        print()
        print("  Lowest:")
        for index in order[:n]:
            state = result.state_of(int(index))
            print(f"    {state_to_str(state):<12}  {result.ranks[index]:.4f}")
    print()
