"""
Monte Carlo self-play for chopsticks solver policies.

Plays full games from a start state between two move policies and tallies the
outcome from the first mover's point of view. Primary use: check that the
solver-guided policy beats uniform-random play.

A game ends when the side to move is in a terminal state (it has won if the
opponent has no live hand, lost if it has none itself), when the all-zero
draw state is reached, or after max_plies moves (counted as unfinished).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from chopsticks.engine.hands import hand_total
from chopsticks.engine.state_index import State
from chopsticks.solvers.classify import Classification
from chopsticks.solvers.solver import SolveResult

# policy(state_index, rng) -> successor state index
Policy = Callable[[int, np.random.Generator], int]

DEFAULT_START: State = ((1, 1), (1, 1))


# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate outcome of a self-play run, from the first mover's view.

    Attributes:
        n_games:      Number of games played.
        n_wins:       Games the first mover won.
        n_losses:     Games the first mover lost.
        n_draws:      Games that reached the all-zero state.
        n_unfinished: Games cut off at max_plies.
        mean_plies:   Mean number of moves per game (unfinished included).
        win_rate:     n_wins / n_games.
        ci_95_low:    Lower bound of a normal-approximation 95% CI on win_rate.
        ci_95_high:   Upper bound of the same interval.
    """

    n_games: int
    n_wins: int
    n_losses: int
    n_draws: int
    n_unfinished: int
    mean_plies: float
    win_rate: float
    ci_95_low: float
    ci_95_high: float

    def __str__(self) -> str:
        return (
            f"Games: {self.n_games:,} | "
            f"W/L/D/U: {self.n_wins}/{self.n_losses}/{self.n_draws}/{self.n_unfinished} | "
            f"Win rate: {self.win_rate:.3f} "
            f"[{self.ci_95_low:.3f}, {self.ci_95_high:.3f}] | "
            f"Mean plies: {self.mean_plies:.1f}"
        )


# ─── Policies ─────────────────────────────────────────────────────────────────


def make_random_policy(result: SolveResult) -> Policy:
    """Return a policy picking uniformly among the raw legal moves.

    Duplicated moves (two ways to reach the same successor) are weighted by
    their multiplicity, matching the averaging model behind the ranks.
    """
    graph = result.graph

    def policy(index: int, rng: np.random.Generator) -> int:
        counts = np.asarray(graph.move_counts[index], dtype=np.float64)
        pick = rng.choice(len(counts), p=counts / counts.sum())
        return graph.children[index][int(pick)]

    return policy


# Successor classification from the mover's side, best first: leave the
# opponent lost, keep the game open, draw, hand them a win.
_SUCCESSOR_PREFERENCE: dict[Classification, int] = {
    Classification.LOSS: 0,
    Classification.CONTESTED: 1,
    Classification.DRAW: 2,
    Classification.WIN: 3,
}


def make_rank_policy(result: SolveResult) -> Policy:
    """Return a greedy solver policy.

    Successors are compared first by classification (_SUCCESSOR_PREFERENCE),
    then by lowest rank. Contested ranks alone cannot separate a contested
    successor from one the opponent wins outright (both usually rank 1.0).
    Ties are broken uniformly at random.
    """
    graph = result.graph
    ranks = result.ranks
    preference = np.array(
        [_SUCCESSOR_PREFERENCE[c] for c in result.classifications], dtype=np.int8
    )

    def policy(index: int, rng: np.random.Generator) -> int:
        children = list(graph.children[index])
        child_pref = preference[children]
        options = np.flatnonzero(child_pref == child_pref.min())
        option_ranks = ranks[[children[int(i)] for i in options]]
        best = options[np.isclose(option_ranks, option_ranks.min(), rtol=0.0, atol=1e-12)]
        return children[int(rng.choice(best))]

    return policy


# ─── Simulation ───────────────────────────────────────────────────────────────


def _play_game(
    result: SolveResult,
    policies: tuple[Policy, Policy],
    start_index: int,
    max_plies: int,
    rng: np.random.Generator,
) -> tuple[str, int]:
    """Play one game and return (outcome for the first mover, plies played).

    Outcome is one of 'win', 'loss', 'draw', 'unfinished'.
    """
    graph = result.graph
    index = start_index
    for ply in range(max_plies + 1):
        mover_is_first = ply % 2 == 0
        if graph.is_terminal(index):
            player, opponent = result.state_of(index)
            if hand_total(player) == 0 and hand_total(opponent) == 0:
                return "draw", ply
            mover_won = hand_total(opponent) == 0
            return ("win" if mover_won == mover_is_first else "loss"), ply
        if ply == max_plies:
            break
        policy = policies[0] if mover_is_first else policies[1]
        index = policy(index, rng)
    return "unfinished", max_plies


def simulate_games(
    result: SolveResult,
    first_policy: Policy,
    second_policy: Policy,
    *,
    n_games: int = 1_000,
    start: State = DEFAULT_START,
    max_plies: int = 200,
    seed: int | None = None,
) -> SimulationResult:
    """Play n_games from start and aggregate the results.

    Args:
        result:        SolveResult providing the move graph.
        first_policy:  Policy of the side to move in start.
        second_policy: Policy of the other side.
        n_games:       Number of games to play.
        start:         Starting state, side to move first.
        max_plies:     Moves after which a game is abandoned as unfinished.
        seed:          Seed for numpy's default_rng; same seed, same result.

    Returns:
        SimulationResult from the first mover's point of view.

    Raises:
        ValueError: If n_games < 1 or max_plies < 0.
    """
    if n_games < 1:
        raise ValueError(f"n_games must be >= 1, got {n_games}")
    if max_plies < 0:
        raise ValueError(f"max_plies must be >= 0, got {max_plies}")

    rng = np.random.default_rng(seed)
    start_index = result.index_of(start)
    tally = {"win": 0, "loss": 0, "draw": 0, "unfinished": 0}
    plies = np.empty(n_games, dtype=np.int64)

    for g in range(n_games):
        outcome, n_plies = _play_game(
            result, (first_policy, second_policy), start_index, max_plies, rng
        )
        tally[outcome] += 1
        plies[g] = n_plies

    win_rate = tally["win"] / n_games
    half_width = 1.96 * math.sqrt(win_rate * (1.0 - win_rate) / n_games)

    return SimulationResult(
        n_games=n_games,
        n_wins=tally["win"],
        n_losses=tally["loss"],
        n_draws=tally["draw"],
        n_unfinished=tally["unfinished"],
        mean_plies=float(plies.mean()),
        win_rate=win_rate,
        ci_95_low=max(0.0, win_rate - half_width),
        ci_95_high=min(1.0, win_rate + half_width),
    )


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    from chopsticks.solvers.solver import solve

    solved = solve()
    rank = make_rank_policy(solved)
    rand = make_random_policy(solved)
    print("rank vs random :", simulate_games(solved, rank, rand, n_games=2_000, seed=42))
    print("random vs rank :", simulate_games(solved, rand, rank, n_games=2_000, seed=42))
    print("random vs random:", simulate_games(solved, rand, rand, n_games=2_000, seed=42))
