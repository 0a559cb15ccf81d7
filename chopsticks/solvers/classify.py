"""
Retrograde classification of every state.

Works backward from terminal states toward the start, the way an endgame
tablebase is built:

    1. All states start CONTESTED; ((0,0),(0,0)) is DRAW and never revisited.
    2. Terminal states are labelled directly: mover has nothing left → LOSS,
       opponent has nothing left → WIN. Their parents are queued.
    3. A queued state becomes WIN if any child is LOSS, LOSS if every child is
       WIN, otherwise stays CONTESTED. If its label changed, its parents are
       queued (unless already pending).
    4. Stop when the queue is empty.

Labels only ever move from CONTESTED to WIN/LOSS, so the loop reaches a true
fixpoint in at most O(edges) evaluations. There is no iteration cap.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum

import numpy as np

from chopsticks.engine.hands import hand_total
from chopsticks.engine.state_index import State, StateIndexer
from chopsticks.solvers.graph import GameGraph

logger = logging.getLogger(__name__)


class Classification(Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    DRAW = "DRAW"
    CONTESTED = "CONTESTED"

    @property
    def score(self) -> float | None:
        """Pinned rank for a resolved label; None for CONTESTED."""
        return _SCORES[self]


_SCORES: dict[Classification, float | None] = {
    Classification.WIN: 1.0,
    Classification.LOSS: 0.0,
    Classification.DRAW: 0.5,
    Classification.CONTESTED: None,
}


def terminal_classification(state: State) -> Classification:
    """Label a state with no legal moves by inspecting it directly.

    Examples:
        >>> terminal_classification(((0, 0), (0, 0)))
        <Classification.DRAW: 'DRAW'>
        >>> terminal_classification(((0, 0), (1, 3)))
        <Classification.LOSS: 'LOSS'>
        >>> terminal_classification(((1, 1), (0, 0)))
        <Classification.WIN: 'WIN'>
    """
    player, opponent = state
    if hand_total(player) == 0 and hand_total(opponent) == 0:
        return Classification.DRAW
    if hand_total(player) == 0:
        return Classification.LOSS
    if hand_total(opponent) == 0:
        return Classification.WIN
    raise ValueError(f"State {state!r} is not terminal: both sides have live hands")


def _evaluate(children: tuple[int, ...], labels: list[Classification]) -> Classification:
    """Label implied by the current labels of a state's children."""
    all_win = True
    for child in children:
        label = labels[child]
        if label is Classification.LOSS:
            return Classification.WIN
        if label is not Classification.WIN:
            all_win = False
    return Classification.LOSS if all_win else Classification.CONTESTED


def _propagate(graph: GameGraph, labels: list[Classification]) -> int:
    """Run the work queue to a fixpoint, mutating labels in place.

    Seeds the queue with the parents of every labelled terminal state.
    Non-terminal states that are already resolved (WIN/LOSS) on entry are left
    alone unless queued.

    Returns:
        Number of queue evaluations performed.
    """
    n = graph.state_count
    pending = np.zeros(n, dtype=bool)
    queue: deque[int] = deque()

    def enqueue_parents(index: int) -> None:
        for parent in graph.parents[index]:
            if pending[parent]:
                continue
            if labels[parent] is Classification.DRAW:
                continue
            pending[parent] = True
            queue.append(parent)

    for index in range(n):
        if graph.is_terminal(index) and labels[index] is not Classification.DRAW:
            enqueue_parents(index)

    evaluations = 0
    while queue:
        current = queue.popleft()
        pending[current] = False
        evaluations += 1

        new_label = _evaluate(graph.children[current], labels)
        if new_label is not labels[current]:
            labels[current] = new_label
            enqueue_parents(current)

    return evaluations


def classify_states(
    graph: GameGraph,
    indexer: StateIndexer,
) -> tuple[tuple[Classification, ...], int]:
    """Classify every state of the graph.

    Args:
        graph:   Move graph built over indexer's state space.
        indexer: Maps indices back to states for terminal inspection.

    Returns:
        (labels, n_evaluations): one Classification per index, and how many
        work-queue evaluations the propagation needed.
    """
    labels = [Classification.CONTESTED] * graph.state_count
    labels[indexer.draw_index] = Classification.DRAW

    for index in range(graph.state_count):
        if index != indexer.draw_index and graph.is_terminal(index):
            labels[index] = terminal_classification(indexer.index_to_state(index))

    evaluations = _propagate(graph, labels)
    logger.debug("Retrograde propagation finished after %d evaluations", evaluations)
    return tuple(labels), evaluations
