"""
Move graph over all state indices.

    children[i]     distinct successor indices of state i, in first-seen move order
    move_counts[i]  how many raw moves from i land on each entry of children[i]
    parents[i]      distinct predecessor indices of state i, ascending

parents and children are exact inverses; GameGraph refuses to exist otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from chopsticks.engine.moves import children_of_state
from chopsticks.engine.rules import Ruleset
from chopsticks.engine.state_index import StateIndexer

logger = logging.getLogger(__name__)

Adjacency = tuple[tuple[int, ...], ...]


@dataclass(frozen=True)
class GameGraph:
    """Immutable directed move graph.

    Attributes:
        children:    children[i] = distinct successor indices of i.
        parents:     parents[j]  = distinct indices i with j in children[i].
        move_counts: move_counts[i][k] = multiplicity of children[i][k] in the
                     raw move list of i (always >= 1).
    """
    children: Adjacency
    parents: Adjacency
    move_counts: Adjacency

    def __post_init__(self) -> None:
        _verify_adjacency(self.children, self.parents, self.move_counts)

    @property
    def state_count(self) -> int:
        return len(self.children)

    def total_moves(self, index: int) -> int:
        """Number of raw moves from index, duplicates included."""
        return sum(self.move_counts[index])

    def is_terminal(self, index: int) -> bool:
        return not self.children[index]

    @property
    def edge_count(self) -> int:
        return sum(len(c) for c in self.children)

    @classmethod
    def from_adjacency(
        cls,
        children: Sequence[Sequence[int]],
        move_counts: Sequence[Sequence[int]] | None = None,
    ) -> GameGraph:
        """Build a graph from a children list, deriving parents.

        Args:
            children:    Per-state successor indices, already distinct.
            move_counts: Optional multiplicities aligned with children;
                         defaults to 1 per edge.

        Raises:
            ValueError: If a child index is out of range or repeated.
        """
        n = len(children)
        parent_lists: list[list[int]] = [[] for _ in range(n)]
        for i, kids in enumerate(children):
            for j in kids:
                if not (0 <= j < n):
                    raise ValueError(f"Child index {j} of state {i} outside [0, {n})")
                parent_lists[j].append(i)

        if move_counts is None:
            move_counts = [[1] * len(kids) for kids in children]

        return cls(
            children=tuple(tuple(kids) for kids in children),
            parents=tuple(tuple(p) for p in parent_lists),
            move_counts=tuple(tuple(c) for c in move_counts),
        )


def _verify_adjacency(children: Adjacency, parents: Adjacency, move_counts: Adjacency) -> None:
    """Raise ValueError unless j in children[i] <=> i in parents[j], lists distinct."""
    n = len(children)
    if len(parents) != n or len(move_counts) != n:
        raise ValueError(
            f"Adjacency size mismatch: {n} children, {len(parents)} parents, "
            f"{len(move_counts)} move_counts"
        )

    forward: set[tuple[int, int]] = set()
    for i, kids in enumerate(children):
        if len(set(kids)) != len(kids):
            raise ValueError(f"Duplicate child in children[{i}]: {kids}")
        if len(move_counts[i]) != len(kids) or any(c < 1 for c in move_counts[i]):
            raise ValueError(f"move_counts[{i}] does not align with children[{i}]")
        forward.update((i, j) for j in kids)

    backward: set[tuple[int, int]] = set()
    for j, ps in enumerate(parents):
        if len(set(ps)) != len(ps):
            raise ValueError(f"Duplicate parent in parents[{j}]: {ps}")
        backward.update((i, j) for i in ps)

    if forward != backward:
        bad = sorted(forward ^ backward)[:5]
        raise ValueError(f"children/parents are not inverses; first mismatched edges: {bad}")


def build_graph(indexer: StateIndexer, ruleset: Ruleset) -> GameGraph:
    """Generate every state's successors and assemble the move graph.

    Iterates indices in ascending order, so parents come out ascending and
    children follow move-generation order. Both are deterministic.
    """
    children: list[list[int]] = []
    move_counts: list[list[int]] = []

    for index in range(indexer.state_count):
        state = indexer.index_to_state(index)
        counts: dict[int, int] = {}
        for child_state in children_of_state(state, ruleset, indexer.hand_set):
            child = indexer.state_to_index(child_state)
            counts[child] = counts.get(child, 0) + 1
        children.append(list(counts))
        move_counts.append(list(counts.values()))

    graph = GameGraph.from_adjacency(children, move_counts)
    logger.debug(
        "Built graph: %d states, %d distinct edges", graph.state_count, graph.edge_count
    )
    return graph
