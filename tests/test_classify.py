"""
Tests for chopsticks/solvers/classify.py — retrograde classification.
"""

from __future__ import annotations

import pytest

from chopsticks.engine.rules import Ruleset
from chopsticks.engine.state_index import StateIndexer
from chopsticks.solvers.classify import (
    Classification,
    _evaluate,
    _propagate,
    classify_states,
    terminal_classification,
)
from chopsticks.solvers.graph import GameGraph, build_graph
from tests.conftest import st

W, L, D, C = (
    Classification.WIN,
    Classification.LOSS,
    Classification.DRAW,
    Classification.CONTESTED,
)


# ─── Classification enum ──────────────────────────────────────────────────────


class TestClassification:
    def test_scores(self):
        assert W.score == 1.0
        assert L.score == 0.0
        assert D.score == 0.5
        assert C.score is None


# ─── terminal_classification ──────────────────────────────────────────────────


class TestTerminalClassification:
    def test_draw(self):
        assert terminal_classification(st(0, 0, 0, 0)) is D

    def test_player_dead_is_loss(self):
        assert terminal_classification(st(0, 0, 0, 3)) is L

    def test_opponent_dead_is_win(self):
        assert terminal_classification(st(1, 1, 0, 0)) is W

    def test_live_state_rejected(self):
        with pytest.raises(ValueError):
            terminal_classification(st(1, 1, 1, 1))


# ─── _evaluate ────────────────────────────────────────────────────────────────


class TestEvaluate:
    def test_any_loss_child_wins(self):
        labels = [C, L, C]
        assert _evaluate((0, 1, 2), labels) is W

    def test_all_win_children_lose(self):
        labels = [W, W]
        assert _evaluate((0, 1), labels) is L

    def test_single_contested_blocks_loss(self):
        labels = [W, C]
        assert _evaluate((0, 1), labels) is C

    def test_draw_child_blocks_loss(self):
        labels = [W, D]
        assert _evaluate((0, 1), labels) is C


# ─── _propagate on synthetic graphs ───────────────────────────────────────────


class TestPropagate:
    def test_long_chain_fully_resolved(self):
        # 0 → 1 → ... → n-1, with n-1 a terminal LOSS. Alternating labels
        # ripple all the way back, needing n-1 evaluations (> 1000).
        n = 1_500
        children = [[i + 1] for i in range(n - 1)] + [[]]
        graph = GameGraph.from_adjacency(children)
        labels = [C] * n
        labels[-1] = L

        evaluations = _propagate(graph, labels)

        assert evaluations == n - 1
        assert labels[0] is (W if (n - 1) % 2 == 1 else L)
        for i in range(n - 1):
            expected = W if (n - 1 - i) % 2 == 1 else L
            assert labels[i] is expected

    def test_cycle_stays_contested(self):
        # 0 ↔ 1 with an escape from 0 to a terminal WIN: no forced result.
        graph = GameGraph.from_adjacency([[1, 2], [0], []])
        labels = [C, C, W]
        _propagate(graph, labels)
        assert labels == [C, C, W]

    def test_state_queued_once_while_pending(self):
        # Node 0 has three terminal LOSS children; it must be evaluated once.
        graph = GameGraph.from_adjacency([[1, 2, 3], [], [], []])
        labels = [C, L, L, L]
        assert _propagate(graph, labels) == 1
        assert labels[0] is W

    def test_every_parent_of_a_change_is_queued(self):
        # 1 and 2 both lead to terminal LOSS 3; 0 leads to both.
        graph = GameGraph.from_adjacency([[1, 2], [3], [3], []])
        labels = [C, C, C, L]
        assert _propagate(graph, labels) == 3
        assert labels == [L, W, W, L]


# ─── classify_states on real rulesets ─────────────────────────────────────────


def _classify(f: int, switching: bool, skipping: bool):
    indexer = StateIndexer(f)
    graph = build_graph(indexer, Ruleset(f, switching, skipping))
    labels, evaluations = classify_states(graph, indexer)
    return indexer, graph, labels, evaluations


RULESETS = [(5, False, False), (5, True, False), (5, True, True), (3, True, False)]


class TestClassifyStates:
    @pytest.mark.parametrize("rules", RULESETS)
    def test_zero_state_is_draw(self, rules):
        indexer, _, labels, _ = _classify(*rules)
        assert labels[indexer.state_to_index(st(0, 0, 0, 0))] is D
        assert labels.count(D) == 1

    @pytest.mark.parametrize("rules", RULESETS)
    def test_soundness(self, rules):
        _, graph, labels, _ = _classify(*rules)
        for i, label in enumerate(labels):
            kids = graph.children[i]
            if not kids:
                continue
            if label is W:
                assert any(labels[j] is L for j in kids)
            elif label is L:
                assert all(labels[j] is W for j in kids)

    @pytest.mark.parametrize("rules", RULESETS)
    def test_fixpoint_complete(self, rules):
        # No contested state could be resolved by one more step.
        _, graph, labels, _ = _classify(*rules)
        for i, label in enumerate(labels):
            if label is C:
                assert graph.children[i]
                assert _evaluate(graph.children[i], list(labels)) is C

    @pytest.mark.parametrize("rules", RULESETS)
    def test_terminal_labels(self, rules):
        indexer, graph, labels, _ = _classify(*rules)
        for i in range(indexer.state_count):
            if i == indexer.draw_index or not graph.is_terminal(i):
                continue
            player, opponent = indexer.index_to_state(i)
            if not any(player):
                assert labels[i] is L
            else:
                assert not any(opponent)
                assert labels[i] is W

    def test_opponent_dead_is_win(self):
        indexer, _, labels, _ = _classify(5, True, False)
        assert labels[indexer.state_to_index(st(1, 1, 0, 0))] is W

    def test_larger_configuration_reaches_fixpoint(self):
        indexer, graph, labels, evaluations = _classify(8, True, False)
        assert evaluations > 0
        for i, label in enumerate(labels):
            if label is C:
                assert _evaluate(graph.children[i], list(labels)) is C

    def test_deterministic(self):
        a = _classify(5, True, False)
        b = _classify(5, True, False)
        assert a[2] == b[2]
        assert a[3] == b[3]

    def test_one_finger_game(self):
        indexer, _, labels, evaluations = _classify(1, True, False)
        assert labels == (D,)
        assert evaluations == 0
