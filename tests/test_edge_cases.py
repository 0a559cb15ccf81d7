"""
Integration tests for solver edge cases.

Edge Case Reference:
    1.  The all-zero state is the only DRAW and ranks exactly 0.5
    2.  Opponent with no live hand: terminal WIN, rank 1
    3.  Mover with no live hand: terminal LOSS, rank 0
    4.  Pure-attack opening collapses four taps into one successor
    5.  Skipping is ignored when switching is disabled
    6.  Re-solving with other rules replaces everything (no shared state)
    7.  Propagation runs to a true fixpoint, beyond any fixed iteration cap
    8.  Closed contested cycles are pinned to 0.5, never left to the solver
    9.  Largest supported configuration (10 fingers) solves within bounds
    10. Switch successors keep the mover's finger total
"""

from __future__ import annotations

import numpy as np
import pytest

from chopsticks.engine.hands import hand_total
from chopsticks.engine.moves import MoveKind
from chopsticks.solvers.classify import Classification, _evaluate
from chopsticks.solvers.ranks import CYCLE_RANK, find_closed_contested
from chopsticks.solvers.solver import solve
from tests.conftest import st


# ─── Edge Case 1-3: terminal states ──────────────────────────────────────────

class TestEdgeCase1ZeroStateDraw:
    def test_unique_draw(self, any_result):
        draws = [i for i, c in enumerate(any_result.classifications) if c is Classification.DRAW]
        assert draws == [any_result.index_of(st(0, 0, 0, 0))]
        assert any_result.ranks[draws[0]] == 0.5

    def test_zero_state_unreachable(self, any_result):
        assert any_result.parents_of(st(0, 0, 0, 0)) == []


class TestEdgeCase2OpponentDead:
    def test_every_opponent_dead_state_wins(self, any_result):
        for player in any_result.hand_set[1:]:
            state = (player, (0, 0))
            assert any_result.classification_of(state) is Classification.WIN
            assert any_result.rank_of(state) == 1.0


class TestEdgeCase3MoverDead:
    def test_every_mover_dead_state_loses(self, any_result):
        for opponent in any_result.hand_set[1:]:
            state = ((0, 0), opponent)
            assert any_result.classification_of(state) is Classification.LOSS
            assert any_result.rank_of(state) == 0.0


# ─── Edge Case 4: opening collapse ───────────────────────────────────────────

class TestEdgeCase4OpeningCollapse:
    def test_one_child_four_moves(self, attack_only_result):
        r = attack_only_result
        i = r.index_of(st(1, 1, 1, 1))
        assert r.graph.children[i] == (r.index_of(st(1, 2, 1, 1)),)
        assert r.graph.total_moves(i) == 4


# ─── Edge Case 5: skipping needs switching ───────────────────────────────────

class TestEdgeCase5SkippingIgnored:
    def test_same_graph_as_attack_only(self, attack_only_result):
        r = solve(5, switching_allowed=False, skipping_allowed=True)
        assert r.graph.children == attack_only_result.graph.children
        assert r.classifications == attack_only_result.classifications


# ─── Edge Case 6: independent results ────────────────────────────────────────

class TestEdgeCase6Resolve:
    def test_results_do_not_share_state(self):
        small = solve(3)
        large = solve(6)
        again = solve(3)
        assert small.state_count == 36
        assert large.state_count == 441
        assert again.classifications == small.classifications
        np.testing.assert_array_equal(again.ranks, small.ranks)


# ─── Edge Case 7: fixpoint, not iteration cap ────────────────────────────────

class TestEdgeCase7Fixpoint:
    @pytest.mark.parametrize("f", [7, 9])
    def test_no_contested_state_left_decidable(self, f):
        r = solve(f)
        labels = list(r.classifications)
        for i, label in enumerate(labels):
            if label is Classification.CONTESTED:
                assert _evaluate(r.graph.children[i], labels) is Classification.CONTESTED

    def test_ten_fingers_needs_more_than_a_thousand_evaluations(self):
        r = solve(10)
        assert r.n_evaluations > 1000


# ─── Edge Case 8: closed contested cycles ────────────────────────────────────

class TestEdgeCase8ClosedCycles:
    def test_pinned_states_rank_half(self, any_result):
        closed = find_closed_contested(any_result.graph, any_result.classifications)
        assert int(closed.sum()) == any_result.n_pinned_cycle_states
        assert np.all(any_result.ranks[closed] == CYCLE_RANK)

    def test_pinned_states_are_contested(self, any_result):
        closed = find_closed_contested(any_result.graph, any_result.classifications)
        for i in np.flatnonzero(closed):
            assert any_result.classifications[i] is Classification.CONTESTED


# ─── Edge Case 9: largest configuration ──────────────────────────────────────

class TestEdgeCase9TenFingers:
    def test_solves_within_bounds(self):
        r = solve(10)
        assert r.state_count == 55 ** 2
        assert np.all((r.ranks >= 0.0) & (r.ranks <= 1.0))
        assert r.counts()[Classification.DRAW] == 1


# ─── Edge Case 10: switch keeps total ────────────────────────────────────────

class TestEdgeCase10SwitchSum:
    def test_switch_successors_keep_total(self, skipping_result):
        for player in skipping_result.hand_set[1:]:
            state = (player, (1, 2))
            for kind, child, _ in skipping_result.move_values(state):
                if kind is MoveKind.SWITCH:
                    assert hand_total(child[1]) == hand_total(player)
                    assert child[0] == (1, 2)
