"""
One-move successor generation.

States always list the side to move first, so every successor swaps roles:
after the mover acts, the opponent becomes the side to move.

    Attack  — mover taps one of the opponent's live hands with one of their
              own live hands; the tapped hand becomes (tapped + tapper) mod F.
              Successor: (opponent_after_attack, mover).
    Switch  — mover redistributes their total across both hands (only when
              the ruleset allows switching). Leaving the pair unchanged is a
              pass and needs skipping_allowed.
              Successor: (opponent, mover_after_switch).

A state with no attack available is terminal: either the opponent has no live
hand (mover has won) or the mover has none (mover has lost). Switching is
never offered from a terminal state.

Successor lists may contain duplicates; the graph builder counts and
collapses them.
"""

from __future__ import annotations

from enum import Enum, auto

from .hands import HandPair, hand_total, sort_pair
from .rules import Ruleset
from .state_index import State


class MoveKind(Enum):
    ATTACK = auto()
    SWITCH = auto()


def attack_states(state: State, fingers_per_hand: int) -> list[State]:
    """Return all successors reachable by attacking. May contain duplicates.

    Examples:
        >>> attack_states(((1, 1), (1, 1)), 5)
        [((1, 2), (1, 1)), ((1, 2), (1, 1)), ((1, 2), (1, 1)), ((1, 2), (1, 1))]
        >>> attack_states(((0, 3), (0, 2)), 5)
        [((0, 0), (0, 3))]
    """
    player, opponent = state
    result: list[State] = []
    for attacker in player:
        if not attacker:
            continue
        for opp_hand in (0, 1):
            target = opponent[opp_hand]
            if not target:
                continue
            new_value = (target + attacker) % fingers_per_hand
            untouched = opponent[1 - opp_hand]
            result.append((sort_pair(new_value, untouched), player))
    return result


def switch_states(
    state: State,
    hand_set: tuple[HandPair, ...],
    skipping_allowed: bool = False,
) -> list[State]:
    """Return all successors reachable by switching.

    Every hand-pair with the mover's total is a candidate; the mover's current
    pair is included only when skipping is allowed.

    Examples:
        >>> from chopsticks.engine.hands import generate_hand_set
        >>> switch_states(((1, 3), (2, 2)), generate_hand_set(5))
        [((2, 2), (0, 4)), ((2, 2), (2, 2))]
    """
    player, opponent = state
    total = hand_total(player)
    return [
        (opponent, pair)
        for pair in hand_set
        if hand_total(pair) == total and (skipping_allowed or pair != player)
    ]


def legal_moves(
    state: State,
    ruleset: Ruleset,
    hand_set: tuple[HandPair, ...],
) -> list[tuple[MoveKind, State]]:
    """Return every (kind, successor) pair legal from state, attacks first.

    Empty when no attack is possible (terminal state).
    """
    attacks = attack_states(state, ruleset.fingers_per_hand)
    if not attacks:
        return []

    moves = [(MoveKind.ATTACK, child) for child in attacks]
    if ruleset.switching_allowed:
        switches = switch_states(state, hand_set, ruleset.skipping_effective)
        moves.extend((MoveKind.SWITCH, child) for child in switches)
    return moves


def children_of_state(
    state: State,
    ruleset: Ruleset,
    hand_set: tuple[HandPair, ...],
) -> list[State]:
    """Return all one-move successors of state. May contain duplicates."""
    return [child for _, child in legal_moves(state, ruleset, hand_set)]


def is_terminal(state: State) -> bool:
    """True when no attack is possible from state."""
    player, opponent = state
    return not (any(player) and any(opponent))
