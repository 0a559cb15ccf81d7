"""
Hand-pair enumeration.

A hand-pair is the sorted pair (x, y), 0 <= x <= y < F, of one player's two
hand values. The hand set lists every such pair in lexicographic order and is
the sole source of truth for state count and indexing.

    F = 3  ->  (0,0) (0,1) (0,2) (1,1) (1,2) (2,2)
"""

from __future__ import annotations

from .rules import validate_fingers

HandPair = tuple[int, int]


def generate_hand_set(fingers_per_hand: int) -> tuple[HandPair, ...]:
    """Return every sorted hand-pair for F fingers, in lexicographic order.

    Raises:
        InvalidConfiguration: If fingers_per_hand < 1.

    Examples:
        >>> generate_hand_set(2)
        ((0, 0), (0, 1), (1, 1))
        >>> len(generate_hand_set(5))
        15
    """
    validate_fingers(fingers_per_hand)
    return tuple(
        (x, y)
        for x in range(fingers_per_hand)
        for y in range(x, fingers_per_hand)
    )


def hand_set_size(fingers_per_hand: int) -> int:
    """Closed-form size of the hand set: F(F+1)/2."""
    return fingers_per_hand * (fingers_per_hand + 1) // 2


def hand_total(pair: HandPair) -> int:
    """Total fingers raised across both hands."""
    return pair[0] + pair[1]


def sort_pair(a: int, b: int) -> HandPair:
    """Return (a, b) in ascending order."""
    return (a, b) if a <= b else (b, a)


def pair_to_str(pair: HandPair) -> str:
    """Format a hand-pair for display.

    Examples:
        >>> pair_to_str((1, 3))
        '1-3'
    """
    return f"{pair[0]}-{pair[1]}"
