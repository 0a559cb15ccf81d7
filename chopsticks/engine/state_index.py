"""
Bijective indexing between two-player states and dense integers.

A state is ((a, b), (c, d)): the side to move holds (a, b), the other side
(c, d), each pair sorted. With H = |hand set| the index is

    hand_rank((a, b)) * H + hand_rank((c, d))

where hand_rank is the position of a pair in the lexicographic hand set:

    hand_rank((a, b)) = a*F - a*(a-1)/2 + (b - a)

The first term counts pairs whose lower value is < a (F + (F-1) + ... ), the
second is the offset inside the run of pairs starting with a.
"""

from __future__ import annotations

from .errors import IndexOutOfRange
from .hands import HandPair, generate_hand_set

State = tuple[HandPair, HandPair]


class StateIndexer:
    """Closed-form state <-> index mapping for a fixed finger count.

    Examples:
        >>> idx = StateIndexer(5)
        >>> idx.state_count
        225
        >>> idx.state_to_index(((0, 0), (0, 1)))
        1
        >>> idx.index_to_state(16)
        ((0, 1), (0, 1))
    """

    def __init__(self, fingers_per_hand: int) -> None:
        self.hand_set: tuple[HandPair, ...] = generate_hand_set(fingers_per_hand)
        self.fingers_per_hand = fingers_per_hand
        self.hand_count = len(self.hand_set)
        self.state_count = self.hand_count ** 2

    def hand_rank(self, pair: HandPair) -> int:
        """Return the 0-based position of pair within the hand set."""
        a, b = pair
        if not (0 <= a <= b < self.fingers_per_hand):
            raise IndexOutOfRange(
                f"Hand pair {pair!r} is not a sorted pair in [0, {self.fingers_per_hand})"
            )
        n = self.fingers_per_hand
        return a * n - (a * (a - 1)) // 2 + (b - a)

    def state_to_index(self, state: State) -> int:
        """Return the dense index of state.

        Raises:
            IndexOutOfRange: If either hand-pair is unsorted or out of range.
        """
        player, opponent = state
        return self.hand_rank(player) * self.hand_count + self.hand_rank(opponent)

    def index_to_state(self, index: int) -> State:
        """Return the state with the given dense index.

        Raises:
            IndexOutOfRange: If index is outside [0, state_count).
        """
        if not (0 <= index < self.state_count):
            raise IndexOutOfRange(
                f"State index {index} outside [0, {self.state_count})"
            )
        player_rank, opponent_rank = divmod(index, self.hand_count)
        return (self.hand_set[player_rank], self.hand_set[opponent_rank])

    @property
    def draw_index(self) -> int:
        """Index of the all-zero state ((0, 0), (0, 0)), always 0."""
        return self.state_to_index(((0, 0), (0, 0)))


def state_to_str(state: State) -> str:
    """Format a state for display.

    Examples:
        >>> state_to_str(((1, 1), (0, 2)))
        '1-1 vs 0-2'
    """
    (a, b), (c, d) = state
    return f"{a}-{b} vs {c}-{d}"
