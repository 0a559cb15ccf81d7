"""
Ruleset for a chopsticks game.

Three knobs define the game variant:
    fingers_per_hand   — hand values live in [0, fingers_per_hand); attacks wrap mod F
    switching_allowed  — player may redistribute their total across both hands
    skipping_allowed   — a switch may leave the hands unchanged (a pass);
                         ignored when switching is disabled
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass

from .errors import InvalidConfiguration

DEFAULT_FINGERS: int = 5
"""Fingers per hand in the standard game."""


@dataclass(frozen=True)
class Ruleset:
    """Immutable game configuration.

    Frozen (hashable) so it can key caches in the dashboard.
    """
    fingers_per_hand: int = DEFAULT_FINGERS
    switching_allowed: bool = True
    skipping_allowed: bool = False

    def __post_init__(self) -> None:
        validate_fingers(self.fingers_per_hand)

    @property
    def skipping_effective(self) -> bool:
        """True only when a pass is actually a legal move."""
        return self.switching_allowed and self.skipping_allowed

    def label(self) -> str:
        """Short human-readable description, e.g. ``'F=5, switch, no skip'``."""
        switch = "switch" if self.switching_allowed else "no switch"
        skip = "skip" if self.skipping_effective else "no skip"
        return f"F={self.fingers_per_hand}, {switch}, {skip}"


def validate_fingers(fingers_per_hand: int) -> None:
    """Raise InvalidConfiguration unless fingers_per_hand is an integer ≥ 1.

    Raises:
        InvalidConfiguration: For non-integers (bools included) and values < 1.
    """
    if isinstance(fingers_per_hand, bool) or not isinstance(fingers_per_hand, numbers.Integral):
        raise InvalidConfiguration(
            f"fingers_per_hand must be an integer, got {fingers_per_hand!r}"
        )
    if fingers_per_hand < 1:
        raise InvalidConfiguration(
            f"fingers_per_hand must be >= 1, got {fingers_per_hand}"
        )
