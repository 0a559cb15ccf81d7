"""
Exception types raised by the chopsticks solver.

Each subclasses the builtin that callers would otherwise expect, so
``except ValueError`` / ``except IndexError`` keep working.
"""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Ruleset values that cannot describe a game (e.g. fewer than 1 finger)."""


class IndexOutOfRange(IndexError):
    """State index or state outside the domain of the current hand set."""


class SolveFailure(RuntimeError):
    """Rank system was singular or produced values outside [0, 1]."""
