"""
Shared pytest fixtures for chopsticks solver tests.

Solves are module/session scoped: a 5-finger solve builds a 225-state graph,
cheap but not free, and every test treats the result as read-only.
"""

from __future__ import annotations

import pytest

from chopsticks.solvers.solver import SolveResult, solve


def st(a: int, b: int, c: int, d: int) -> tuple[tuple[int, int], tuple[int, int]]:
    """Build a state from four hand values (side to move first).

    Examples:
        >>> st(1, 1, 0, 2)
        ((1, 1), (0, 2))
    """
    return ((a, b), (c, d))


@pytest.fixture(scope="session")
def default_result() -> SolveResult:
    """5 fingers, switching on, skipping off."""
    return solve()


@pytest.fixture(scope="session")
def attack_only_result() -> SolveResult:
    """5 fingers, pure attack game."""
    return solve(5, switching_allowed=False, skipping_allowed=False)


@pytest.fixture(scope="session")
def skipping_result() -> SolveResult:
    """5 fingers, switching and skipping on."""
    return solve(5, switching_allowed=True, skipping_allowed=True)


@pytest.fixture(params=["default", "attack_only", "skipping"])
def any_result(request, default_result, attack_only_result, skipping_result) -> SolveResult:
    """Parametrised over the three 5-finger rulesets."""
    return {
        "default": default_result,
        "attack_only": attack_only_result,
        "skipping": skipping_result,
    }[request.param]
