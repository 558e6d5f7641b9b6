"""Objective wrappers and reference objectives used by the CLI and tests."""

from __future__ import annotations

from typing import Callable, Dict, Sequence

from byte_descent.gradient.estimator import Objective


class CountingObjective:
    """Delegates to ``objective`` and counts evaluations."""

    def __init__(self, objective: Objective) -> None:
        self.objective = objective
        self.calls = 0

    def __call__(self, x: Sequence[int]) -> int:
        self.calls += 1
        return int(self.objective(x))


def _check_target(target: Sequence[int]) -> list[int]:
    values = [int(t) for t in target]
    if not values:
        raise ValueError("target must contain at least one byte")
    if any(t < 0 or t > 255 for t in values):
        raise ValueError("target bytes must lie in [0, 255]")
    return values


def l1_distance(target: Sequence[int]) -> Objective:
    """sum |x_i - t_i|, minimal (0) at ``target``. The metric itself does not wrap."""
    t = _check_target(target)

    def objective(x: Sequence[int]) -> int:
        return sum(abs(xi - ti) for xi, ti in zip(x, t))

    return objective


def squared_distance(target: Sequence[int]) -> Objective:
    """sum (x_i - t_i)^2, minimal (0) at ``target``."""
    t = _check_target(target)

    def objective(x: Sequence[int]) -> int:
        return sum((xi - ti) ** 2 for xi, ti in zip(x, t))

    return objective


def negated(objective: Objective) -> Objective:
    def inner(x: Sequence[int]) -> int:
        return -int(objective(x))

    return inner


BUILTIN_OBJECTIVES: Dict[str, Callable[[Sequence[int]], Objective]] = {
    "l1": l1_distance,
    "squared": squared_distance,
}
