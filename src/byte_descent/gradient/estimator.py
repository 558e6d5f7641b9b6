"""Finite-difference probing of a byte-valued objective."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, MutableSequence, Optional, Protocol, Sequence

from byte_descent.arith import wrapping_add8, wrapping_sub8
from byte_descent.errors import UnreachableClassification
from byte_descent.utils import get_logger

logger = get_logger("gradient")


class Objective(Protocol):
    """Deterministic scoring function over a byte parameter vector."""

    def __call__(self, x: Sequence[int]) -> int: ...


class Direction(str, Enum):
    STATIONARY = "stationary"
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass
class GradientElement:
    """Discrete derivative of one dimension, valid only at the point it was probed."""

    magnitude: int = 0
    direction: Direction = Direction.STATIONARY
    weight: float = 0.0

    def assign(self, magnitude: int, direction: Direction) -> None:
        self.magnitude = magnitude
        self.direction = direction
        self.weight = 0.0


def classify(f0: int, f_plus: int, f_minus: int, index: int = -1) -> tuple[Direction, int]:
    """
    Map the three probe values of one dimension to (direction, magnitude).

    Raises:
        UnreachableClassification: the triple matched no rule.
    """
    if f0 <= f_minus and f0 <= f_plus:
        return Direction.STATIONARY, 0
    if f_plus < f0 <= f_minus:
        return Direction.DESCENDING, f0 - f_plus
    if f_minus < f0 <= f_plus:
        return Direction.ASCENDING, f0 - f_minus
    if f_minus < f0 and f_plus < f0 and f_minus < f_plus:
        return Direction.ASCENDING, f0 - f_minus
    if f_minus < f0 and f_plus < f0 and f_minus >= f_plus:
        return Direction.DESCENDING, f0 - f_plus
    logger.critical("Probe at dimension %d matched no classification rule", index)
    raise UnreachableClassification(index, f0, f_plus, f_minus)


def partial_derivative(
    objective: Objective,
    f0: int,
    x: MutableSequence[int],
    i: int,
    out: Optional[GradientElement] = None,
) -> GradientElement:
    """
    Probe dimension ``i`` at +1 and -1 (mod 256) around ``x``.

    ``x[i]`` is restored before returning, even if the objective raises.
    """
    original = x[i]
    try:
        x[i] = wrapping_add8(original, 1)
        f_plus = int(objective(x))
        x[i] = wrapping_sub8(original, 1)
        f_minus = int(objective(x))
    finally:
        x[i] = original

    direction, magnitude = classify(f0, f_plus, f_minus, index=i)
    logger.debug(
        "probe i=%d x=%d f0=%d f_plus=%d f_minus=%d -> %s/%d",
        i, original, f0, f_plus, f_minus, direction.value, magnitude,
    )
    element = out if out is not None else GradientElement()
    element.assign(magnitude, direction)
    return element


def compute_gradient(
    objective: Objective,
    f0: int,
    x: MutableSequence[int],
    out: Optional[List[GradientElement]] = None,
) -> List[GradientElement]:
    """
    Estimate every dimension of ``x``. Weights are reset to 0.

    When ``out`` is given its first ``len(x)`` elements are overwritten in place
    and a list of exactly those elements is returned.
    """
    n = len(x)
    if out is not None and len(out) < n:
        raise ValueError(f"Gradient buffer holds {len(out)} elements, need {n}")
    gradient: List[GradientElement] = []
    for i in range(n):
        slot = out[i] if out is not None else None
        gradient.append(partial_derivative(objective, f0, x, i, out=slot))
    return gradient
