"""Step-doubling line search over a normalized byte gradient.

Both variants run two phases from the starting point:

* joint: every non-stationary dimension moves by ``round(weight * s)`` in its
  improving direction, doubling ``s`` while the objective keeps improving;
* per-dimension: for ``n > 1``, each dimension whose weight reaches the
  significance threshold repeats the doubling search on its own, recovering
  precision that the joint step loses on low-weight dimensions.

A step that fails to improve strictly is discarded, so the value returned is
never worse than the starting value.
"""

from __future__ import annotations

from enum import Enum
from typing import List, MutableSequence, Sequence, Tuple

from byte_descent.arith import round_half_up, wrapping_add8, wrapping_sub8
from byte_descent.gradient.estimator import Direction, GradientElement, Objective
from byte_descent.utils import get_logger

logger = get_logger("search")

DEFAULT_SIGNIFICANCE_THRESHOLD = 0.01


class SearchMode(str, Enum):
    DESCEND = "descend"
    ASCEND = "ascend"

    def improves(self, candidate: int, incumbent: int) -> bool:
        if self is SearchMode.DESCEND:
            return candidate < incumbent
        return candidate > incumbent


def _move(value: int, element: GradientElement, amount: int, mode: SearchMode) -> int:
    # Descending means f drops as the coordinate grows, so descent adds.
    toward_plus = (element.direction is Direction.DESCENDING) == (mode is SearchMode.DESCEND)
    if toward_plus:
        return wrapping_add8(value, amount)
    return wrapping_sub8(value, amount)


def _apply_joint_step(
    x: MutableSequence[int], gradient: Sequence[GradientElement], step: int, mode: SearchMode
) -> None:
    for i, el in enumerate(gradient):
        if el.direction is Direction.STATIONARY:
            continue
        x[i] = _move(x[i], el, round_half_up(el.weight * step), mode)


def _joint_phase(
    objective: Objective,
    gradient: Sequence[GradientElement],
    x: List[int],
    f: int,
    mode: SearchMode,
) -> Tuple[List[int], int]:
    step = 1
    while True:
        candidate = list(x)
        _apply_joint_step(candidate, gradient, step, mode)
        f_next = int(objective(candidate))
        logger.debug("%s joint step=%d f_prev=%d f_next=%d", mode.value, step, f, f_next)
        if not mode.improves(f_next, f):
            return x, f
        x, f = candidate, f_next
        step *= 2


def _single_dimension_phase(
    objective: Objective,
    element: GradientElement,
    index: int,
    x: List[int],
    f: int,
    mode: SearchMode,
) -> Tuple[List[int], int]:
    step = 1
    while True:
        candidate = list(x)
        candidate[index] = _move(candidate[index], element, round_half_up(element.weight * step), mode)
        f_next = int(objective(candidate))
        logger.debug(
            "%s dim=%d step=%d f_prev=%d f_next=%d", mode.value, index, step, f, f_next
        )
        if not mode.improves(f_next, f):
            return x, f
        x, f = candidate, f_next
        step *= 2


def line_search(
    objective: Objective,
    gradient: Sequence[GradientElement],
    x0: Sequence[int],
    f0: int,
    mode: SearchMode,
    threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
) -> Tuple[List[int], int]:
    """
    Search from ``x0`` along ``gradient`` for a strictly better point.

    Args:
        objective: Scoring function.
        gradient: Normalized gradient estimated at ``x0``.
        x0: Starting point; not mutated.
        f0: ``objective(x0)``.
        mode: Whether lower (descend) or higher (ascend) values are better.
        threshold: Minimum weight for a dimension to get its own refinement.

    Returns:
        (point, value); ``(copy of x0, f0)`` when no step improves.
    """
    if len(gradient) != len(x0):
        raise ValueError(f"Gradient has {len(gradient)} elements for a {len(x0)}-dimensional point")
    x, f = _joint_phase(objective, gradient, list(x0), f0, mode)
    if len(x) == 1:
        return x, f
    for index, el in enumerate(gradient):
        if el.weight < threshold or el.direction is Direction.STATIONARY:
            continue
        x, f = _single_dimension_phase(objective, el, index, x, f, mode)
    return x, f


def descend(
    objective: Objective,
    gradient: Sequence[GradientElement],
    x0: Sequence[int],
    f0: int,
    threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
) -> Tuple[List[int], int]:
    """Line search toward lower values."""
    return line_search(objective, gradient, x0, f0, SearchMode.DESCEND, threshold)


def ascend(
    objective: Objective,
    gradient: Sequence[GradientElement],
    x0: Sequence[int],
    f0: int,
    threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
) -> Tuple[List[int], int]:
    """Line search toward higher values."""
    return line_search(objective, gradient, x0, f0, SearchMode.ASCEND, threshold)
