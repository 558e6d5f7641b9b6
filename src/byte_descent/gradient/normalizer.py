from __future__ import annotations

from typing import Optional, Sequence

from byte_descent.gradient.estimator import GradientElement


def max_magnitude(gradient: Sequence[GradientElement]) -> int:
    return max((el.magnitude for el in gradient), default=0)


def is_flat(gradient: Sequence[GradientElement]) -> bool:
    """True when every dimension is Stationary."""
    return max_magnitude(gradient) == 0


def normalize_gradient(
    gradient: Sequence[GradientElement],
    beta: float = 0.0,
    previous: Optional[Sequence[float]] = None,
) -> None:
    """
    Set each element's weight to ``beta * previous + (1 - beta) * magnitude / max``.

    Args:
        gradient: Elements freshly estimated at the current point.
        beta: Momentum factor in [0, 1); 0 uses the pure ratio.
        previous: Prior weights, one per element. Missing priors count as zero,
            so the first estimate is the pure ratio scaled by ``1 - beta``.

    Raises:
        ValueError: flat gradient (the caller decides what a plateau means),
            ``beta`` out of range or ``previous`` of the wrong length.
    """
    if not 0.0 <= beta < 1.0:
        raise ValueError("beta must satisfy 0 <= beta < 1")
    peak = max_magnitude(gradient)
    if peak == 0:
        raise ValueError("Cannot normalize a flat gradient")
    if previous is None:
        previous = [0.0] * len(gradient)
    elif len(previous) != len(gradient):
        raise ValueError("Previous weights length mismatch")
    for el, prior in zip(gradient, previous):
        el.weight = beta * prior + (1.0 - beta) * (el.magnitude / peak)


def weights_of(gradient: Sequence[GradientElement]) -> list[float]:
    return [el.weight for el in gradient]
