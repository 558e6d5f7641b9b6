from byte_descent.gradient.estimator import (
    Direction,
    GradientElement,
    Objective,
    classify,
    compute_gradient,
    partial_derivative,
)
from byte_descent.gradient.normalizer import is_flat, max_magnitude, normalize_gradient, weights_of

__all__ = [
    "Direction",
    "GradientElement",
    "Objective",
    "classify",
    "compute_gradient",
    "partial_derivative",
    "is_flat",
    "max_magnitude",
    "normalize_gradient",
    "weights_of",
]
