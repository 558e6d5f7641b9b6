import itertools

import pytest

from byte_descent.gradient import Direction, GradientElement, classify, compute_gradient, partial_derivative


@pytest.mark.parametrize(
    "f0,f_plus,f_minus,expected",
    [
        (5, 5, 5, (Direction.STATIONARY, 0)),
        (5, 7, 6, (Direction.STATIONARY, 0)),
        (5, 3, 5, (Direction.DESCENDING, 2)),
        (5, 3, 9, (Direction.DESCENDING, 2)),
        (5, 5, 1, (Direction.ASCENDING, 4)),
        (5, 8, 1, (Direction.ASCENDING, 4)),
        (5, 4, 1, (Direction.ASCENDING, 4)),
        (5, 1, 4, (Direction.DESCENDING, 4)),
        (5, 2, 2, (Direction.DESCENDING, 3)),
    ],
)
def test_classification_table(f0, f_plus, f_minus, expected) -> None:
    assert classify(f0, f_plus, f_minus) == expected


def test_classification_is_total() -> None:
    values = range(-4, 5)
    for f0, f_plus, f_minus in itertools.product(values, repeat=3):
        direction, magnitude = classify(f0, f_plus, f_minus)
        assert magnitude >= 0
        assert (magnitude == 0) == (direction is Direction.STATIONARY)


def test_classification_handles_extreme_int64_values() -> None:
    lo, hi = -(2**63), 2**63 - 1
    assert classify(hi, lo, lo) == (Direction.DESCENDING, hi - lo)
    assert classify(lo, hi, hi) == (Direction.STATIONARY, 0)


def test_partial_derivative_probes_with_wraparound_and_restores() -> None:
    seen = []

    def objective(x):
        seen.append(list(x))
        return x[0]

    x = [0, 7]
    el = partial_derivative(objective, 0, x, 0)
    assert seen == [[1, 7], [255, 7]]
    assert x == [0, 7]
    assert el.direction is Direction.STATIONARY


def test_partial_derivative_restores_on_objective_error() -> None:
    def objective(x):
        raise RuntimeError("boom")

    x = [42]
    with pytest.raises(RuntimeError):
        partial_derivative(objective, 0, x, 0)
    assert x == [42]


def test_compute_gradient_per_dimension() -> None:
    target = [10, 200, 5]

    def objective(x):
        return sum(abs(a - b) for a, b in zip(x, target))

    x = [0, 0, 0]
    gradient = compute_gradient(objective, objective(x), x)
    assert [(el.direction, el.magnitude) for el in gradient] == [
        (Direction.DESCENDING, 1),
        (Direction.ASCENDING, 145),
        (Direction.DESCENDING, 1),
    ]
    assert all(el.weight == 0.0 for el in gradient)
    assert x == [0, 0, 0]


def test_compute_gradient_reuses_buffer() -> None:
    buffer = [GradientElement(magnitude=9, direction=Direction.ASCENDING, weight=0.7) for _ in range(5)]

    def objective(x):
        return (x[0] - 3) ** 2 + (x[1] - 3) ** 2

    gradient = compute_gradient(objective, objective([3, 4]), [3, 4], out=buffer)
    assert len(gradient) == 2
    assert gradient[0] is buffer[0]
    assert buffer[0].direction is Direction.STATIONARY
    assert buffer[1].direction is Direction.ASCENDING
    assert buffer[1].weight == 0.0
    assert buffer[2].magnitude == 9


def test_compute_gradient_rejects_small_buffer() -> None:
    with pytest.raises(ValueError):
        compute_gradient(lambda x: 0, 0, [1, 2, 3], out=[GradientElement()])
