import pytest

from byte_descent.gradient import Direction, GradientElement, compute_gradient, normalize_gradient
from byte_descent.objectives import CountingObjective, l1_distance, negated, squared_distance
from byte_descent.search import SearchMode, ascend, descend, line_search


def normalized_gradient(objective, x):
    gradient = compute_gradient(objective, objective(x), x)
    normalize_gradient(gradient)
    return gradient


def test_descend_single_dimension_wraps_below_zero() -> None:
    objective = CountingObjective(squared_distance([137]))
    gradient = normalized_gradient(squared_distance([137]), [0])
    point, value = descend(objective, gradient, [0], 137**2)
    assert point == [129]
    assert value == 64
    # joint phase only: steps 1, 2, 4, ..., 128
    assert objective.calls == 8


def test_descend_joint_then_per_dimension() -> None:
    objective = l1_distance([10, 200, 5])
    gradient = normalized_gradient(objective, [0, 0, 0])
    point, value = descend(objective, gradient, [0, 0, 0], 215)
    assert point == [0, 193, 0]
    assert value == 22

    gradient = normalized_gradient(objective, point)
    point, value = descend(objective, gradient, point, value)
    assert point == [10, 200, 7]
    assert value == 2


def test_ascend_mirrors_descend() -> None:
    objective = negated(squared_distance([137]))
    gradient = normalized_gradient(objective, [100])
    point, value = ascend(objective, gradient, [100], objective([100]))
    assert point == [131]
    assert value == -36


def test_returns_start_when_no_step_improves() -> None:
    x0 = [0]
    gradient = [GradientElement(magnitude=1, direction=Direction.DESCENDING, weight=1.0)]
    point, value = descend(lambda x: x[0], gradient, x0, 0)
    assert point == [0]
    assert value == 0
    assert point is not x0


def test_start_point_is_not_mutated() -> None:
    objective = l1_distance([10, 200, 5])
    x0 = [0, 0, 0]
    gradient = normalized_gradient(objective, x0)
    line_search(objective, gradient, x0, 215, SearchMode.DESCEND)
    assert x0 == [0, 0, 0]


def test_low_weight_dimensions_skip_refinement() -> None:
    base = l1_distance([10, 3])
    candidates = []

    def objective(x):
        candidates.append(list(x))
        return base(x)

    gradient = [
        GradientElement(magnitude=1, direction=Direction.DESCENDING, weight=0.004),
        GradientElement(magnitude=250, direction=Direction.DESCENDING, weight=1.0),
    ]
    point, value = descend(objective, gradient, [0, 0], 13)
    assert point == [0, 3]
    assert value == 10
    assert all(c[0] == 0 for c in candidates)


def test_threshold_zero_refines_every_moving_dimension() -> None:
    objective = l1_distance([10, 3])
    gradient = [
        GradientElement(magnitude=1, direction=Direction.DESCENDING, weight=0.5),
        GradientElement(magnitude=2, direction=Direction.DESCENDING, weight=1.0),
    ]
    point, value = descend(objective, gradient, [0, 0], 13, threshold=0.0)
    assert value < 13
    assert value == objective(point)


def test_gradient_length_must_match_point() -> None:
    with pytest.raises(ValueError):
        descend(lambda x: 0, [GradientElement()], [1, 2], 0)


def test_search_mode_improves() -> None:
    assert SearchMode.DESCEND.improves(1, 2)
    assert not SearchMode.DESCEND.improves(2, 2)
    assert SearchMode.ASCEND.improves(3, 2)
    assert not SearchMode.ASCEND.improves(2, 2)
