import pytest

from byte_descent import OptimizerConfig, OptimizerContext, step_ascend, step_descend
from byte_descent.objectives import l1_distance, negated, squared_distance
from byte_descent.utils import InMemoryMetrics


def test_step_descend_improves_from_non_extremal_point() -> None:
    objective = l1_distance([10, 200, 5])
    result = step_descend(objective, [0, 193, 0], 3)
    assert result.reached_extremum is False
    assert result.point == [10, 200, 7]
    assert result.value == 2
    assert len(result.gradient_weights) == 3


def test_step_descend_at_extremum_leaves_input() -> None:
    objective = l1_distance([10, 200, 5])
    x0 = [10, 200, 5]
    result = step_descend(objective, x0, 3)
    assert result.reached_extremum is True
    assert result.point == x0
    assert result.value == 0
    assert x0 == [10, 200, 5]


def test_step_ascend() -> None:
    objective = negated(squared_distance([137]))
    result = step_ascend(objective, [100])
    assert result.reached_extremum is False
    assert result.point == [131]
    assert result.value == -36


def test_external_driver_loop_reaches_minimum() -> None:
    objective = squared_distance([137])
    point = [0]
    with OptimizerContext() as ctx:
        for _ in range(20):
            result = step_descend(objective, point, context=ctx)
            if result.reached_extremum:
                break
            point = result.point
    assert point == [137]


def test_scratch_buffer_grows_to_largest_dimension() -> None:
    with OptimizerContext(OptimizerConfig(scratch_capacity=2)) as ctx:
        assert ctx.scratch_capacity == 2
        step_descend(l1_distance([1] * 5), [0] * 5, context=ctx)
        assert ctx.scratch_capacity == 5
        step_descend(l1_distance([1, 1]), [0, 0], context=ctx)
        assert ctx.scratch_capacity == 5
    assert ctx.scratch_capacity == 0


def test_step_requires_valid_dimension() -> None:
    with pytest.raises(ValueError):
        step_descend(l1_distance([1]), [1], 0)


def test_step_ascend_at_extremum_leaves_input() -> None:
    objective = negated(squared_distance([137]))
    x0 = [0]
    result = step_ascend(objective, x0, 1)
    assert result.reached_extremum is True
    assert result.point == [0]
    assert result.value == -(137 ** 2)
    assert x0 == [0]


def test_extremum_step_reports_evaluations() -> None:
    metrics = InMemoryMetrics()
    with OptimizerContext(metrics=metrics) as ctx:
        descended = step_descend(l1_distance([10, 200, 5]), [10, 200, 5], context=ctx)
        ascended = step_ascend(l1_distance([10, 200, 5]), [0, 193, 0], context=ctx)
    assert descended.reached_extremum is True
    assert metrics.total("objective_evaluations", mode="descend") == descended.evaluations
    assert metrics.total("objective_evaluations", mode="ascend") == ascended.evaluations
    assert metrics.total("objective_evaluations") == descended.evaluations + ascended.evaluations
