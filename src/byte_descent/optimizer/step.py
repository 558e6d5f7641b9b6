"""Single-step transforms for callers that drive their own iteration."""

from __future__ import annotations

from typing import Iterable, Optional

from byte_descent.arith import as_parameter_vector
from byte_descent.events import EventKind, OptimizerEvent, snapshot_gradient
from byte_descent.gradient import Objective, compute_gradient, is_flat, normalize_gradient, weights_of
from byte_descent.objectives import CountingObjective
from byte_descent.optimizer.context import OptimizerContext, context_scope
from byte_descent.optimizer.results import StepResult
from byte_descent.search import SearchMode, line_search
from byte_descent.utils import get_logger

logger = get_logger("optimizer.step")


def _step(
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int],
    context: Optional[OptimizerContext],
    mode: SearchMode,
) -> StepResult:
    x = as_parameter_vector(x0, n)
    with context_scope(context) as ctx:
        counted = CountingObjective(objective)
        f0 = counted(x)
        gradient = compute_gradient(counted, f0, x, out=ctx.scratch(len(x)))
        if is_flat(gradient):
            logger.debug("%s step: already at an extremum (f=%d)", mode.value, f0)
            if ctx.metrics is not None:
                ctx.metrics.emit_counter("objective_evaluations", counted.calls, mode=mode.value)
            return StepResult(point=x, value=f0, reached_extremum=True, evaluations=counted.calls)

        normalize_gradient(gradient, ctx.config.momentum_beta)
        if ctx.wants_events:
            ctx.emit(
                OptimizerEvent(
                    kind=EventKind.GRADIENT,
                    mode=mode.value,
                    epoch=0,
                    value=f0,
                    point=list(x),
                    gradient=snapshot_gradient(gradient),
                )
            )
        point, value = line_search(
            counted, gradient, x, f0, mode, ctx.config.significance_threshold
        )
        logger.debug("%s step: %d -> %d", mode.value, f0, value)
        if ctx.metrics is not None:
            ctx.metrics.emit_counter("objective_evaluations", counted.calls, mode=mode.value)
        return StepResult(
            point=point,
            value=value,
            reached_extremum=False,
            evaluations=counted.calls,
            gradient_weights=weights_of(gradient),
        )


def step_descend(
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int] = None,
    context: Optional[OptimizerContext] = None,
) -> StepResult:
    """
    One gradient estimate plus line search toward lower values.

    When every dimension is stationary the result carries ``reached_extremum=True``
    and the input point unchanged.
    """
    return _step(objective, x0, n, context, SearchMode.DESCEND)


def step_ascend(
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int] = None,
    context: Optional[OptimizerContext] = None,
) -> StepResult:
    """One gradient estimate plus line search toward higher values."""
    return _step(objective, x0, n, context, SearchMode.ASCEND)
