"""Epoch loop: estimate, escape plateaus, normalize, line-search, repeat."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Iterable, List, Optional, Tuple

from byte_descent.arith import as_parameter_vector, wrapping_add8
from byte_descent.events import EventKind, OptimizerEvent, snapshot_gradient
from byte_descent.gradient import (
    GradientElement,
    Objective,
    compute_gradient,
    is_flat,
    normalize_gradient,
    weights_of,
)
from byte_descent.objectives import CountingObjective
from byte_descent.optimizer.context import OptimizerContext, context_scope
from byte_descent.optimizer.results import OptimizationResult, StopReason
from byte_descent.search import SearchMode, line_search
from byte_descent.utils import Timer, get_logger

logger = get_logger("optimizer")


def _escape_plateau(
    ctx: OptimizerContext,
    objective: CountingObjective,
    x: List[int],
    f: int,
    gradient: List[GradientElement],
    mode: SearchMode,
    epoch: int,
) -> Tuple[int, List[GradientElement], int]:
    """
    Randomly perturb ``x`` in place until the gradient is no longer flat or the
    escape budget runs out. Returns (value, gradient, attempts used).
    """
    attempts = 0
    while is_flat(gradient) and attempts < ctx.config.escape_attempts:
        attempts += 1
        index = ctx.random.below(len(x))
        offset = ctx.random.below(256)
        x[index] = wrapping_add8(x[index], offset)
        f = objective(x)
        gradient = compute_gradient(objective, f, x)
        logger.debug("Escape attempt %d: x[%d] += %d -> f=%d", attempts, index, offset, f)
        if ctx.wants_events:
            ctx.emit(
                OptimizerEvent(
                    kind=EventKind.ESCAPE,
                    mode=mode.value,
                    epoch=epoch,
                    value=f,
                    point=list(x),
                    detail=f"x[{index}] += {offset}",
                )
            )
    return f, gradient, attempts


def _optimize(
    ctx: OptimizerContext,
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int],
    mode: SearchMode,
) -> OptimizationResult:
    config = ctx.config
    counted = CountingObjective(objective)
    x_next = as_parameter_vector(x0, n)
    f_next = counted(x_next)
    best_x, best_f = list(x_next), f_next
    previous_weights: Optional[List[float]] = None
    stop_reason = StopReason.EPOCH_LIMIT
    escapes = 0
    epoch = 0

    while epoch < config.max_epochs:
        x_prev, f_prev = list(x_next), f_next
        gradient = compute_gradient(counted, f_prev, x_prev)
        if is_flat(gradient):
            f_prev, gradient, used = _escape_plateau(ctx, counted, x_prev, f_prev, gradient, mode, epoch)
            escapes += used
            if is_flat(gradient):
                stop_reason = StopReason.EXTREMUM
                break
            if mode.improves(f_prev, best_f):
                best_x, best_f = list(x_prev), f_prev

        normalize_gradient(gradient, config.momentum_beta, previous_weights)
        previous_weights = weights_of(gradient)
        if ctx.wants_events:
            ctx.emit(
                OptimizerEvent(
                    kind=EventKind.GRADIENT,
                    mode=mode.value,
                    epoch=epoch,
                    value=f_prev,
                    point=list(x_prev),
                    best_value=best_f,
                    gradient=snapshot_gradient(gradient),
                )
            )

        x_next, f_next = line_search(
            counted, gradient, x_prev, f_prev, mode, config.significance_threshold
        )
        epoch += 1
        if mode.improves(f_next, best_f):
            best_x, best_f = list(x_next), f_next
        logger.debug("Epoch %d: %d -> %d (best %d)", epoch, f_prev, f_next, best_f)
        if ctx.metrics is not None:
            ctx.metrics.emit_gauge("epoch_value", f_next, mode=mode.value)
        if ctx.wants_events:
            ctx.emit(
                OptimizerEvent(
                    kind=EventKind.EPOCH,
                    mode=mode.value,
                    epoch=epoch,
                    value=f_next,
                    point=list(x_next),
                    best_value=best_f,
                )
            )
        if f_next == f_prev:
            stop_reason = StopReason.NO_IMPROVEMENT
            break

    result = OptimizationResult(
        point=best_x,
        value=best_f,
        epochs=epoch,
        stop_reason=stop_reason,
        evaluations=counted.calls,
        escapes=escapes,
    )
    logger.info(
        "%s finished: value=%d epochs=%d reason=%s evaluations=%d",
        mode.value, result.value, result.epochs, result.stop_reason.value, result.evaluations,
    )
    if ctx.metrics is not None:
        ctx.metrics.emit_counter("objective_evaluations", counted.calls, mode=mode.value)
    if ctx.wants_events:
        ctx.emit(
            OptimizerEvent(
                kind=EventKind.STOP,
                mode=mode.value,
                epoch=epoch,
                value=result.value,
                point=list(result.point),
                best_value=result.value,
                detail=stop_reason.value,
            )
        )
    return result


def _run(
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int],
    context: Optional[OptimizerContext],
    mode: SearchMode,
) -> OptimizationResult:
    with context_scope(context) as ctx:
        timer = (
            Timer(ctx.metrics, "optimize_seconds", mode=mode.value)
            if ctx.metrics is not None
            else nullcontext()
        )
        with timer:
            return _optimize(ctx, objective, x0, n, mode)


def minimize(
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int] = None,
    context: Optional[OptimizerContext] = None,
) -> OptimizationResult:
    """
    Search for a local minimum of ``objective`` near ``x0``.

    Args:
        objective: Deterministic function of a byte list returning an int.
        x0: Starting bytes; copied, never mutated.
        n: Expected dimension; must equal ``len(x0)`` when given.
        context: Open context to draw randomness and sinks from. A transient
            context with default configuration is used when omitted.

    Returns:
        OptimizationResult whose value is never greater than ``objective(x0)``.

    Raises:
        ValueError: empty vector, ``n`` mismatch or bytes out of range.
    """
    return _run(objective, x0, n, context, SearchMode.DESCEND)


def maximize(
    objective: Objective,
    x0: Iterable[int],
    n: Optional[int] = None,
    context: Optional[OptimizerContext] = None,
) -> OptimizationResult:
    """Search for a local maximum; mirror of :func:`minimize`."""
    return _run(objective, x0, n, context, SearchMode.ASCEND)
