from byte_descent.optimizer.context import OptimizerContext, context_scope
from byte_descent.optimizer.loop import maximize, minimize
from byte_descent.optimizer.results import OptimizationResult, StepResult, StopReason
from byte_descent.optimizer.step import step_ascend, step_descend

__all__ = [
    "OptimizerContext",
    "context_scope",
    "maximize",
    "minimize",
    "OptimizationResult",
    "StepResult",
    "StopReason",
    "step_ascend",
    "step_descend",
]
