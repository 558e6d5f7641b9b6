"""
Derivative-free optimizer for byte-valued parameter vectors.

Components:
- Finite-difference gradient estimation with wraparound probing
- Step-doubling line search (joint and per-dimension phases)
- Epoch loop with optional random plateau escape
- Single-step transforms for externally driven loops
"""

from byte_descent.config import OptimizerConfig, load_config
from byte_descent.errors import (
    ByteDescentError,
    ContractViolation,
    EntropyError,
    UnreachableClassification,
)
from byte_descent.optimizer import (
    OptimizationResult,
    OptimizerContext,
    StepResult,
    StopReason,
    maximize,
    minimize,
    step_ascend,
    step_descend,
)

__all__ = [
    "OptimizerConfig",
    "load_config",
    "ByteDescentError",
    "ContractViolation",
    "EntropyError",
    "UnreachableClassification",
    "OptimizationResult",
    "OptimizerContext",
    "StepResult",
    "StopReason",
    "maximize",
    "minimize",
    "step_ascend",
    "step_descend",
]
