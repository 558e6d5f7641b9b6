from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class StopReason(str, Enum):
    EXTREMUM = "extremum"
    NO_IMPROVEMENT = "no_improvement"
    EPOCH_LIMIT = "epoch_limit"


@dataclass
class OptimizationResult:
    """Best point found by minimize/maximize and why the run ended."""

    point: List[int]
    value: int
    epochs: int
    stop_reason: StopReason
    evaluations: int = 0
    escapes: int = 0

    def __iter__(self):
        # Allows ``x, f = minimize(...)``.
        yield self.point
        yield self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point": list(self.point),
            "value": self.value,
            "epochs": self.epochs,
            "stop_reason": self.stop_reason.value,
            "evaluations": self.evaluations,
            "escapes": self.escapes,
        }


@dataclass
class StepResult:
    """Outcome of a single gradient-plus-line-search step."""

    point: List[int]
    value: int
    reached_extremum: bool
    evaluations: int = 0
    gradient_weights: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point": list(self.point),
            "value": self.value,
            "reached_extremum": self.reached_extremum,
            "evaluations": self.evaluations,
        }
