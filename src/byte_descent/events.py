"""Observability hook: optional callbacks receiving optimizer state as it evolves."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence

from byte_descent.gradient.estimator import GradientElement


class EventKind(str, Enum):
    GRADIENT = "gradient"
    ESCAPE = "escape"
    EPOCH = "epoch"
    STOP = "stop"


@dataclass
class OptimizerEvent:
    kind: EventKind
    mode: str
    epoch: int
    value: int
    point: List[int]
    best_value: Optional[int] = None
    gradient: List[GradientElement] = field(default_factory=list)
    detail: str = ""


EventSink = Callable[[OptimizerEvent], None]


def snapshot_gradient(gradient: Sequence[GradientElement]) -> List[GradientElement]:
    return [replace(el) for el in gradient]


class RecordingSink:
    """Keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: List[OptimizerEvent] = []

    def __call__(self, event: OptimizerEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> List[OptimizerEvent]:
        return [e for e in self.events if e.kind is kind]

    def clear(self) -> None:
        self.events.clear()
