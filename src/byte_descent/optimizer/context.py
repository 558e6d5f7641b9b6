"""Per-run optimizer state: random source, scratch gradient and observability sinks."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Union

from byte_descent.config import OptimizerConfig
from byte_descent.entropy import EntropyChannel, RandomSource, default_channel
from byte_descent.events import EventSink, OptimizerEvent
from byte_descent.gradient.estimator import GradientElement
from byte_descent.utils import CompositeMetrics, MetricsSink, get_logger

logger = get_logger("context")


class OptimizerContext:
    """
    Owns the mutable resources one optimization run needs.

    ``open()`` acquires the entropy channel and allocates the scratch gradient;
    ``close()`` releases both. Contexts are not thread-safe: concurrent runs
    must each use their own.

    ``metrics`` may be a single sink or a list of sinks that all receive every
    sample.
    """

    def __init__(
        self,
        config: Optional[OptimizerConfig] = None,
        channel: Optional[EntropyChannel] = None,
        events: Optional[EventSink] = None,
        metrics: Union[MetricsSink, Sequence[MetricsSink], None] = None,
    ) -> None:
        self.config = config or OptimizerConfig()
        self.random = RandomSource(
            channel if channel is not None else default_channel(self.config.seed),
            reseed_interval=self.config.reseed_interval,
        )
        self.events = events
        if isinstance(metrics, (list, tuple)):
            metrics = CompositeMetrics(list(metrics)) if metrics else None
        self.metrics: Optional[MetricsSink] = metrics
        self._scratch: List[GradientElement] = []
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def scratch_capacity(self) -> int:
        return len(self._scratch)

    def open(self) -> "OptimizerContext":
        if self._open:
            return self
        self.random.open()
        self._scratch = [GradientElement() for _ in range(self.config.scratch_capacity)]
        self._open = True
        logger.debug("Opened optimizer context (scratch capacity %d)", len(self._scratch))
        return self

    def close(self) -> None:
        if not self._open:
            return
        self.random.close()
        self._scratch = []
        self._open = False
        logger.debug("Closed optimizer context")

    def __enter__(self) -> "OptimizerContext":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def require_open(self) -> None:
        if not self._open:
            raise RuntimeError("OptimizerContext is not open; call open() or use it as a context manager")

    def scratch(self, n: int) -> List[GradientElement]:
        """Reusable gradient buffer holding at least ``n`` elements."""
        self.require_open()
        if len(self._scratch) < n:
            self._scratch.extend(GradientElement() for _ in range(n - len(self._scratch)))
            logger.debug("Grew scratch gradient to %d elements", n)
        return self._scratch

    def emit(self, event: OptimizerEvent) -> None:
        if self.events is not None:
            self.events(event)

    @property
    def wants_events(self) -> bool:
        return self.events is not None


@contextmanager
def context_scope(context: Optional[OptimizerContext]) -> Iterator[OptimizerContext]:
    """Yield ``context`` (which must be open), or a transient one closed on exit."""
    if context is not None:
        context.require_open()
        yield context
        return
    with OptimizerContext() as transient:
        yield transient
