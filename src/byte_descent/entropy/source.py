"""Bounded random integers with periodic reseeding."""

from __future__ import annotations

import numpy as np

from byte_descent.entropy.channel import EntropyChannel
from byte_descent.errors import EntropyError
from byte_descent.utils import get_logger

logger = get_logger("entropy")

DEFAULT_RESEED_INTERVAL = 10000
SEED_BYTES = 8


class RandomSource:
    """
    Draws integers from a numpy generator that is reseeded from ``channel``.

    After each reseed the number of draws until the next one is itself random,
    between ``reseed_interval // 2`` and ``reseed_interval // 2 + reseed_interval - 1``.
    Not safe for concurrent use; give each run its own instance.
    """

    def __init__(self, channel: EntropyChannel, reseed_interval: int = DEFAULT_RESEED_INTERVAL) -> None:
        if reseed_interval <= 0:
            raise ValueError("reseed_interval must be positive")
        self.channel = channel
        self.reseed_interval = reseed_interval
        self.reseeds = 0
        self._rng: np.random.Generator | None = None
        self._remaining = 0

    @property
    def is_open(self) -> bool:
        return self.channel.is_open

    def open(self) -> None:
        """Acquire the entropy channel. The first draw reseeds."""
        self.channel.open()
        self._rng = None
        self._remaining = 0

    def close(self) -> None:
        """Release the entropy channel and forget the generator state."""
        self.channel.close()
        self._rng = None
        self._remaining = 0

    def _reseed(self) -> None:
        raw = self.channel.read(SEED_BYTES)
        if len(raw) != SEED_BYTES:
            logger.critical("Entropy channel returned %d of %d bytes", len(raw), SEED_BYTES)
            raise EntropyError(f"Short entropy read: got {len(raw)} of {SEED_BYTES} bytes")
        seed = int.from_bytes(raw[:4], "little")
        budget_word = int.from_bytes(raw[4:], "little")
        self._rng = np.random.default_rng(seed)
        self._remaining = self.reseed_interval // 2 + budget_word % self.reseed_interval
        self.reseeds += 1
        logger.debug("Reseeded random source; next reseed in %d draws", self._remaining)

    def below(self, limit: int) -> int:
        """Uniform integer in [0, limit)."""
        if limit <= 0:
            raise ValueError("limit must be positive")
        if self._remaining <= 0 or self._rng is None:
            self._reseed()
        self._remaining -= 1
        return int(self._rng.integers(0, limit))
