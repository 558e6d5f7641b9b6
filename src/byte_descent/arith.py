"""Byte-wide wraparound arithmetic and parameter vector validation."""

from __future__ import annotations

import operator
from typing import Iterable, List, Optional

BYTE_MODULUS = 256


def wrapping_add8(value: int, delta: int) -> int:
    """(value + delta) mod 256."""
    return (value + delta) % BYTE_MODULUS


def wrapping_sub8(value: int, delta: int) -> int:
    """(value - delta) mod 256."""
    return (value - delta) % BYTE_MODULUS


def round_half_up(value: float) -> int:
    # round() would use banker's rounding; step sizes must grow monotonically with s.
    return int(value + 0.5)


def _as_byte_int(idx: int, value: object) -> int:
    # floats and bools are not byte parameters
    try:
        if isinstance(value, bool):
            raise TypeError
        return operator.index(value)
    except TypeError as exc:
        raise ValueError(f"Parameter {idx} must be an integer, got {value!r}") from exc


def as_parameter_vector(values: Iterable[int], n: Optional[int] = None) -> List[int]:
    """
    Copy ``values`` into a fresh list of byte parameters.

    Raises:
        ValueError: empty vector, ``n`` not matching the length, or an element
            outside [0, 255] or not an integer.
    """
    vector = [_as_byte_int(idx, v) for idx, v in enumerate(values)]
    if n is not None:
        if n < 1:
            raise ValueError("Parameter vector length n must be >= 1")
        if n != len(vector):
            raise ValueError(f"n={n} does not match vector length {len(vector)}")
    if not vector:
        raise ValueError("Parameter vector must contain at least one element")
    for idx, v in enumerate(vector):
        if v < 0 or v >= BYTE_MODULUS:
            raise ValueError(f"Parameter {idx} out of byte range: {v}")
    return vector
