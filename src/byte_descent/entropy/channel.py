"""Entropy channels feeding the random source.

A channel has an explicit open/close lifecycle; reading from a closed channel
or receiving fewer bytes than requested is an ``EntropyError``.
"""

from __future__ import annotations

import secrets
from typing import Optional, Protocol

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from byte_descent.errors import EntropyError


class EntropyChannel(Protocol):
    @property
    def is_open(self) -> bool: ...

    def open(self) -> None: ...

    def read(self, length: int) -> bytes: ...

    def close(self) -> None: ...


class SystemEntropyChannel:
    """Operating-system CSPRNG."""

    def __init__(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def read(self, length: int) -> bytes:
        if not self._open:
            raise EntropyError("Entropy channel read before open()")
        return secrets.token_bytes(length)

    def close(self) -> None:
        self._open = False


def _derive_key_iv(seed: bytes) -> tuple[bytes, bytes]:
    hkdf = HKDF(algorithm=hashes.SHA256(), length=48, salt=None, info=b"byte-descent/entropy")
    material = hkdf.derive(seed)
    return material[:32], material[32:]


class SeededEntropyChannel:
    """
    Reproducible channel: an AES-CTR keystream keyed from ``seed``.

    Every open() restarts the stream, so a run driven by the same seed draws the
    same perturbations.
    """

    def __init__(self, seed: bytes) -> None:
        if not seed:
            raise ValueError("seed must be non-empty")
        self._seed = bytes(seed)
        self._encryptor = None

    @classmethod
    def from_hex(cls, value: str) -> "SeededEntropyChannel":
        try:
            return cls(bytes.fromhex(value))
        except ValueError as exc:
            raise ValueError(f"Invalid hex seed '{value}'") from exc

    @property
    def is_open(self) -> bool:
        return self._encryptor is not None

    def open(self) -> None:
        key, iv = _derive_key_iv(self._seed)
        self._encryptor = Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor()

    def read(self, length: int) -> bytes:
        if self._encryptor is None:
            raise EntropyError("Entropy channel read before open()")
        return self._encryptor.update(b"\x00" * length)

    def close(self) -> None:
        if self._encryptor is not None:
            self._encryptor.finalize()
            self._encryptor = None


def default_channel(seed: Optional[str] = None) -> EntropyChannel:
    """Seeded channel for a hex ``seed``, the OS channel otherwise."""
    if seed:
        return SeededEntropyChannel.from_hex(seed)
    return SystemEntropyChannel()
