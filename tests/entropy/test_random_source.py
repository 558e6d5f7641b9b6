import pytest

from byte_descent.entropy import RandomSource, SeededEntropyChannel, SystemEntropyChannel, default_channel
from byte_descent.errors import ContractViolation, EntropyError


class ShortReadChannel:
    """Channel that never delivers a full seed."""

    def __init__(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def read(self, length: int) -> bytes:
        return b"\x01" * (length - 1)

    def close(self) -> None:
        self._open = False


def test_seeded_channel_is_reproducible_and_restarts_on_open() -> None:
    a = SeededEntropyChannel(b"seed-123")
    b = SeededEntropyChannel(b"seed-123")
    a.open()
    b.open()
    first = a.read(16)
    assert first == b.read(16)
    assert len(first) == 16
    assert a.read(16) != first
    a.close()
    a.open()
    assert a.read(16) == first
    a.close()
    b.close()


def test_seeded_channel_from_hex() -> None:
    channel = SeededEntropyChannel.from_hex("00ff")
    channel.open()
    assert len(channel.read(8)) == 8
    channel.close()
    with pytest.raises(ValueError):
        SeededEntropyChannel.from_hex("zz")


def test_read_before_open_is_fatal() -> None:
    for channel in (SystemEntropyChannel(), SeededEntropyChannel(b"x")):
        with pytest.raises(EntropyError):
            channel.read(8)


def test_default_channel_selection() -> None:
    assert isinstance(default_channel(None), SystemEntropyChannel)
    assert isinstance(default_channel("abcd"), SeededEntropyChannel)


def test_draws_stay_below_limit() -> None:
    source = RandomSource(SystemEntropyChannel())
    source.open()
    draws = [source.below(7) for _ in range(500)]
    source.close()
    assert all(0 <= d < 7 for d in draws)
    assert len(set(draws)) > 1


def test_same_seed_gives_same_sequence() -> None:
    def sequence():
        source = RandomSource(SeededEntropyChannel(b"repeat"), reseed_interval=5)
        source.open()
        try:
            return [source.below(256) for _ in range(50)]
        finally:
            source.close()

    assert sequence() == sequence()


def test_reseeds_periodically() -> None:
    source = RandomSource(SeededEntropyChannel(b"reseed"), reseed_interval=2)
    source.open()
    for _ in range(20):
        source.below(10)
    source.close()
    # each seed lasts between 1 and 2 draws
    assert 10 <= source.reseeds <= 20


def test_short_entropy_read_is_fatal() -> None:
    source = RandomSource(ShortReadChannel())
    source.open()
    with pytest.raises(ContractViolation):
        source.below(3)


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        RandomSource(SystemEntropyChannel(), reseed_interval=0)
    source = RandomSource(SystemEntropyChannel())
    source.open()
    with pytest.raises(ValueError):
        source.below(0)
    source.close()
