from .channel import EntropyChannel, SeededEntropyChannel, SystemEntropyChannel, default_channel
from .source import DEFAULT_RESEED_INTERVAL, RandomSource

__all__ = [
    "EntropyChannel",
    "SeededEntropyChannel",
    "SystemEntropyChannel",
    "default_channel",
    "DEFAULT_RESEED_INTERVAL",
    "RandomSource",
]
