"""Optimizer configuration: dataclass defaults, JSON files and environment overrides."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

from byte_descent.utils import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "BYTE_DESCENT_CONFIG"
MAX_EPOCHS_ENV_VAR = "BYTE_DESCENT_MAX_EPOCHS"
DEFAULT_MAX_EPOCHS = 1000
_ENV_INVALID_WARNING_EMITTED = False


def _resolve_max_epochs(candidate: int) -> int:
    """
    Apply the environment override for the epoch bound if present.
    """
    global _ENV_INVALID_WARNING_EMITTED
    env_value = os.getenv(MAX_EPOCHS_ENV_VAR)
    if env_value is None:
        return candidate
    try:
        parsed = int(env_value)
        if parsed <= 0:
            raise ValueError
        return parsed
    except ValueError:
        if not _ENV_INVALID_WARNING_EMITTED:
            logger.warning(
                "Invalid %s=%s; keeping max_epochs=%d",
                MAX_EPOCHS_ENV_VAR,
                env_value,
                candidate,
            )
            _ENV_INVALID_WARNING_EMITTED = True
        return candidate


def _default_max_epochs() -> int:
    return _resolve_max_epochs(DEFAULT_MAX_EPOCHS)


@dataclass
class OptimizerConfig:
    """Tunables for one optimizer context.

    The escape budget defaults to zero, so a flat gradient ends the run
    immediately; raise it to perturb out of plateaus. $BYTE_DESCENT_MAX_EPOCHS
    replaces the default epoch bound but never an explicitly passed one.
    """

    max_epochs: int = field(default_factory=_default_max_epochs)
    escape_attempts: int = 0
    momentum_beta: float = 0.0
    significance_threshold: float = 0.01
    reseed_interval: int = 10000
    scratch_capacity: int = 10
    seed: Optional[str] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.max_epochs <= 0:
            raise ValueError("max_epochs must be positive")
        if self.escape_attempts < 0:
            raise ValueError("escape_attempts must be non-negative")
        if not 0.0 <= self.momentum_beta < 1.0:
            raise ValueError("momentum_beta must satisfy 0 <= beta < 1")
        if not 0.0 <= self.significance_threshold <= 1.0:
            raise ValueError("significance_threshold must lie in [0, 1]")
        if self.reseed_interval <= 0:
            raise ValueError("reseed_interval must be positive")
        if self.scratch_capacity <= 0:
            raise ValueError("scratch_capacity must be positive")
        if self.seed is not None:
            try:
                if not bytes.fromhex(self.seed):
                    raise ValueError
            except ValueError as exc:
                raise ValueError(f"seed must be a non-empty hex string, got '{self.seed}'") from exc

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "OptimizerConfig":
        """Create config from dictionary, using defaults for missing fields."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown optimizer config keys: {sorted(unknown)}")
        try:
            seed = data.get("seed")
            max_epochs = data.get("max_epochs")
            return cls(
                max_epochs=int(max_epochs) if max_epochs is not None else _default_max_epochs(),
                escape_attempts=int(data.get("escape_attempts", 0)),
                momentum_beta=float(data.get("momentum_beta", 0.0)),
                significance_threshold=float(data.get("significance_threshold", 0.01)),
                reseed_interval=int(data.get("reseed_interval", 10000)),
                scratch_capacity=int(data.get("scratch_capacity", 10)),
                seed=str(seed) if seed is not None else None,
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid optimizer config: {exc}") from exc

    @classmethod
    def from_file(cls, path: Path) -> "OptimizerConfig":
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid optimizer config JSON at {path}: {exc}") from exc
        return cls.from_dict(data)

    def to_dict(self) -> Dict:
        return asdict(self)


def resolve_config_path(path: Optional[Path] = None) -> Optional[Path]:
    """Explicit path first, then the BYTE_DESCENT_CONFIG environment variable."""
    if path is not None:
        return Path(path).resolve()
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        candidate = Path(env_value)
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    return None


def load_config(path: Optional[Path] = None) -> OptimizerConfig:
    """
    Load the optimizer configuration.

    Raises:
        FileNotFoundError: an explicitly requested file does not exist.
        ValueError: the file is not valid JSON or holds invalid values.
    """
    resolved = resolve_config_path(path)
    if resolved is None:
        return OptimizerConfig()
    if not resolved.exists():
        raise FileNotFoundError(f"Optimizer config not found at {resolved}")
    logger.debug("Loading optimizer config from %s", resolved)
    return OptimizerConfig.from_file(resolved)
