"""
Command-line driver around the optimizer's built-in objectives.

Usage:
    byte-descent minimize --objective squared --target 89 --start 00
    byte-descent minimize --objective l1 --target 0ac805 --start 000000
    byte-descent maximize --objective squared --negate --target 89 --start 64
    byte-descent step-descend --objective l1 --target 0ac805 --start 000000 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from byte_descent.config import OptimizerConfig, load_config
from byte_descent.errors import ContractViolation
from byte_descent.objectives import BUILTIN_OBJECTIVES, negated
from byte_descent.optimizer import OptimizerContext, maximize, minimize, step_ascend, step_descend
from byte_descent.utils import configure_logging, get_logger

logger = get_logger("cli")

EXIT_FATAL = 70

COMMANDS = {
    "minimize": minimize,
    "maximize": maximize,
    "step-descend": step_descend,
    "step-ascend": step_ascend,
}


def parse_hex_bytes(value: str) -> List[int]:
    cleaned = value.replace(":", "").replace(",", "").replace(" ", "")
    try:
        data = bytes.fromhex(cleaned)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a hex byte string: '{value}'") from exc
    if not data:
        raise argparse.ArgumentTypeError("at least one byte is required")
    return list(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="byte-descent",
        description="Find a local extremum of a byte-vector objective",
    )
    parser.add_argument("command", choices=sorted(COMMANDS))
    parser.add_argument(
        "--objective",
        choices=sorted(BUILTIN_OBJECTIVES),
        default="l1",
        help="Reference objective measuring distance to --target",
    )
    parser.add_argument("--target", type=parse_hex_bytes, required=True, help="Target bytes as hex")
    parser.add_argument("--start", type=parse_hex_bytes, required=True, help="Starting bytes as hex")
    parser.add_argument("--negate", action="store_true", help="Optimize the negated objective")
    parser.add_argument("--config", type=Path, default=None, help="Optimizer config JSON")
    parser.add_argument("--seed", default=None, help="Hex seed for reproducible escape perturbations")
    parser.add_argument("--max-epochs", type=int, default=None)
    parser.add_argument("--escape", type=int, default=None, help="Random escape attempts per plateau")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser


def _resolve_config(args: argparse.Namespace) -> OptimizerConfig:
    config = load_config(args.config)
    overrides = config.to_dict()
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.max_epochs is not None:
        overrides["max_epochs"] = args.max_epochs
    if args.escape is not None:
        overrides["escape_attempts"] = args.escape
    return OptimizerConfig.from_dict(overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json_output=args.json_logs)

    if len(args.target) != len(args.start):
        parser.error("--target and --start must have the same length")
    try:
        config = _resolve_config(args)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))

    objective = BUILTIN_OBJECTIVES[args.objective](args.target)
    if args.negate:
        objective = negated(objective)

    try:
        with OptimizerContext(config) as ctx:
            result = COMMANDS[args.command](objective, args.start, len(args.start), context=ctx)
    except ContractViolation as exc:
        logger.critical("Fatal optimizer fault: %s", exc)
        return EXIT_FATAL

    payload = result.to_dict()
    payload["point_hex"] = bytes(result.point).hex()
    print(json.dumps(payload))
    return 0


if __name__ == "__main__":
    sys.exit(main())
