"""Command-line interface for evolab workflows."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_neat_config
from .training import run_training


def _cmd_train(args: argparse.Namespace) -> int:
    try:
        neat_config = load_neat_config(Path(args.config))
    except (OSError, ValueError) as error:
        print(f"[train] invalid configuration: {error}", file=sys.stderr)
        return 1

    if args.iterations is not None and args.iterations <= 0:
        print("--iterations must be positive.", file=sys.stderr)
        return 1
    if args.workers is not None and args.workers <= 0:
        print("--workers must be positive.", file=sys.stderr)
        return 1

    if args.dry_run:
        print("[train] configuration validated")
        print(f"  population_size: {neat_config.population_size}")
        print(f"  iterations: {args.iterations or neat_config.iterations}")
        print(f"  workers: {args.workers or neat_config.workers}")
        print(f"  target_species: {neat_config.target_species}")
        return 0

    run_training(
        neat_config,
        output_dir=Path(args.output_dir),
        iterations=args.iterations,
        workers=args.workers,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evolab",
        description="Neuroevolution command-line interface",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser(
        "train",
        help="Evolve networks for the XOR task using a YAML configuration",
    )
    train.add_argument(
        "--config",
        required=True,
        help="Path to NEAT configuration YAML",
    )
    train.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Override the maximum number of generations",
    )
    train.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Evaluate concurrently on this many threads",
    )
    train.add_argument(
        "--output-dir",
        default="runs",
        help="Directory under which a timestamped run directory is created",
    )
    train.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration without training",
    )
    train.set_defaults(func=_cmd_train)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    result = args.func(args)
    return int(result)


if __name__ == "__main__":  # pragma: no cover - entry point
    raise SystemExit(main())
