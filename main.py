"""CLI entrypoint for the nonogram puzzle generator."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict

from nonogram.core.constants import Difficulty
from nonogram.engine.flow import analyze_information_flow
from nonogram.engine.generator import GeneratorConfig, PuzzleGenerator
from nonogram.utils.logger import configure_logging
from nonogram.utils.pretty import print_puzzle_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate uniquely solvable nonogram puzzles",
    )
    parser.add_argument("--size", type=int, required=True, help="Grid size in cells (N for an NxN grid)")
    parser.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="Difficulty level (controls fill density and minimum flow score)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Candidate budget before falling back to the last candidate",
    )
    parser.add_argument(
        "--optimal-flow",
        type=int,
        metavar="N",
        default=None,
        help="Run N independent searches and keep the highest flow score",
    )
    parser.add_argument(
        "--no-flow-filter",
        action="store_true",
        help="Accept unique puzzles without checking the minimum flow score",
    )
    parser.add_argument(
        "--sat-max-size",
        type=int,
        default=None,
        help="Largest size checked with the SAT solver (larger sizes use propagation)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print grid, clue and flow statistics before the JSON output",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.size < 1:
        parser.error("--size must be at least 1")
    if args.optimal_flow is not None and args.optimal_flow < 1:
        parser.error("--optimal-flow must be at least 1")
    if args.optimal_flow is not None and args.no_flow_filter:
        parser.error("--optimal-flow cannot be combined with --no-flow-filter")

    overrides: Dict[str, Any] = {}
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.sat_max_size is not None:
        overrides["sat_max_size"] = args.sat_max_size

    config = GeneratorConfig(
        size=args.size,
        difficulty=args.difficulty,
        seed=args.seed,
        require_flow=not args.no_flow_filter,
        **overrides,
    )
    generator = PuzzleGenerator(config)
    if args.optimal_flow is not None:
        puzzle = generator.generate_optimal_flow(args.optimal_flow)
    else:
        puzzle = generator.generate()

    if args.report:
        analysis = analyze_information_flow(puzzle.row_clues, puzzle.col_clues, puzzle.size)
        print_puzzle_stats(puzzle, analysis, seed=args.seed)

    payload: Dict[str, Any] = {
        "difficulty": config.difficulty.value,
        "seed": args.seed,
        **puzzle.to_jsonable(),
    }
    output_text = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
