"""Nonogram solving and generation engine.

This package exposes the public API surface via:

- ``nonogram.engine.generator.PuzzleGenerator``: generate-and-test puzzle generation.
- ``nonogram.engine.solver`` / ``nonogram.engine.sat_solver``: solution counting.
- ``nonogram.engine.hints`` and ``nonogram.engine.line_analysis``: play-time deduction.
- ``nonogram.engine.flow``: solve-path simulation and flow scoring.
"""

from .core.constants import Difficulty, DifficultySettings, HintKind, LineType, MarkingPolicy
from .core.models import Hint, Puzzle
from .engine.flow import analyze_information_flow, get_flow_report
from .engine.generator import (GeneratorConfig, PuzzleGenerator, build_puzzle,
                               generate_optimal_flow_puzzle, generate_puzzle)
from .engine.grid import create_empty_grid
from .engine.hints import get_hint, get_logical_hint
from .engine.line_analysis import analyze_line, auto_fill
from .engine.sat_solver import count_solutions_sat, solve_puzzle_sat
from .engine.solver import count_solutions, solve_puzzle

__all__ = [
    "Difficulty",
    "DifficultySettings",
    "GeneratorConfig",
    "Hint",
    "HintKind",
    "LineType",
    "MarkingPolicy",
    "Puzzle",
    "PuzzleGenerator",
    "analyze_information_flow",
    "analyze_line",
    "auto_fill",
    "build_puzzle",
    "count_solutions",
    "count_solutions_sat",
    "create_empty_grid",
    "generate_optimal_flow_puzzle",
    "generate_puzzle",
    "get_flow_report",
    "get_hint",
    "get_logical_hint",
    "solve_puzzle",
    "solve_puzzle_sat",
]

__version__ = "0.1.0"
