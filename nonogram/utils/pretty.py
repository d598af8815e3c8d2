"""Pretty-print helpers for puzzles, player grids and flow analyses."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..core.constants import EMPTY, FILLED, UNKNOWN

if TYPE_CHECKING:
    from ..core.models import FlowAnalysis, Puzzle


SYMBOLS = {
    FILLED: "#",
    EMPTY: "x",
    UNKNOWN: ".",
}


def cell_symbol(value: Optional[bool]) -> str:
    return SYMBOLS.get(value, "?")


def format_clues(clues: Sequence[int]) -> str:
    return " ".join(str(value) for value in clues)


def format_grid(rows: Sequence[Sequence[Optional[bool]]]) -> str:
    width = len(rows[0]) if rows else 0
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(rows):
        row_render = " ".join(f"{cell_symbol(value):>2}" for value in row)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_puzzle(puzzle: Puzzle, *, show_solution: bool = True) -> str:
    """Render the clue lists, followed by the solution grid when requested."""

    lines: List[str] = ["Rows:"]
    for r, clues in enumerate(puzzle.row_clues):
        lines.append(f"  {r:>2}: {format_clues(clues)}")
    lines.append("Columns:")
    for c, clues in enumerate(puzzle.col_clues):
        lines.append(f"  {c:>2}: {format_clues(clues)}")
    if show_solution:
        lines.append("")
        lines.append(format_grid(puzzle.solution))
    return "\n".join(lines)


def pretty_print_grid(rows, *, label: str | None = None, stream=None) -> None:
    """Print a player or solution grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(rows), file=stream)


def print_puzzle_stats(
    puzzle: Puzzle,
    analysis: Optional[FlowAnalysis] = None,
    *,
    seed: Optional[int] = None,
    stream=None,
) -> None:
    """Print the solution grid plus fill, clue and flow statistics."""

    stream = stream or sys.stdout
    print(format_grid(puzzle.solution), file=stream)

    size = puzzle.size
    total_cells = size * size
    filled = sum(1 for row in puzzle.solution for value in row if value)

    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {size} x {size} ({total_cells} cells)", file=stream)
    print(f"  Filled:        {filled} ({filled / total_cells * 100:.0f}%)", file=stream)

    runs = [value for clues in (*puzzle.row_clues, *puzzle.col_clues) for value in clues if value]
    run_dist = Counter(runs)
    print(file=stream)
    print("--- Clues ---", file=stream)
    print(f"  Total runs:    {len(runs)}", file=stream)
    if runs:
        print(f"  Run range:     {min(runs)}-{max(runs)} (avg {sum(runs) / len(runs):.1f})", file=stream)
        dist_parts = [f"{length}:{count}" for length, count in sorted(run_dist.items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)

    if analysis is not None:
        from ..engine.flow import get_flow_report

        print(file=stream)
        print("--- Flow ---", file=stream)
        for line in get_flow_report(analysis).splitlines():
            print(f"  {line}" if line else "", file=stream)
    elif puzzle.flow_score is not None:
        print(file=stream)
        print(f"Flow score: {puzzle.flow_score:.2f}", file=stream)

    if puzzle.diagnostics:
        print(file=stream)
        print("--- Diagnostics ---", file=stream)
        for msg in puzzle.diagnostics:
            print(f"  {msg}", file=stream)

    if seed is not None:
        print(file=stream)
        print(f"Seed: {seed}", file=stream)
