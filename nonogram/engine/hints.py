"""Whole-grid deduction and deterministic hint selection."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from ..core.constants import HintKind
from ..core.models import Hint, Puzzle
from ..utils.logger import get_logger
from .line_analysis import analyze_line

LOGGER = get_logger(__name__)

Cell = Tuple[int, int]
PlayerGrid = Sequence[Sequence[Optional[bool]]]


def find_deducible_cells(
    player_grid: PlayerGrid,
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
) -> Tuple[List[Cell], List[Cell]]:
    """Return ``(cells_to_fill, cells_to_mark)`` in discovery order.

    Rows are scanned top to bottom, then columns left to right; a cell found
    by both its row and its column is reported once, at its first discovery.
    Marks are every forced-empty cell, a superset of what either
    :class:`MarkingPolicy` lets auto-fill mark.
    """

    height = len(player_grid)
    width = len(player_grid[0]) if height else 0
    cells_to_fill: List[Cell] = []
    cells_to_mark: List[Cell] = []
    seen_fill = set()
    seen_mark = set()

    def record(cell: Cell, target: List[Cell], seen: set) -> None:
        if cell not in seen and player_grid[cell[0]][cell[1]] is None:
            seen.add(cell)
            target.append(cell)

    for r in range(height):
        analysis = analyze_line(player_grid[r], row_clues[r])
        for c in analysis.forced_filled:
            record((r, c), cells_to_fill, seen_fill)
        for c in analysis.forced_empty:
            record((r, c), cells_to_mark, seen_mark)

    for c in range(width):
        column = [player_grid[r][c] for r in range(height)]
        analysis = analyze_line(column, col_clues[c])
        for r in analysis.forced_filled:
            record((r, c), cells_to_fill, seen_fill)
        for r in analysis.forced_empty:
            record((r, c), cells_to_mark, seen_mark)

    return cells_to_fill, cells_to_mark


def get_logical_hint(
    player_grid: PlayerGrid,
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
) -> Optional[Hint]:
    """First deducible fill, else first deducible mark, else ``None``.

    Fills rank above marks because they tell the player more.
    """

    cells_to_fill, cells_to_mark = find_deducible_cells(player_grid, row_clues, col_clues)
    if cells_to_fill:
        row, col = cells_to_fill[0]
        return Hint(row=row, col=col, value=True, kind=HintKind.FILL)
    if cells_to_mark:
        row, col = cells_to_mark[0]
        return Hint(row=row, col=col, value=False, kind=HintKind.MARK)
    return None


def get_hint(
    player_grid: PlayerGrid,
    puzzle: Puzzle,
    rng: Optional[random.Random] = None,
) -> Optional[Hint]:
    """A logical hint when one exists, otherwise reveal one cell from the solution.

    Revealed cells are drawn from the unknown or wrong cells of the player
    grid. Returns ``None`` when the grid already matches the solution.
    """

    hint = get_logical_hint(player_grid, puzzle.row_clues, puzzle.col_clues)
    if hint is not None:
        return hint

    candidates = [
        (r, c)
        for r in range(puzzle.size)
        for c in range(puzzle.size)
        if player_grid[r][c] is None or player_grid[r][c] != puzzle.solution[r][c]
    ]
    if not candidates:
        return None
    row, col = (rng or random.Random()).choice(candidates)
    LOGGER.debug("No logical hint available; revealing (%d,%d)", row, col)
    return Hint(row=row, col=col, value=puzzle.solution[row][col], kind=HintKind.REVEAL)
