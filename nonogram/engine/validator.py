"""Deterministic rule validation for generated puzzles and player grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.constants import EMPTY_CLUE
from ..core.exceptions import ValidationError
from ..core.models import Puzzle
from ..utils.logger import get_logger
from .clues import compute_clues, count_arrangements

LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Runs the structural acceptance rules over a candidate puzzle.

    ``allow_empty_lines`` and ``allow_free_lines`` relax the two rules the
    generator enforces but hand-made puzzles may legitimately break.
    """

    def __init__(self, allow_empty_lines: bool = False, allow_free_lines: bool = False) -> None:
        self.allow_empty_lines = allow_empty_lines
        self.allow_free_lines = allow_free_lines

    def validate(self, puzzle: Puzzle) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_shape(puzzle)
            self._check_clues_match_solution(puzzle)
            if not self.allow_empty_lines:
                self._check_no_empty_lines(puzzle)
            if not self.allow_free_lines:
                self._check_no_free_lines(puzzle)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.debug("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_shape(self, puzzle: Puzzle) -> None:
        size = puzzle.size
        if len(puzzle.solution) != size or any(len(row) != size for row in puzzle.solution):
            raise ValidationError(f"Solution is not {size}x{size}")
        if len(puzzle.row_clues) != size or len(puzzle.col_clues) != size:
            raise ValidationError(f"Expected {size} row and column clues")

    def _check_clues_match_solution(self, puzzle: Puzzle) -> None:
        for r, row in enumerate(puzzle.solution):
            if compute_clues(row) != tuple(puzzle.row_clues[r]):
                raise ValidationError(f"Row {r} clues {puzzle.row_clues[r]} do not match solution")
        for c in range(puzzle.size):
            column = [row[c] for row in puzzle.solution]
            if compute_clues(column) != tuple(puzzle.col_clues[c]):
                raise ValidationError(f"Column {c} clues {puzzle.col_clues[c]} do not match solution")

    def _check_no_empty_lines(self, puzzle: Puzzle) -> None:
        for label, clue_set in (("Row", puzzle.row_clues), ("Column", puzzle.col_clues)):
            for index, clues in enumerate(clue_set):
                if tuple(clues) == EMPTY_CLUE:
                    raise ValidationError(f"{label} {index} has no filled cells")

    def _check_no_free_lines(self, puzzle: Puzzle) -> None:
        for label, clue_set in (("Row", puzzle.row_clues), ("Column", puzzle.col_clues)):
            for index, clues in enumerate(clue_set):
                if count_arrangements(clues, puzzle.size) == 1:
                    raise ValidationError(
                        f"{label} {index} with clues {tuple(clues)} has a single arrangement"
                    )


def check_completion(player_grid: Sequence[Sequence[Optional[bool]]], puzzle: Puzzle) -> bool:
    """True once every filled cell of the solution is filled in the player grid.

    Unmarked cells that the solution leaves empty do not block completion,
    and neither do wrongly filled ones: a grid with every cell filled
    counts as complete. Use :func:`find_mistakes` to catch extra fills.
    """

    return all(
        player_grid[r][c] is True
        for r in range(puzzle.size)
        for c in range(puzzle.size)
        if puzzle.solution[r][c]
    )


def find_mistakes(
    player_grid: Sequence[Sequence[Optional[bool]]], puzzle: Puzzle
) -> List[Tuple[int, int]]:
    """Known player cells that disagree with the solution, row-major."""

    return [
        (r, c)
        for r in range(puzzle.size)
        for c in range(puzzle.size)
        if player_grid[r][c] is not None and player_grid[r][c] != puzzle.solution[r][c]
    ]
