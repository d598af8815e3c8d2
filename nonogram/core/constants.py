"""Shared constants and enumerations for the nonogram engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

# Cell states. Player and working grids hold ``None`` for cells that are not
# yet known.
UNKNOWN: Optional[bool] = None
FILLED = True
EMPTY = False

EMPTY_CLUE = (0,)


class Difficulty(str, Enum):
    """Puzzle difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class LineType(str, Enum):
    """Orientation of a grid line."""

    ROW = "row"
    COLUMN = "col"


class HintKind(str, Enum):
    """What a hint asks the player to do."""

    FILL = "fill"
    MARK = "mark"
    REVEAL = "reveal"


class MarkingPolicy(str, Enum):
    """How auto-fill decides which cells to mark empty.

    ``CONSERVATIVE`` only marks outward from runs that are pinned in every
    consistent arrangement, stopping at the first cell that is not forced
    empty. ``PERMISSIVE`` marks every unknown cell once the filled runs
    already match the clue sequence.
    """

    CONSERVATIVE = "conservative"
    PERMISSIVE = "permissive"


@dataclass(frozen=True)
class DifficultySettings:
    """Sampling density and minimum flow score for one difficulty."""

    fill_density: float
    min_flow_score: float


DEFAULT_DIFFICULTY_SETTINGS: Dict[Difficulty, DifficultySettings] = {
    Difficulty.EASY: DifficultySettings(fill_density=0.65, min_flow_score=0.10),
    Difficulty.MEDIUM: DifficultySettings(fill_density=0.50, min_flow_score=0.25),
    Difficulty.HARD: DifficultySettings(fill_density=0.35, min_flow_score=0.35),
}

# Grids at or below this size are checked for uniqueness with SAT.
DEFAULT_SAT_MAX_SIZE = 15
# Above this size the uniqueness check is skipped entirely.
DEFAULT_UNIQUENESS_MAX_SIZE = 25
DEFAULT_MAX_ATTEMPTS = 100
