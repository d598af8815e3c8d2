"""Data models shared by the solvers, analyzers and generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .constants import HintKind, LineType

Clues = Tuple[int, ...]
Arrangement = Tuple[bool, ...]


@dataclass(frozen=True)
class Puzzle:
    """A generated puzzle. Never mutated once built."""

    solution: Tuple[Tuple[bool, ...], ...]
    row_clues: Tuple[Clues, ...]
    col_clues: Tuple[Clues, ...]
    size: int
    flow_score: Optional[float] = None
    diagnostics: Tuple[str, ...] = ()

    @property
    def verified(self) -> bool:
        """True when generation met every acceptance rule."""
        return not self.diagnostics

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "solution": [[1 if cell else 0 for cell in row] for row in self.solution],
            "row_clues": [list(clues) for clues in self.row_clues],
            "col_clues": [list(clues) for clues in self.col_clues],
            "flow_score": self.flow_score,
            "diagnostics": list(self.diagnostics),
        }


@dataclass(frozen=True)
class Deduction:
    """A single forced cell value and the line that forced it."""

    row: int
    col: int
    value: bool
    source: LineType
    source_index: int
    quadrant: int = 0


@dataclass(frozen=True)
class Wave:
    """Deductions discovered together in one full pass over the grid."""

    wave_number: int
    deductions: Tuple[Deduction, ...]

    @property
    def quadrants(self) -> List[int]:
        seen: List[int] = []
        for deduction in self.deductions:
            if deduction.quadrant not in seen:
                seen.append(deduction.quadrant)
        return seen

    @property
    def fills(self) -> int:
        return sum(1 for d in self.deductions if d.value)

    @property
    def marks(self) -> int:
        return sum(1 for d in self.deductions if not d.value)


@dataclass
class LineAnalysis:
    """Result of deducing a single partially-known line."""

    forced_filled: List[int] = field(default_factory=list)
    forced_empty: List[int] = field(default_factory=list)
    completed_clues: List[bool] = field(default_factory=list)
    cells_to_mark: List[int] = field(default_factory=list)
    valid_count: int = 0

    @property
    def contradiction(self) -> bool:
        return self.valid_count == 0


@dataclass(frozen=True)
class Hint:
    """One cell the player can set, and why."""

    row: int
    col: int
    value: bool
    kind: HintKind


@dataclass(frozen=True)
class FlowMetrics:
    entry_points: int = 0
    quadrant_spread: float = 0.0
    quadrant_switches: int = 0
    spatial_variance: float = 0.0
    flow_score: float = 0.0


@dataclass
class FlowAnalysis:
    """Wave-by-wave record of a simulated logical solve."""

    waves: List[Wave]
    total_deductions: int
    solved: bool
    metrics: FlowMetrics

    @property
    def total_waves(self) -> int:
        return len(self.waves)

    @property
    def flow_score(self) -> float:
        return self.metrics.flow_score
