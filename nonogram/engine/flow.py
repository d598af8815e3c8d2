"""Information-flow analysis: simulate a logical solve and score its shape.

Starting from an empty grid, every deduction available from single-line
reasoning is collected into a *wave*, applied at once, and the process
repeats. A good puzzle opens with a moderate number of entry points and keeps
moving the solver's attention around the grid; the flow score rewards that.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..core.constants import LineType
from ..core.models import Deduction, FlowAnalysis, FlowMetrics, Wave
from ..utils.logger import get_logger
from .clues import consistent_arrangements, normalize_clues
from .grid import NonogramGrid

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class FlowWeights:
    entry_points: float = 0.15
    quadrant_spread: float = 0.25
    quadrant_switches: float = 0.30
    spatial_variance: float = 0.15
    wave_count: float = 0.15


DEFAULT_FLOW_WEIGHTS = FlowWeights()


def get_quadrant(row: int, col: int, size: int) -> int:
    """Quadrant index: 0 top-left, 1 top-right, 2 bottom-left, 3 bottom-right.

    Midlines sit at ``size / 2`` (true division). Cells on or past a midline
    belong to the bottom/right half, so for even sizes the cell
    ``(size // 2, size // 2)`` is in quadrant 3, while for odd sizes the
    middle row and column fall in the top/left halves.
    """

    mid = size / 2
    top = row < mid
    left = col < mid
    if top and left:
        return 0
    if top:
        return 1
    if left:
        return 2
    return 3


def _find_wave(
    grid: NonogramGrid, row_clues: Sequence[Tuple[int, ...]], col_clues: Sequence[Tuple[int, ...]]
) -> List[Deduction]:
    size = grid.size
    deductions: List[Deduction] = []
    seen = set()

    for line_type, clue_set in ((LineType.ROW, row_clues), (LineType.COLUMN, col_clues)):
        for index in range(size):
            line = grid.line(line_type, index)
            valid = consistent_arrangements(clue_set[index], line)
            if not valid:
                continue
            for position, cell in enumerate(line):
                if cell is not None:
                    continue
                first = valid[0][position]
                if any(arr[position] != first for arr in valid):
                    continue
                row, col = (index, position) if line_type == LineType.ROW else (position, index)
                if (row, col) in seen:
                    continue
                seen.add((row, col))
                deductions.append(
                    Deduction(
                        row=row,
                        col=col,
                        value=first,
                        source=line_type,
                        source_index=index,
                        quadrant=get_quadrant(row, col, size),
                    )
                )
    return deductions


def analyze_information_flow(
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
    size: int,
    weights: FlowWeights = DEFAULT_FLOW_WEIGHTS,
) -> FlowAnalysis:
    """Simulate a wave-by-wave logical solve and compute its flow metrics."""

    rows = [normalize_clues(c) for c in row_clues]
    cols = [normalize_clues(c) for c in col_clues]
    grid = NonogramGrid(size)
    waves: List[Wave] = []
    total_deductions = 0

    while len(waves) < size * size:
        deductions = _find_wave(grid, rows, cols)
        if not deductions:
            break
        waves.append(Wave(wave_number=len(waves), deductions=tuple(deductions)))
        for deduction in deductions:
            grid.set(deduction.row, deduction.col, deduction.value)
        total_deductions += len(deductions)

    solved = grid.is_complete()
    metrics = calculate_metrics(waves, size, weights) if solved else FlowMetrics()
    LOGGER.debug(
        "Flow analysis: %d wave(s), %d deduction(s), solved=%s, score=%.3f",
        len(waves), total_deductions, solved, metrics.flow_score,
    )
    return FlowAnalysis(
        waves=waves,
        total_deductions=total_deductions,
        solved=solved,
        metrics=metrics,
    )


def _dominant_quadrant(wave: Wave) -> int:
    counts = [0, 0, 0, 0]
    for deduction in wave.deductions:
        counts[deduction.quadrant] += 1
    # index() returns the lowest quadrant among ties
    return counts.index(max(counts))


def _wave_variance(wave: Wave) -> float:
    count = len(wave.deductions)
    mean_row = sum(d.row for d in wave.deductions) / count
    mean_col = sum(d.col for d in wave.deductions) / count
    return sum(
        (d.row - mean_row) ** 2 + (d.col - mean_col) ** 2 for d in wave.deductions
    ) / count


def calculate_metrics(
    waves: List[Wave], size: int, weights: FlowWeights = DEFAULT_FLOW_WEIGHTS
) -> FlowMetrics:
    if not waves:
        return FlowMetrics()

    total_waves = len(waves)
    entry_points = len(waves[0].deductions)
    quadrant_spread = sum(len(wave.quadrants) for wave in waves) / total_waves

    quadrant_switches = 0
    previous = None
    for wave in waves:
        dominant = _dominant_quadrant(wave)
        if previous is not None and dominant != previous:
            quadrant_switches += 1
        previous = dominant

    # Waves with fewer than two deductions add nothing but still count.
    spatial_variance = sum(
        _wave_variance(wave) for wave in waves if len(wave.deductions) >= 2
    ) / total_waves

    components = _score_components(
        entry_points, quadrant_spread, quadrant_switches, spatial_variance, total_waves, size
    )
    flow_score = (
        weights.entry_points * components["entry_points"]
        + weights.quadrant_spread * components["quadrant_spread"]
        + weights.quadrant_switches * components["quadrant_switches"]
        + weights.spatial_variance * components["spatial_variance"]
        + weights.wave_count * components["wave_count"]
    )
    return FlowMetrics(
        entry_points=entry_points,
        quadrant_spread=quadrant_spread,
        quadrant_switches=quadrant_switches,
        spatial_variance=spatial_variance,
        flow_score=flow_score,
    )


def _score_components(
    entry_points: int,
    quadrant_spread: float,
    quadrant_switches: int,
    spatial_variance: float,
    total_waves: int,
    size: int,
) -> Dict[str, float]:
    """Each component normalized to roughly 0..1."""

    ideal_entry_points = 0.4 * size
    ideal_waves = 0.8 * size
    max_variance = size * size / 2
    return {
        "entry_points": max(0.0, 1 - abs(entry_points - ideal_entry_points) / ideal_entry_points),
        "quadrant_spread": quadrant_spread / 4,
        "quadrant_switches": quadrant_switches / max(total_waves - 1, 1),
        "spatial_variance": min(spatial_variance / max_variance, 1.0),
        "wave_count": min(total_waves / ideal_waves, 1.5) / 1.5,
    }


def get_flow_report(analysis: FlowAnalysis) -> str:
    """Multi-line human-readable summary of a flow analysis."""

    metrics = analysis.metrics
    lines = [
        f"Solved: {analysis.solved}",
        f"Total waves: {analysis.total_waves}",
        f"Total deductions: {analysis.total_deductions}",
        "",
        "Metrics:",
        f"  Entry points (wave 0): {metrics.entry_points}",
        f"  Avg quadrants per wave: {metrics.quadrant_spread:.2f}",
        f"  Quadrant switches: {metrics.quadrant_switches}",
        f"  Spatial variance: {metrics.spatial_variance:.2f}",
        f"  Flow score: {metrics.flow_score:.2f}",
        "",
        "Wave breakdown:",
    ]
    for wave in analysis.waves:
        quadrants = ",".join(str(q) for q in wave.quadrants)
        lines.append(
            f"  Wave {wave.wave_number}: {len(wave.deductions)} deductions "
            f"({wave.fills} fills, {wave.marks} marks) in quadrants [{quadrants}]"
        )
    return "\n".join(lines)
