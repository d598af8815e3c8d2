"""Per-line logical deduction used by hints and auto-fill."""

from __future__ import annotations

from typing import List, MutableSequence, Optional, Sequence, Set, Tuple

from ..core.constants import EMPTY_CLUE, MarkingPolicy
from ..core.models import Arrangement, LineAnalysis, Puzzle
from ..utils.logger import get_logger
from .clues import consistent_arrangements, normalize_clues

LOGGER = get_logger(__name__)

Span = Tuple[int, int]


def find_filled_runs(line: Sequence[Optional[bool]]) -> List[Span]:
    """Inclusive ``(start, end)`` spans of consecutive ``True`` cells."""

    runs: List[Span] = []
    start = -1
    for index, cell in enumerate(line):
        if cell is True:
            if start == -1:
                start = index
        elif start != -1:
            runs.append((start, index - 1))
            start = -1
    if start != -1:
        runs.append((start, len(line) - 1))
    return runs


def analyze_line(
    line: Sequence[Optional[bool]],
    clues: Sequence[int],
    policy: MarkingPolicy = MarkingPolicy.CONSERVATIVE,
) -> LineAnalysis:
    """Deduce what is forced in ``line`` given its ``clues``.

    A line whose known cells no arrangement can satisfy yields empty
    deductions rather than an error, since player grids may hold mistakes.
    """

    clues = normalize_clues(clues)
    valid = consistent_arrangements(clues, line)
    if not valid:
        return LineAnalysis(completed_clues=[False] * len(clues))

    forced_filled: List[int] = []
    forced_empty: List[int] = []
    for index, cell in enumerate(line):
        if cell is not None:
            continue
        if all(arr[index] for arr in valid):
            forced_filled.append(index)
        elif not any(arr[index] for arr in valid):
            forced_empty.append(index)

    return LineAnalysis(
        forced_filled=forced_filled,
        forced_empty=forced_empty,
        completed_clues=_completed_clues(line, clues, valid),
        cells_to_mark=_cells_to_mark(line, clues, valid, forced_empty, policy),
        valid_count=len(valid),
    )


def _completed_clues(
    line: Sequence[Optional[bool]], clues: Sequence[int], valid: List[Arrangement]
) -> List[bool]:
    completed = [False] * len(clues)
    runs_per_arrangement = [find_filled_runs(arr) for arr in valid]
    reference = runs_per_arrangement[0]

    for clue_index in range(len(clues)):
        if clue_index >= len(reference):
            continue
        span = reference[clue_index]
        if not all(
            clue_index < len(runs) and runs[clue_index] == span
            for runs in runs_per_arrangement
        ):
            continue
        start, end = span
        # Pinned is not enough: the player must have filled and closed the run.
        left_closed = start == 0 or line[start - 1] is False
        right_closed = end == len(line) - 1 or line[end + 1] is False
        all_filled = all(line[i] is True for i in range(start, end + 1))
        completed[clue_index] = left_closed and right_closed and all_filled
    return completed


def _cells_to_mark(
    line: Sequence[Optional[bool]],
    clues: Sequence[int],
    valid: List[Arrangement],
    forced_empty: List[int],
    policy: MarkingPolicy,
) -> List[int]:
    unknown = [index for index, cell in enumerate(line) if cell is None]
    if tuple(clues) == EMPTY_CLUE:
        return unknown

    filled_runs = find_filled_runs(line)
    if policy == MarkingPolicy.PERMISSIVE:
        sizes = [end - start + 1 for start, end in filled_runs]
        return unknown if sizes == list(clues) else []

    pinned: Set[Span] = set(find_filled_runs(valid[0]))
    for arr in valid[1:]:
        pinned &= set(find_filled_runs(arr))

    forced = set(forced_empty)
    marks: Set[int] = set()
    for start, end in filled_runs:
        if (start, end) not in pinned:
            continue
        for step, origin in ((-1, start), (1, end)):
            index = origin + step
            while 0 <= index < len(line):
                cell = line[index]
                if cell is False:
                    index += step
                    continue
                if cell is None and index in forced:
                    marks.add(index)
                    index += step
                    continue
                break
    return sorted(marks)


def is_clue_completed(line: Sequence[Optional[bool]], clue_index: int, clues: Sequence[int]) -> bool:
    return analyze_line(line, clues).completed_clues[clue_index]


def are_all_clues_complete(line: Sequence[Optional[bool]], clues: Sequence[int]) -> bool:
    return all(analyze_line(line, clues).completed_clues)


def auto_fill(
    player_grid: List[MutableSequence[Optional[bool]]],
    puzzle: Puzzle,
    policy: MarkingPolicy = MarkingPolicy.CONSERVATIVE,
) -> List[MutableSequence[Optional[bool]]]:
    """Mark every cell the marking policy proves empty, until nothing changes.

    ``player_grid`` is used as the working copy and is modified in place; the
    same object is returned for convenience.
    """

    size = puzzle.size
    marked = 0
    changed = True
    while changed:
        changed = False
        for r in range(size):
            analysis = analyze_line(player_grid[r], puzzle.row_clues[r], policy)
            for c in analysis.cells_to_mark:
                if player_grid[r][c] is not False:
                    player_grid[r][c] = False
                    marked += 1
                    changed = True
        for c in range(size):
            column = [player_grid[r][c] for r in range(size)]
            analysis = analyze_line(column, puzzle.col_clues[c], policy)
            for r in analysis.cells_to_mark:
                if player_grid[r][c] is not False:
                    player_grid[r][c] = False
                    marked += 1
                    changed = True
    if marked:
        LOGGER.debug("Auto-fill marked %d cell(s) empty", marked)
    return player_grid
