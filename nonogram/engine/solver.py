"""Line-propagation solver with bounded backtracking.

Each pass narrows every row and column to the arrangements still consistent
with the known cells and fixes the positions they all agree on. When a
fixpoint leaves unknown cells, the search branches on the first unknown cell
in row-major order. Branch states live on an explicit stack of grid
snapshots, so search depth is not bounded by the interpreter's recursion
limit.

Memory stays proportional to the per-line arrangement lists, which makes this
the solver of choice for grids too large for the SAT encoding.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from ..core.exceptions import GenerationCancelled
from ..core.models import Arrangement, Clues
from ..utils.logger import get_logger
from .clues import compute_clues, generate_arrangements, matches_line, normalize_clues
from .grid import GridSnapshot, NonogramGrid

LOGGER = get_logger(__name__)

CancelHook = Callable[[], bool]


class ConstraintPropagationSolver:
    """Counts (up to a limit) or extracts solutions for a clue set."""

    def __init__(
        self,
        row_clues: Sequence[Sequence[int]],
        col_clues: Sequence[Sequence[int]],
        size: int,
        should_cancel: Optional[CancelHook] = None,
    ) -> None:
        if len(row_clues) != size or len(col_clues) != size:
            raise ValueError(
                f"Expected {size} row and column clues, got {len(row_clues)} and {len(col_clues)}"
            )
        self.size = size
        self.row_clues: List[Clues] = [normalize_clues(c) for c in row_clues]
        self.col_clues: List[Clues] = [normalize_clues(c) for c in col_clues]
        self.should_cancel = should_cancel
        self.grid = NonogramGrid(size)
        self._row_arrangements = [generate_arrangements(c, size) for c in self.row_clues]
        self._col_arrangements = [generate_arrangements(c, size) for c in self.col_clues]
        self.nodes_explored = 0

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------
    def propagate(self) -> bool:
        """Narrow the grid to a fixpoint. Returns ``False`` on contradiction."""

        grid = self.grid
        changed = True
        while changed:
            changed = False
            for r in range(self.size):
                fixed = self._narrow(grid.row(r), self._row_arrangements[r])
                if fixed is None:
                    return False
                for c, value in fixed:
                    grid.set(r, c, value)
                    changed = True
            for c in range(self.size):
                fixed = self._narrow(grid.column(c), self._col_arrangements[c])
                if fixed is None:
                    return False
                for r, value in fixed:
                    grid.set(r, c, value)
                    changed = True
        return True

    @staticmethod
    def _narrow(
        line: List[Optional[bool]], arrangements: List[Arrangement]
    ) -> Optional[List[Tuple[int, bool]]]:
        valid = [arr for arr in arrangements if matches_line(arr, line)]
        if not valid:
            return None
        fixed: List[Tuple[int, bool]] = []
        for index, cell in enumerate(line):
            if cell is not None:
                continue
            first = valid[0][index]
            if all(arr[index] == first for arr in valid):
                fixed.append((index, first))
        return fixed

    def _matches_targets(self) -> bool:
        grid = self.grid
        for r in range(self.size):
            if compute_clues(grid.row(r)) != self.row_clues[r]:
                return False
        for c in range(self.size):
            if compute_clues(grid.column(c)) != self.col_clues[c]:
                return False
        return True

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _search(self, limit: int) -> Tuple[int, Optional[List[List[bool]]]]:
        self.grid = NonogramGrid(self.size)
        stack: List[GridSnapshot] = [self.grid.snapshot()]
        count = 0
        first_solution: Optional[List[List[bool]]] = None
        self.nodes_explored = 0

        while stack:
            if self.should_cancel is not None and self.should_cancel():
                raise GenerationCancelled("Propagation search cancelled")
            self.grid.restore(stack.pop())
            self.nodes_explored += 1
            if not self.propagate():
                continue

            position = self.grid.first_unknown()
            if position is None:
                if self._matches_targets():
                    count += 1
                    if first_solution is None:
                        first_solution = self.grid.to_solution()
                    if count >= limit:
                        break
                continue

            row, col = position
            branch_point = self.grid.snapshot()
            # LIFO: push the empty branch first so the filled branch runs first.
            self.grid.set(row, col, False)
            stack.append(self.grid.snapshot())
            self.grid.restore(branch_point)
            self.grid.set(row, col, True)
            stack.append(self.grid.snapshot())

        LOGGER.debug(
            "Propagation search: %d solution(s) found after %d node(s)",
            count, self.nodes_explored,
        )
        return min(count, limit), first_solution

    def count_solutions(self, limit: int = 2) -> int:
        """Return 0, 1 or ``limit`` (meaning "``limit`` or more")."""
        count, _ = self._search(limit)
        return count

    def solve(self) -> Optional[List[List[bool]]]:
        _, solution = self._search(1)
        return solution


def count_solutions(
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
    size: int,
    should_cancel: Optional[CancelHook] = None,
) -> int:
    """Count solutions with propagation and backtracking: 0, 1 or 2 (two or more)."""

    return ConstraintPropagationSolver(row_clues, col_clues, size, should_cancel).count_solutions()


def solve_puzzle(
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
    size: int,
) -> Optional[List[List[bool]]]:
    return ConstraintPropagationSolver(row_clues, col_clues, size).solve()
