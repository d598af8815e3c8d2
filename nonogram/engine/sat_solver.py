"""Boolean satisfiability encoding of a nonogram, solved with OR-Tools CP-SAT.

Only boolean variables and clause-level constraints are used:

* one variable per cell;
* per line, one selector per arrangement with exactly one selector true;
* per position, ``cell <=> OR(selectors that fill it)`` as implications,
  or a unit clause when every arrangement agrees.

Uniqueness is checked by solving, forbidding the found cell assignment and
solving again. Memory grows with the total arrangement count across lines,
so sparse clues on large grids are better left to the propagation solver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ortools.sat.python import cp_model

from ..core.exceptions import NonogramError
from ..core.models import Arrangement
from ..utils.logger import get_logger
from .clues import generate_arrangements, normalize_clues

LOGGER = get_logger(__name__)

EXACTLY_ONE_NATIVE = "native"
EXACTLY_ONE_PAIRWISE = "pairwise"


@dataclass
class SatEncodingOptions:
    """Tunable knobs for the encoding and the CP-SAT search."""

    exactly_one: str = EXACTLY_ONE_NATIVE
    time_limit: Optional[float] = None
    num_workers: int = 1

    def __post_init__(self) -> None:
        if self.exactly_one not in (EXACTLY_ONE_NATIVE, EXACTLY_ONE_PAIRWISE):
            raise ValueError(f"Unknown exactly-one encoding '{self.exactly_one}'")


class NonogramSatModel:
    """Holds the CP-SAT model for one clue set and exposes clause-level operations."""

    def __init__(
        self,
        row_clues: Sequence[Sequence[int]],
        col_clues: Sequence[Sequence[int]],
        size: int,
        options: Optional[SatEncodingOptions] = None,
    ) -> None:
        if len(row_clues) != size or len(col_clues) != size:
            raise ValueError(
                f"Expected {size} row and column clues, got {len(row_clues)} and {len(col_clues)}"
            )
        self.size = size
        self.options = options or SatEncodingOptions()
        self.model = cp_model.CpModel()
        self.cells = [
            [self.model.new_bool_var(f"cell_{r}_{c}") for c in range(size)]
            for r in range(size)
        ]
        self.selector_count = 0
        self.last_status: Optional[int] = None

        for r, clues in enumerate(row_clues):
            self._encode_line(normalize_clues(clues), self.cells[r], f"row_{r}")
        for c, clues in enumerate(col_clues):
            column = [self.cells[r][c] for r in range(size)]
            self._encode_line(normalize_clues(clues), column, f"col_{c}")

    # ------------------------------------------------------------------
    # Clause combinators
    # ------------------------------------------------------------------
    def add_clause(self, literals: Sequence) -> None:
        self.model.add_bool_or(list(literals))

    def _require(self, literal) -> None:
        self.model.add_bool_or([literal])

    def _require_false(self, line_id: str) -> None:
        contradiction = self.model.new_bool_var(f"{line_id}_unsat")
        self.model.add_bool_or([contradiction])
        self.model.add_bool_or([~contradiction])

    def _exactly_one(self, literals: List) -> None:
        if not literals:
            self._require_false("exactly_one_empty")
            return
        if self.options.exactly_one == EXACTLY_ONE_NATIVE:
            self.model.add_exactly_one(literals)
            return
        self.add_clause(literals)
        for i in range(len(literals)):
            for j in range(i + 1, len(literals)):
                self.add_clause([~literals[i], ~literals[j]])

    def _equivalent_to_any(self, cell, selectors: List) -> None:
        """``cell <=> OR(selectors)`` as clauses."""
        for selector in selectors:
            self.model.add_implication(selector, cell)
        self.add_clause([~cell] + selectors)

    def _encode_line(self, clues, line_vars: List, line_id: str) -> None:
        arrangements: List[Arrangement] = generate_arrangements(clues, self.size)
        if not arrangements:
            self._require_false(line_id)
            return
        if len(arrangements) == 1:
            for var, value in zip(line_vars, arrangements[0]):
                self._require(var if value else ~var)
            return

        selectors = [
            self.model.new_bool_var(f"{line_id}_arr_{k}") for k in range(len(arrangements))
        ]
        self.selector_count += len(selectors)
        self._exactly_one(selectors)

        for position, var in enumerate(line_vars):
            filling = [selectors[k] for k, arr in enumerate(arrangements) if arr[position]]
            if not filling:
                self._require(~var)
            elif len(filling) == len(arrangements):
                self._require(var)
            else:
                self._equivalent_to_any(var, filling)

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    def solve(self) -> Optional[List[List[bool]]]:
        """Return a satisfying cell assignment, or ``None`` if none was found."""

        solver = cp_model.CpSolver()
        solver.parameters.num_workers = self.options.num_workers
        if self.options.time_limit is not None:
            solver.parameters.max_time_in_seconds = self.options.time_limit

        status = solver.solve(self.model)
        self.last_status = status
        if status == cp_model.MODEL_INVALID:
            raise NonogramError("CP-SAT rejected the nonogram model as invalid")
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            LOGGER.debug("SAT: no assignment (status=%s)", solver.status_name(status))
            return None

        LOGGER.debug("SAT: assignment found in %.3fs", solver.wall_time)
        return [
            [bool(solver.value(var)) for var in row]
            for row in self.cells
        ]

    @property
    def timed_out(self) -> bool:
        return self.last_status == cp_model.UNKNOWN

    def block_solution(self, solution: Sequence[Sequence[bool]]) -> None:
        """Forbid exactly this cell assignment."""

        self.add_clause(
            [
                ~var if value else var
                for row_vars, row_values in zip(self.cells, solution)
                for var, value in zip(row_vars, row_values)
            ]
        )


def count_solutions_sat(
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
    size: int,
    options: Optional[SatEncodingOptions] = None,
) -> int:
    """Return 0 (no solution), 1 (unique) or 2 (two or more)."""

    sat = NonogramSatModel(row_clues, col_clues, size, options)
    LOGGER.debug("SAT: %dx%d grid encoded with %d selectors", size, size, sat.selector_count)

    first = sat.solve()
    if first is None:
        if sat.timed_out:
            LOGGER.warning("SAT: time limit hit before a first solution; uniqueness not established")
            return 2
        return 0

    sat.block_solution(first)
    second = sat.solve()
    if second is None:
        if sat.timed_out:
            LOGGER.warning("SAT: time limit hit on the blocked model; uniqueness not established")
            return 2
        return 1
    return 2


def solve_puzzle_sat(
    row_clues: Sequence[Sequence[int]],
    col_clues: Sequence[Sequence[int]],
    size: int,
    options: Optional[SatEncodingOptions] = None,
) -> Optional[List[List[bool]]]:
    """Solve once; ``None`` if the clues admit no solution."""

    sat = NonogramSatModel(row_clues, col_clues, size, options)
    solution = sat.solve()
    if solution is None and sat.timed_out:
        LOGGER.warning("SAT: time limit hit before a solution was found")
    return solution
