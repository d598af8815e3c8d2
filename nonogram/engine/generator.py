"""Puzzle generation orchestration.

Each attempt:
  1. Sample a random solution at the difficulty's fill density and repair
     empty rows/columns.
  2. Derive clues and reject structurally weak candidates (empty or free
     lines).
  3. Verify uniqueness with SAT on small grids, propagation on larger ones.
  4. Optionally simulate a logical solve and require a minimum flow score.

Running out of attempts is not an error: the last candidate is returned with
a diagnostic message attached.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..core.constants import (
    DEFAULT_DIFFICULTY_SETTINGS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_SAT_MAX_SIZE,
    DEFAULT_UNIQUENESS_MAX_SIZE,
    Difficulty,
    DifficultySettings,
)
from ..core.exceptions import (CandidateRejected, GenerationCancelled, NonogramError,
                               ValidationError)
from ..core.models import Puzzle
from ..utils.logger import get_logger
from .clues import compute_clues
from .flow import DEFAULT_FLOW_WEIGHTS, FlowWeights, analyze_information_flow
from .sat_solver import SatEncodingOptions, count_solutions_sat
from .solver import ConstraintPropagationSolver
from .validator import PuzzleValidator

LOGGER = get_logger(__name__)

CancelHook = Callable[[], bool]


@dataclass
class GeneratorConfig:
    size: int
    difficulty: Difficulty | str = Difficulty.MEDIUM
    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_repair_passes: int = 3
    sat_max_size: int = DEFAULT_SAT_MAX_SIZE
    uniqueness_max_size: int = DEFAULT_UNIQUENESS_MAX_SIZE
    require_flow: bool = True
    difficulty_settings: Dict[Difficulty, DifficultySettings] = field(
        default_factory=lambda: dict(DEFAULT_DIFFICULTY_SETTINGS)
    )
    sat_options: SatEncodingOptions = field(default_factory=SatEncodingOptions)
    flow_weights: FlowWeights = DEFAULT_FLOW_WEIGHTS

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Puzzle size must be positive, got {self.size}")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.difficulty = Difficulty(str(getattr(self.difficulty, "value", self.difficulty)).lower())
        if self.difficulty not in self.difficulty_settings:
            raise ValueError(f"No settings configured for difficulty '{self.difficulty.value}'")

    @property
    def settings(self) -> DifficultySettings:
        return self.difficulty_settings[self.difficulty]

    @property
    def uses_sat(self) -> bool:
        return self.size <= self.sat_max_size

    @property
    def checks_uniqueness(self) -> bool:
        return self.size <= self.uniqueness_max_size


@dataclass
class Candidate:
    solution: List[List[bool]]
    row_clues: List[Tuple[int, ...]]
    col_clues: List[Tuple[int, ...]]

    @property
    def size(self) -> int:
        return len(self.solution)

    def to_puzzle(
        self, flow_score: Optional[float] = None, diagnostics: Sequence[str] = ()
    ) -> Puzzle:
        return Puzzle(
            solution=tuple(tuple(row) for row in self.solution),
            row_clues=tuple(self.row_clues),
            col_clues=tuple(self.col_clues),
            size=self.size,
            flow_score=flow_score,
            diagnostics=tuple(diagnostics),
        )


def build_puzzle(
    solution: Sequence[Sequence[bool]], flow_score: Optional[float] = None
) -> Puzzle:
    """Wrap a solution grid as a :class:`Puzzle`, deriving its clues."""

    return _candidate_from_solution([list(map(bool, row)) for row in solution]).to_puzzle(flow_score)


def _candidate_from_solution(solution: List[List[bool]]) -> Candidate:
    size = len(solution)
    return Candidate(
        solution=solution,
        row_clues=[compute_clues(row) for row in solution],
        col_clues=[compute_clues([solution[r][c] for r in range(size)]) for c in range(size)],
    )


class PuzzleGenerator:
    """Generate-and-test loop producing uniquely solvable puzzles."""

    def __init__(
        self,
        config: GeneratorConfig,
        rng: Optional[random.Random] = None,
        should_cancel: Optional[CancelHook] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.should_cancel = should_cancel
        self.validator = PuzzleValidator()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def generate(self) -> Puzzle:
        """Return an accepted puzzle, or the last candidate with a diagnostic."""

        min_flow = self.config.settings.min_flow_score if self.config.require_flow else None
        puzzle, last = self._run_attempts(min_flow=min_flow, score_flow=self.config.require_flow)
        if puzzle is not None:
            return puzzle
        if last is None:
            raise NonogramError("Generation made no attempts; nothing to return")

        message = (
            f"No {self.config.size}x{self.config.size} {self.config.difficulty.value} puzzle "
            f"met the acceptance rules after {self.config.max_attempts} attempts; "
            "returning the last candidate unverified"
        )
        LOGGER.warning(message)
        return last.to_puzzle(diagnostics=[message])

    def generate_optimal_flow(self, candidates: int = 5) -> Puzzle:
        """Run several independent searches and keep the best flow score.

        Searches only require validity and uniqueness; the difficulty's flow
        minimum is not applied. Falls back to :meth:`generate` if no search
        produces a valid puzzle.
        """

        best: Optional[Puzzle] = None
        for index in range(1, candidates + 1):
            puzzle, _ = self._run_attempts(min_flow=None, score_flow=True)
            if puzzle is None:
                LOGGER.debug("Flow search %d/%d found no valid candidate", index, candidates)
                continue
            LOGGER.debug("Flow search %d/%d scored %.3f", index, candidates, puzzle.flow_score)
            if best is None or (puzzle.flow_score or 0.0) > (best.flow_score or 0.0):
                best = puzzle

        if best is None:
            LOGGER.warning("No valid candidate across %d flow searches; using plain generation", candidates)
            return self.generate()
        LOGGER.info("Best flow score across %d searches: %.3f", candidates, best.flow_score)
        return best

    # ------------------------------------------------------------------
    # Attempt loop
    # ------------------------------------------------------------------
    def _run_attempts(
        self, min_flow: Optional[float], score_flow: bool
    ) -> Tuple[Optional[Puzzle], Optional[Candidate]]:
        last: Optional[Candidate] = None
        for attempt in range(1, self.config.max_attempts + 1):
            self._check_cancelled()
            candidate = self.sample_candidate()
            last = candidate
            try:
                flow_score = self._evaluate(candidate, min_flow, score_flow)
            except GenerationCancelled:
                raise
            except NonogramError as exc:
                LOGGER.debug("Attempt %s/%s rejected: %s", attempt, self.config.max_attempts, exc)
                continue

            diagnostics: List[str] = []
            if not self.config.checks_uniqueness:
                diagnostics.append(
                    f"Uniqueness not checked for size {self.config.size} "
                    f"(limit {self.config.uniqueness_max_size})"
                )
            LOGGER.info(
                "Accepted %dx%d puzzle on attempt %s/%s (flow score %s)",
                self.config.size, self.config.size, attempt, self.config.max_attempts,
                "n/a" if flow_score is None else f"{flow_score:.3f}",
            )
            return candidate.to_puzzle(flow_score, diagnostics), candidate
        return None, last

    def _evaluate(
        self, candidate: Candidate, min_flow: Optional[float], score_flow: bool
    ) -> Optional[float]:
        validation = self.validator.validate(candidate.to_puzzle())
        if not validation.ok:
            raise ValidationError("; ".join(validation.messages))

        if self.config.checks_uniqueness:
            count = self._count_solutions(candidate)
            if count != 1:
                raise CandidateRejected(
                    "no solution" if count == 0 else "clues admit more than one solution"
                )
        else:
            LOGGER.debug("Skipping uniqueness check for size %d", candidate.size)

        if not score_flow:
            return None
        self._check_cancelled()
        analysis = analyze_information_flow(
            candidate.row_clues, candidate.col_clues, candidate.size, self.config.flow_weights
        )
        if min_flow is not None and analysis.flow_score < min_flow:
            raise CandidateRejected(
                f"flow score {analysis.flow_score:.3f} below minimum {min_flow:.2f}"
            )
        return analysis.flow_score

    def _count_solutions(self, candidate: Candidate) -> int:
        if self.config.uses_sat:
            return count_solutions_sat(
                candidate.row_clues, candidate.col_clues, candidate.size, self.config.sat_options
            )
        solver = ConstraintPropagationSolver(
            candidate.row_clues, candidate.col_clues, candidate.size, self.should_cancel
        )
        return solver.count_solutions()

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    def sample_candidate(self) -> Candidate:
        size = self.config.size
        density = self.config.settings.fill_density
        solution = [[self.rng.random() < density for _ in range(size)] for _ in range(size)]
        self._repair_empty_lines(solution)
        return _candidate_from_solution(solution)

    def _repair_empty_lines(self, solution: List[List[bool]]) -> None:
        """Give every empty row and column one random filled cell.

        Filling a cell never empties another line, so one pass normally
        suffices; the pass count is still bounded.
        """

        size = len(solution)
        for _ in range(self.config.max_repair_passes):
            changed = False
            for row in solution:
                if not any(row):
                    row[self.rng.randrange(size)] = True
                    changed = True
            for c in range(size):
                if not any(solution[r][c] for r in range(size)):
                    solution[self.rng.randrange(size)][c] = True
                    changed = True
            if not changed:
                return

    def _check_cancelled(self) -> None:
        if self.should_cancel is not None and self.should_cancel():
            raise GenerationCancelled("Puzzle generation cancelled")


def generate_puzzle(
    size: int,
    difficulty: Difficulty | str = Difficulty.MEDIUM,
    seed: Optional[int] = None,
    should_cancel: Optional[CancelHook] = None,
    **overrides,
) -> Puzzle:
    config = GeneratorConfig(size=size, difficulty=difficulty, seed=seed, **overrides)
    return PuzzleGenerator(config, should_cancel=should_cancel).generate()


def generate_optimal_flow_puzzle(
    size: int,
    difficulty: Difficulty | str = Difficulty.MEDIUM,
    candidates: int = 5,
    seed: Optional[int] = None,
    should_cancel: Optional[CancelHook] = None,
    **overrides,
) -> Puzzle:
    config = GeneratorConfig(size=size, difficulty=difficulty, seed=seed, **overrides)
    return PuzzleGenerator(config, should_cancel=should_cancel).generate_optimal_flow(candidates)


__all__ = [
    "Candidate",
    "GeneratorConfig",
    "PuzzleGenerator",
    "build_puzzle",
    "generate_optimal_flow_puzzle",
    "generate_puzzle",
]
