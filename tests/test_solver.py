import random
import unittest

from nonogram.core.exceptions import GenerationCancelled
from nonogram.engine.clues import compute_clues
from nonogram.engine.sat_solver import (
    EXACTLY_ONE_PAIRWISE,
    NonogramSatModel,
    SatEncodingOptions,
    count_solutions_sat,
    solve_puzzle_sat,
)
from nonogram.engine.solver import ConstraintPropagationSolver, count_solutions, solve_puzzle

UNIQUE_3 = ([[3], [1], [1]], [[3], [1], [1]])
# Staircase with a [1, 1] bottom row: unique, and every line has several arrangements.
UNIQUE_4_SOLUTION = [
    [True, True, False, False],
    [False, True, True, False],
    [False, False, True, True],
    [True, False, False, True],
]
UNIQUE_4 = ([[2], [2], [2], [1, 1]], [[1, 1], [2], [2], [2]])
IMPOSSIBLE_2 = ([[2], [0]], [[0], [0]])


def clues_of(solution):
    size = len(solution)
    rows = [compute_clues(row) for row in solution]
    cols = [compute_clues([solution[r][c] for r in range(size)]) for c in range(size)]
    return rows, cols


class PropagationSolverTests(unittest.TestCase):
    def test_unique_puzzles_count_one(self) -> None:
        self.assertEqual(count_solutions(*UNIQUE_3, 3), 1)
        self.assertEqual(count_solutions(*UNIQUE_4, 4), 1)
        self.assertEqual(count_solutions([[2], [2]], [[2], [2]], 2), 1)
        self.assertEqual(count_solutions([[0], [0]], [[0], [0]], 2), 1)

    def test_ambiguous_puzzles_count_two(self) -> None:
        self.assertEqual(count_solutions([[1], [1]], [[1], [1]], 2), 2)
        self.assertEqual(count_solutions([[1]] * 5, [[1]] * 5, 5), 2)

    def test_impossible_puzzle(self) -> None:
        self.assertEqual(count_solutions(*IMPOSSIBLE_2, 2), 0)
        self.assertIsNone(solve_puzzle(*IMPOSSIBLE_2, 2))

    def test_solve_returns_grid_matching_clues(self) -> None:
        row_clues, col_clues = [[2], [1], [2]], [[1], [3], [1]]
        solution = solve_puzzle(row_clues, col_clues, 3)
        assert solution is not None
        rows, cols = clues_of(solution)
        self.assertEqual(rows, [tuple(c) for c in row_clues])
        self.assertEqual(cols, [tuple(c) for c in col_clues])

    def test_solve_unique_puzzle(self) -> None:
        self.assertEqual(solve_puzzle(*UNIQUE_4, 4), UNIQUE_4_SOLUTION)

    def test_propagation_alone_solves_simple_puzzle(self) -> None:
        solver = ConstraintPropagationSolver(*UNIQUE_3, 3)
        self.assertTrue(solver.propagate())
        self.assertTrue(solver.grid.is_complete())

    def test_mismatched_clue_lists_raise(self) -> None:
        with self.assertRaises(ValueError):
            ConstraintPropagationSolver([[1]], [[1], [1]], 2)

    def test_cancellation_hook_stops_search(self) -> None:
        with self.assertRaises(GenerationCancelled):
            count_solutions([[1]] * 4, [[1]] * 4, 4, should_cancel=lambda: True)


class SatSolverTests(unittest.TestCase):
    def test_unique_puzzles_count_one(self) -> None:
        self.assertEqual(count_solutions_sat(*UNIQUE_3, 3), 1)
        self.assertEqual(count_solutions_sat(*UNIQUE_4, 4), 1)
        self.assertEqual(count_solutions_sat([[0], [0]], [[0], [0]], 2), 1)

    def test_ambiguous_puzzles_count_two(self) -> None:
        self.assertEqual(count_solutions_sat([[1], [1]], [[1], [1]], 2), 2)
        self.assertEqual(count_solutions_sat([[1]] * 5, [[1]] * 5, 5), 2)

    def test_impossible_puzzle(self) -> None:
        self.assertEqual(count_solutions_sat(*IMPOSSIBLE_2, 2), 0)
        self.assertIsNone(solve_puzzle_sat(*IMPOSSIBLE_2, 2))

    def test_clues_too_long_for_line_are_unsatisfiable(self) -> None:
        self.assertEqual(count_solutions_sat([[3], [1]], [[1], [1]], 2), 0)

    def test_pairwise_encoding_agrees(self) -> None:
        options = SatEncodingOptions(exactly_one=EXACTLY_ONE_PAIRWISE)
        self.assertEqual(count_solutions_sat(*UNIQUE_4, 4, options), 1)
        self.assertEqual(count_solutions_sat([[1]] * 4, [[1]] * 4, 4, options), 2)
        self.assertEqual(solve_puzzle_sat(*UNIQUE_4, 4, options), UNIQUE_4_SOLUTION)

    def test_unknown_encoding_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SatEncodingOptions(exactly_one="ladder")

    def test_blocking_the_only_solution_makes_model_unsat(self) -> None:
        model = NonogramSatModel(*UNIQUE_4, 4)
        first = model.solve()
        self.assertEqual(first, UNIQUE_4_SOLUTION)
        model.block_solution(first)
        self.assertIsNone(model.solve())
        self.assertFalse(model.timed_out)

    def test_free_lines_need_no_selectors(self) -> None:
        model = NonogramSatModel([[2], [2]], [[2], [2]], 2)
        self.assertEqual(model.selector_count, 0)


class SolverAgreementTests(unittest.TestCase):
    def test_counts_agree_on_random_grids(self) -> None:
        rng = random.Random(7)
        for _ in range(12):
            size = rng.choice([3, 4, 5])
            solution = [[rng.random() < 0.5 for _ in range(size)] for _ in range(size)]
            rows, cols = clues_of(solution)
            self.assertEqual(
                count_solutions(rows, cols, size),
                count_solutions_sat(rows, cols, size),
                msg=f"disagreement on {solution}",
            )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
