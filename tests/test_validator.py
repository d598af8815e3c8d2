import unittest

from nonogram.core.models import Puzzle
from nonogram.engine.generator import build_puzzle
from nonogram.engine.validator import PuzzleValidator, check_completion, find_mistakes

T, F, U = True, False, None

GOOD_3 = [
    [T, T, F],
    [F, T, T],
    [F, F, T],
]


class PuzzleValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = PuzzleValidator()

    def test_accepts_well_formed_puzzle(self) -> None:
        result = self.validator.validate(build_puzzle(GOOD_3))
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_rejects_empty_line(self) -> None:
        puzzle = build_puzzle([[T, T, F], [F, F, F], [F, T, T]])
        result = self.validator.validate(puzzle)
        self.assertFalse(result.ok)
        self.assertIn("Row 1 has no filled cells", result.messages[0])

    def test_rejects_free_line(self) -> None:
        puzzle = build_puzzle([[T, T, T], [F, T, F], [T, F, F]])
        result = self.validator.validate(puzzle)
        self.assertFalse(result.ok)
        self.assertIn("single arrangement", result.messages[0])

    def test_relaxed_rules(self) -> None:
        validator = PuzzleValidator(allow_empty_lines=True, allow_free_lines=True)
        puzzle = build_puzzle([[T, T, T], [F, F, F], [F, F, F]])
        self.assertTrue(validator.validate(puzzle).ok)

    def test_rejects_clues_that_do_not_match_solution(self) -> None:
        good = build_puzzle(GOOD_3)
        tampered = Puzzle(
            solution=good.solution,
            row_clues=((1,),) + good.row_clues[1:],
            col_clues=good.col_clues,
            size=3,
        )
        result = self.validator.validate(tampered)
        self.assertFalse(result.ok)
        self.assertIn("do not match", result.messages[0])

    def test_rejects_wrong_shape(self) -> None:
        good = build_puzzle(GOOD_3)
        broken = Puzzle(
            solution=good.solution[:2],
            row_clues=good.row_clues,
            col_clues=good.col_clues,
            size=3,
        )
        result = self.validator.validate(broken)
        self.assertFalse(result.ok)
        self.assertIn("not 3x3", result.messages[0])


class PlayerGridCheckTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = build_puzzle(GOOD_3)

    def test_completion_ignores_unmarked_empty_cells(self) -> None:
        grid = [[T, T, U], [U, T, T], [U, U, T]]
        self.assertTrue(check_completion(grid, self.puzzle))

    def test_missing_fill_is_incomplete(self) -> None:
        grid = [[T, T, F], [F, T, U], [F, F, T]]
        self.assertFalse(check_completion(grid, self.puzzle))

    def test_extra_fills_do_not_block_completion(self) -> None:
        grid = [[T, T, T], [T, T, T], [T, T, T]]
        self.assertTrue(check_completion(grid, self.puzzle))
        self.assertEqual(find_mistakes(grid, self.puzzle), [(0, 2), (1, 0), (2, 0), (2, 1)])

    def test_find_mistakes(self) -> None:
        grid = [[T, F, U], [T, T, T], [U, U, U]]
        self.assertEqual(find_mistakes(grid, self.puzzle), [(0, 1), (1, 0)])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
