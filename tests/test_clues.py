import unittest

from nonogram.core.constants import EMPTY_CLUE
from nonogram.core.exceptions import IncompleteLineError, InvalidClueError
from nonogram.engine.clues import (
    compute_clues,
    consistent_arrangements,
    count_arrangements,
    generate_arrangements,
    matches_line,
    min_space,
    normalize_clues,
)


class NormalizeCluesTests(unittest.TestCase):
    def test_empty_sequence_becomes_zero_clue(self) -> None:
        self.assertEqual(normalize_clues([]), EMPTY_CLUE)
        self.assertEqual(normalize_clues([0]), EMPTY_CLUE)

    def test_returns_tuple(self) -> None:
        self.assertEqual(normalize_clues([2, 1]), (2, 1))

    def test_rejects_negative_runs(self) -> None:
        with self.assertRaises(InvalidClueError):
            normalize_clues([1, -2])

    def test_rejects_zero_inside_clues(self) -> None:
        with self.assertRaises(InvalidClueError):
            normalize_clues([1, 0, 2])


class ComputeCluesTests(unittest.TestCase):
    def test_runs_are_counted_in_order(self) -> None:
        self.assertEqual(compute_clues([True, True, False, True]), (2, 1))
        self.assertEqual(compute_clues([False, True, True, True, False]), (3,))

    def test_all_empty_line_gives_zero_clue(self) -> None:
        self.assertEqual(compute_clues([False, False, False]), (0,))

    def test_unknown_cell_raises(self) -> None:
        with self.assertRaises(IncompleteLineError):
            compute_clues([True, None, False])


class ArrangementTests(unittest.TestCase):
    def test_min_space(self) -> None:
        self.assertEqual(min_space((3, 1)), 5)
        self.assertEqual(min_space((4,)), 4)
        self.assertEqual(min_space((0,)), 0)

    def test_leftmost_first_order(self) -> None:
        arrangements = generate_arrangements([1, 1], 4)
        self.assertEqual(
            arrangements,
            [
                (True, False, True, False),
                (True, False, False, True),
                (False, True, False, True),
            ],
        )

    def test_zero_clue_has_single_empty_arrangement(self) -> None:
        self.assertEqual(generate_arrangements([0], 3), [(False, False, False)])

    def test_clues_longer_than_line_have_no_arrangement(self) -> None:
        self.assertEqual(generate_arrangements([3], 2), [])
        self.assertEqual(count_arrangements([2, 2], 4), 0)

    def test_arrangements_reproduce_their_clues(self) -> None:
        for clues, length in (((1,), 5), ((2, 1), 6), ((1, 1, 1), 7), ((3, 2), 8)):
            arrangements = generate_arrangements(clues, length)
            self.assertEqual(len(arrangements), len(set(arrangements)))
            for arrangement in arrangements:
                self.assertEqual(len(arrangement), length)
                self.assertEqual(compute_clues(arrangement), clues)

    def test_count_matches_generation(self) -> None:
        self.assertEqual(count_arrangements([1], 5), 5)
        self.assertEqual(count_arrangements([2, 1], 5), 3)
        self.assertEqual(count_arrangements([5], 5), 1)


class LineMatchingTests(unittest.TestCase):
    def test_matches_line_ignores_unknown_cells(self) -> None:
        self.assertTrue(matches_line((True, False, True), [None, False, None]))
        self.assertFalse(matches_line((True, False, True), [None, True, None]))

    def test_consistent_arrangements_filters_by_known_cells(self) -> None:
        self.assertEqual(
            consistent_arrangements((1,), [True, None, None]),
            [(True, False, False)],
        )
        self.assertEqual(consistent_arrangements((2,), [None, False, None]), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
