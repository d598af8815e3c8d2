import io
import unittest

from nonogram.engine.flow import analyze_information_flow
from nonogram.engine.generator import build_puzzle
from nonogram.utils.pretty import (
    cell_symbol,
    format_clues,
    format_grid,
    format_puzzle,
    pretty_print_grid,
    print_puzzle_stats,
)

T, F, U = True, False, None


class FormattingTests(unittest.TestCase):
    def test_cell_symbols(self) -> None:
        self.assertEqual([cell_symbol(v) for v in (T, F, U)], ["#", "x", "."])

    def test_format_clues(self) -> None:
        self.assertEqual(format_clues((2, 1)), "2 1")
        self.assertEqual(format_clues((0,)), "0")

    def test_format_grid_rows(self) -> None:
        lines = format_grid([[T, F, U]]).splitlines()
        self.assertEqual(lines[0], "     0  1  2")
        self.assertEqual(lines[2], " 0 |  #  x  .")

    def test_format_puzzle_sections(self) -> None:
        puzzle = build_puzzle([[T, T, T], [T, F, F], [T, F, F]])
        text = format_puzzle(puzzle)
        self.assertIn("Rows:", text)
        self.assertIn("   0: 3", text)
        self.assertIn("Columns:", text)
        self.assertIn(" 2 |  #  x  x", text)
        self.assertNotIn(" 2 |", format_puzzle(puzzle, show_solution=False))

    def test_pretty_print_grid_label(self) -> None:
        stream = io.StringIO()
        pretty_print_grid([[U, U]], label="Player", stream=stream)
        self.assertTrue(stream.getvalue().startswith("Player\n"))


class PuzzleStatsTests(unittest.TestCase):
    def test_stats_sections(self) -> None:
        puzzle = build_puzzle([[T, T, T], [T, F, F], [T, F, F]], flow_score=0.5)
        analysis = analyze_information_flow(puzzle.row_clues, puzzle.col_clues, puzzle.size)
        stream = io.StringIO()
        print_puzzle_stats(puzzle, analysis, seed=7, stream=stream)
        output = stream.getvalue()
        self.assertIn("--- Grid ---", output)
        self.assertIn("Filled:        5 (56%)", output)
        self.assertIn("--- Clues ---", output)
        self.assertIn("Distribution:  1:4 3:2", output)
        self.assertIn("--- Flow ---", output)
        self.assertIn("Total waves: 2", output)
        self.assertIn("Seed: 7", output)
        self.assertNotIn("--- Diagnostics ---", output)

    def test_stats_without_analysis_show_stored_score(self) -> None:
        puzzle = build_puzzle([[T, F], [F, T]], flow_score=0.25)
        stream = io.StringIO()
        print_puzzle_stats(puzzle, stream=stream)
        self.assertIn("Flow score: 0.25", stream.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
