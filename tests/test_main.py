import io
import json
import logging
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from main import build_parser, main


class ParserTests(unittest.TestCase):
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["--size", "5"])
        self.assertEqual(args.size, 5)
        self.assertEqual(args.difficulty, "medium")
        self.assertIsNone(args.optimal_flow)
        self.assertFalse(args.no_flow_filter)
        self.assertFalse(args.report)

    def test_rejects_unknown_difficulty(self) -> None:
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            with patch("sys.stderr", io.StringIO()):
                build_parser().parse_args(["--size", "5", "--difficulty", "extreme"])


class MainTests(unittest.TestCase):
    def tearDown(self) -> None:
        logging.getLogger().setLevel(logging.WARNING)

    def test_writes_json_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            output = Path(tmp) / "puzzle.json"
            main(["--size", "2", "--seed", "1", "--max-attempts", "2",
                  "--output", str(output), "--log-level", "ERROR"])
            payload = json.loads(output.read_text(encoding="utf-8"))
        self.assertEqual(payload["size"], 2)
        self.assertEqual(payload["difficulty"], "medium")
        self.assertEqual(payload["seed"], 1)
        self.assertEqual(len(payload["solution"]), 2)
        self.assertTrue(payload["diagnostics"])

    def test_report_printed_before_json(self) -> None:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            main(["--size", "2", "--seed", "3", "--max-attempts", "1",
                  "--no-flow-filter", "--report", "--log-level", "ERROR"])
        text = stdout.getvalue()
        self.assertIn("--- Grid ---", text)
        self.assertIn("--- Diagnostics ---", text)
        payload = json.loads(text[text.index("{"):])
        self.assertEqual(payload["size"], 2)

    def test_conflicting_flags_rejected(self) -> None:
        with patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit):
            main(["--size", "4", "--optimal-flow", "2", "--no-flow-filter", "--log-level", "ERROR"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
