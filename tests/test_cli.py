"""
End-to-end tests: the run_source pipeline and the command line.

Author: xwest
"""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from helpers import image, primitives
from cardmoves import run_source
from cardmoves.cards.pile import Pile
from cardmoves.cli import EXIT_OK, EXIT_USAGE, EXIT_USER_ERROR, main
from cardmoves.parser.errors import UnknownMove

FLIP = "def flip p\n  doc Turn the pile over.\n  turnover p\nend\n"


class TestRunSource(unittest.TestCase):

    def test_success(self):
        library = primitives()
        result = run_source(library, image(deck="AS,2S"), FLIP + "flip deck\n")
        self.assertTrue(result.ok)
        self.assertEqual(result.evaluation.image, image(deck="2s,as"))
        self.assertEqual([d.name for d in result.definitions], ["flip"])
        self.assertEqual(len(result.library), 3)
        self.assertEqual(len(library), 2)

    def test_parse_problems(self):
        library = primitives()
        result = run_source(library, image(), "shuffle deck\n")
        self.assertFalse(result.ok)
        self.assertIsNone(result.evaluation)
        self.assertEqual(result.problems[0].problem, UnknownMove("shuffle"))
        self.assertIs(result.library, library)

    def test_evaluation_error(self):
        result = run_source(primitives(), image(), "turnover deck\n")
        self.assertFalse(result.ok)
        self.assertEqual(result.evaluation.error.code, "E002")


class TestCommandLine(unittest.TestCase):
    """Test cases for the cardmoves command."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def invoke(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_run_with_default_deck(self):
        moves = self.write("flip.moves", FLIP + "flip deck\n")
        code, out, _ = self.invoke("run", moves)
        self.assertEqual(code, EXIT_OK)
        deck = Pile.from_string(json.loads(out)["deck"])
        self.assertEqual(deck, Pile.full_deck().turnover())

    def test_run_with_image_and_output(self):
        moves = self.write("cut.moves", "cut 1 a b\n")
        start = self.write("start.json", json.dumps({"a": "AS,2S", "b": ""}))
        target = os.path.join(self.tmp.name, "end.json")
        code, out, _ = self.invoke("run", moves, "--image", start, "--output", target)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, "")
        with open(target, encoding="utf-8") as f:
            self.assertEqual(json.load(f), {"a": "2S", "b": "AS"})

    def test_run_reports_parse_problems(self):
        moves = self.write("bad.moves", "shuffle deck\n")
        code, _, err = self.invoke("run", moves)
        self.assertEqual(code, EXIT_USER_ERROR)
        self.assertIn("1:1: Unknown move 'shuffle'", err)

    def test_run_reports_backtrace(self):
        moves = self.write("short.moves", "def f p\n  cut 60 p p\nend\nf deck\n")
        code, out, err = self.invoke("run", moves)
        self.assertEqual(code, EXIT_USER_ERROR)
        self.assertEqual(out, "")
        self.assertIn("ERROR[E001]", err)
        self.assertIn("at 4:1: in f deck", err)

    def test_run_bad_image(self):
        moves = self.write("flip.moves", "turnover a\n")
        start = self.write("start.json", json.dumps({"a": "AS,ZZ"}))
        code, _, err = self.invoke("run", moves, "--image", start)
        self.assertEqual(code, EXIT_USER_ERROR)
        self.assertIn("ZZ", err)

    def test_run_missing_file(self):
        code, _, err = self.invoke("run", os.path.join(self.tmp.name, "nope.moves"))
        self.assertEqual(code, EXIT_USER_ERROR)
        self.assertIn("error:", err)

    def test_library_listing(self):
        moves = self.write("lib.moves", FLIP + "def flip2 p\n  flip p\n  flip p\nend\n")
        code, out, _ = self.invoke("library", moves)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.splitlines(), ["flip2 p", "flip p", "    Turn the pile over."])

    def test_usage_error(self):
        with self.assertRaises(SystemExit) as ctx:
            self.invoke("frobnicate")
        self.assertEqual(ctx.exception.code, EXIT_USAGE)


if __name__ == "__main__":
    unittest.main()
