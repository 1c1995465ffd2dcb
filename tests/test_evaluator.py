"""
Test suite for the evaluator and the built-in moves.

Tests cover:
- cut and turnover, including their failure modes
- Sequencing, repeat and user-defined calls
- Temporary piles: naming, cleanup and the emptiness check
- Backtraces and internal errors

Author: xwest
"""

import unittest

from helpers import image, parse_ok, pile
from cardmoves.cards.pile import Pile
from cardmoves.config import MovesConfiguration
from cardmoves.evaluator.errors import (
    Bug, Frame, InvokeStep, NoSuchPile, NotEnoughCards, RepeatStep, TemporaryPileNotEmpty
)
from cardmoves.evaluator.evaluator import Evaluator, evaluate
from cardmoves.evaluator.primitives import CUT, TURNOVER, cut, turnover
from cardmoves.parser.ast_nodes import ArgKind, ArgumentRef, Do, Literal, Location, Repeat

FIVE = "AS,2S,3S,4S,5S"


def run(source, start, config=None):
    return evaluate(start, parse_ok(source).moves, config)


class TestPrimitives(unittest.TestCase):
    """Test cases for cut and turnover."""

    def test_cut(self):
        result, problem = cut(image(a=FIVE, b=""), 3, "a", "b")
        self.assertIsNone(problem)
        self.assertEqual(result.get("a"), pile("4S,5S"))
        self.assertEqual(result.get("b"), pile("AS,2S,3S"))

    def test_cut_not_enough_cards_leaves_image(self):
        start = image(a=FIVE, b="")
        result, problem = cut(start, 6, "a", "b")
        self.assertEqual(problem, NotEnoughCards(expected=6, got=5, pile="a"))
        self.assertEqual(result, start)

    def test_cut_creates_target(self):
        result, _ = cut(image(a=FIVE), 2, "a", "table")
        self.assertEqual(result.names(), ["a", "table"])

    def test_cut_can_empty_source(self):
        result, _ = cut(image(a=FIVE, b=""), 5, "a", "b")
        self.assertEqual(result.get("a"), Pile())
        self.assertEqual(result.names(), ["a", "b"])

    def test_cut_missing_source(self):
        start = image(a=FIVE)
        result, problem = cut(start, 1, "zz", "a")
        self.assertEqual(problem, NoSuchPile("zz"))
        self.assertIs(result, start)

    def test_cut_zero_is_a_no_op(self):
        start = image(a=FIVE)
        result, problem = cut(start, 0, "missing", "also-missing")
        self.assertIsNone(problem)
        self.assertIs(result, start)

    def test_cut_onto_same_pile_moves_top_to_bottom(self):
        result, problem = cut(image(a=FIVE, b="KH"), 2, "a", "a")
        self.assertIsNone(problem)
        self.assertEqual(result.get("a"), pile("3S,4S,5S,AS,2S"))
        self.assertEqual(result.names(), ["a", "b"])

    def test_cut_keeps_source_position(self):
        result, _ = cut(image(a=FIVE, b="KH"), 1, "b", "a")
        self.assertEqual(result.names(), ["a", "b"])
        self.assertEqual(result.get("a"), pile("KH," + FIVE))
        self.assertEqual(result.get("b"), Pile())

    def test_turnover(self):
        result, problem = turnover(image(deck="AS,kd"), "deck")
        self.assertIsNone(problem)
        self.assertEqual(result.get("deck"), pile("KD,as"))

    def test_turnover_missing(self):
        _, problem = turnover(image(), "deck")
        self.assertEqual(problem, NoSuchPile("deck"))


class TestEvaluation(unittest.TestCase):
    """Test cases for move sequences."""

    def test_cut_example(self):
        result = run("cut 3 a b\n", image(a=FIVE, b=""))
        self.assertTrue(result.ok)
        self.assertEqual(result.image, image(a="4S,5S", b="AS,2S,3S"))

    def test_cut_example_failure(self):
        start = image(a=FIVE, b="")
        result = run("cut 6 a b\n", start)
        self.assertEqual(result.error.problem, NotEnoughCards(6, 5, "a"))
        self.assertEqual(result.image, start)
        self.assertEqual(result.error.backtrace,
                         (Frame(Location(1, 1), InvokeStep(CUT, (6, "a", "b"))),))

    def test_sequence_stops_at_first_failure(self):
        result = run("turnover a\ncut 9 a b\nturnover a\n", image(a="AS,2S", b=""))
        self.assertIsInstance(result.error.problem, NotEnoughCards)
        self.assertEqual(result.image, image(a="2s,as", b=""))

    def test_repeat(self):
        result = run("repeat 3\n  cut 1 a b\nend\n", image(a=FIVE, b=""))
        self.assertEqual(result.image, image(a="4S,5S", b="3S,2S,AS"))

    def test_cut_onto_same_pile(self):
        result = run("cut 2 a a\n", image(a=FIVE))
        self.assertTrue(result.ok)
        self.assertEqual(result.image, image(a="3S,4S,5S,AS,2S"))

    def test_repeat_zero(self):
        start = image(a=FIVE)
        result = run("repeat 0\n  turnover missing\nend\n", start)
        self.assertTrue(result.ok)
        self.assertEqual(result.image, start)

    def test_repeat_failure_records_iteration(self):
        result = run("repeat 3\n  cut 2 a b\nend\n", image(a=FIVE, b=""))
        self.assertEqual(result.error.problem, NotEnoughCards(2, 1, "a"))
        self.assertEqual(result.error.backtrace, (
            Frame(Location(2, 3), InvokeStep(CUT, (2, "a", "b"))),
            Frame(Location(1, 1), RepeatStep(3, 3)),
        ))
        self.assertEqual(result.image, image(a="5S", b="3S,4S,AS,2S"))

    def test_user_definition_with_temporary(self):
        source = (
            "def bottom #n p\n"
            "  temp hold\n"
            "  cut n p hold\n"
            "  turnover p\n"
            "  turnover hold\n"
            "  cut n hold p\n"
            "  turnover p\n"
            "end\n"
            "bottom 1 deck\n"
        )
        result = run(source, image(deck="AS,2S,3S,4S"))
        self.assertTrue(result.ok, str(result.error))
        self.assertEqual(result.image, image(deck="2S,3S,4S,AS"))

    def test_int_argument_drives_repeat(self):
        source = "def deal #n from to\n  repeat n\n    cut 1 from to\n  end\nend\ndeal 2 a b\n"
        result = run(source, image(a=FIVE, b=""))
        self.assertEqual(result.image, image(a="3S,4S,5S", b="2S,AS"))

    def test_nested_definitions_see_enclosing_frames(self):
        source = (
            "def outer #n a\n"
            "  temp t\n"
            "  def inner b\n"
            "    cut n b t\n"
            "  end\n"
            "  inner a\n"
            "  turnover t\n"
            "  cut n t a\n"
            "end\n"
            "outer 2 deck\n"
        )
        result = run(source, image(deck="AS,2S,3S"))
        self.assertTrue(result.ok, str(result.error))
        self.assertEqual(result.image, image(deck="2s,as,3S"))

    def test_backtrace_through_definition(self):
        result = run("def f p\n  cut 9 p p\nend\nf a\n", image(a="AS"))
        error = result.error
        self.assertEqual(error.problem, NotEnoughCards(9, 1, "a"))
        self.assertEqual([str(frame.location) for frame in error.backtrace], ["2:3", "4:1"])
        self.assertEqual(error.backtrace[1].step.definition.name, "f")
        self.assertEqual(error.backtrace[1].step.actual_values, ("a",))
        self.assertEqual(
            str(error),
            "ERROR[E001]: Pile 'a' has 1 card(s), 9 needed\n"
            "  at 2:3: in cut 9 a a\n"
            "  at 4:1: in f a"
        )


class TestTemporaryPiles(unittest.TestCase):
    """Test cases for temporary pile handling."""

    STASH = "def stash p\n  temp t\n  cut 1 p t\nend\n"

    def test_leftover_cards_are_reported(self):
        result = run(self.STASH + "stash a\n", image(a="AS,2S"))
        problem = result.error.problem
        self.assertIsInstance(problem, TemporaryPileNotEmpty)
        self.assertEqual(problem.definition.name, "stash")
        self.assertEqual(problem.pile_names, ("t",))
        self.assertEqual(result.image.get("temp t 0"), pile("AS"))
        self.assertEqual(result.error.backtrace[0].step.actual_values, ("a",))

    def test_check_fires_inside_repeat(self):
        result = run(self.STASH + "repeat 2\n  stash a\nend\n", image(a="AS,2S"))
        self.assertIsInstance(result.error.problem, TemporaryPileNotEmpty)
        self.assertEqual(result.error.backtrace[-1].step, RepeatStep(1, 2))

    def test_repeated_calls_use_fresh_piles(self):
        source = (
            "def cycle p\n"
            "  temp t\n"
            "  cut 1 p t\n"
            "  turnover t\n"
            "  turnover t\n"
            "  cut 1 t p\n"
            "end\n"
            "repeat 2\n"
            "  cycle a\n"
            "end\n"
        )
        result = run(source, image(a="AS,2S"))
        self.assertTrue(result.ok, str(result.error))
        self.assertEqual(result.image, image(a="AS,2S"))

    def test_names_unique_across_nested_calls(self):
        source = self.STASH + (
            "def two p\n"
            "  temp t\n"
            "  cut 1 p t\n"
            "  stash p\n"
            "  cut 1 t p\n"
            "end\n"
            "two a\n"
        )
        result = run(source, image(a="AS,2S,3S"))
        self.assertEqual(result.image.names(), ["a", "temp t 0", "temp t 1"])
        self.assertEqual(result.image.get("temp t 0"), pile("AS"))
        self.assertEqual(result.image.get("temp t 1"), pile("2S"))
        self.assertEqual([frame.step.definition.name for frame in result.error.backtrace],
                         ["stash", "two"])

    def test_prefix_is_configurable(self):
        config = MovesConfiguration(temporary_pile_prefix="scratch")
        result = run(self.STASH + "stash a\n", image(a="AS"), config)
        self.assertIn("scratch t 0", result.image)

    def test_counter_belongs_to_evaluator(self):
        moves = parse_ok(self.STASH + "stash a\n").moves
        evaluator = Evaluator()
        evaluator.run(image(a="AS"), moves)
        second = evaluator.run(image(a="AS"), moves)
        self.assertIn("temp t 1", second.image)

    def test_evaluate_is_deterministic(self):
        moves = parse_ok(self.STASH + "turnover a\nstash a\n").moves
        start = image(a="AS,2S")
        self.assertEqual(evaluate(start, moves), evaluate(start, moves))


class TestInternalErrors(unittest.TestCase):
    """Test cases for states the parser normally rules out."""

    def test_wrong_argument_kinds(self):
        move = Do(Location(1, 1), CUT, (Literal("a"),))
        with self.assertLogs("cardmoves.evaluator.evaluator", level="ERROR"):
            result = evaluate(image(a="AS"), [move])
        self.assertIsInstance(result.error.problem, Bug)
        self.assertEqual(result.error.code, "E004")

    def test_reference_outside_any_call(self):
        move = Do(Location(1, 1), TURNOVER, (ArgumentRef("p", ArgKind.PILE, 0, 0),))
        with self.assertLogs("cardmoves.evaluator.evaluator", level="ERROR"):
            result = evaluate(image(a="AS"), [move])
        self.assertIsInstance(result.error.problem, Bug)

    def test_non_integer_repeat_count(self):
        move = Repeat(Location(1, 1), Literal("deck"), ())
        with self.assertLogs("cardmoves.evaluator.evaluator", level="ERROR"):
            result = evaluate(image(), [move])
        self.assertIsInstance(result.error.problem, Bug)

    def test_debug_mode_logs_moves(self):
        config = MovesConfiguration(debug_mode=True)
        with self.assertLogs("cardmoves.evaluator.evaluator", level="DEBUG") as logs:
            run("turnover a\n", image(a="AS"), config)
        self.assertIn("turnover a", logs.output[0])


if __name__ == "__main__":
    unittest.main()
