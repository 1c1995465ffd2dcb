"""
Test suite for images: named, ordered collections of piles.

Author: xwest
"""

import json
import unittest

from helpers import image, pile
from cardmoves.cards.errors import PileFormatError
from cardmoves.cards.image import Image
from cardmoves.cards.pile import Pile


class TestImage(unittest.TestCase):
    """Test cases for image queries and updates."""

    def test_duplicate_names_rejected(self):
        with self.assertRaises(ValueError):
            Image([("a", Pile()), ("a", Pile())])

    def test_put_prepends(self):
        result = image(a="2S,3S").put("a", pile("AS"))
        self.assertEqual(result.get("a"), pile("AS,2S,3S"))

    def test_put_creates_missing_pile_even_when_empty(self):
        result = image(a="AS").put("b", Pile())
        self.assertEqual(result.names(), ["a", "b"])
        self.assertEqual(result.get("b"), Pile())

    def test_set_keeps_position(self):
        result = image(a="AS", b="2S", c="3S").set("b", Pile())
        self.assertEqual(result.names(), ["a", "b", "c"])
        self.assertEqual(len(result.get("b")), 0)

    def test_take_removes_entry(self):
        original = image(a="AS", b="2S")
        taken, rest = original.take("a")
        self.assertEqual(taken, pile("AS"))
        self.assertEqual(rest.names(), ["b"])
        self.assertEqual(original.names(), ["a", "b"])

    def test_take_missing_returns_same_image(self):
        original = image(a="AS")
        taken, rest = original.take("zz")
        self.assertIsNone(taken)
        self.assertIs(rest, original)

    def test_update_with_empty_result_deletes(self):
        result = image(a="AS", b="2S").update("a", lambda p: Pile())
        self.assertNotIn("a", result)

    def test_update_missing_pile_receives_none(self):
        seen = []

        def f(current):
            seen.append(current)
            return pile("KH")

        result = image(a="AS").update("b", f)
        self.assertEqual(seen, [None])
        self.assertEqual(result.get("b"), pile("KH"))

    def test_equality_includes_order(self):
        self.assertEqual(image(a="AS", b="2S"), image(a="AS", b="2S"))
        self.assertNotEqual(image(a="AS", b="2S"), image(b="2S", a="AS"))


class TestImageSerialization(unittest.TestCase):
    """Test cases for the JSON form of images."""

    def test_json_round_trip_keeps_order(self):
        original = image(deck="as,2s,3s", table="KH", hand="")
        text = original.to_json()
        self.assertEqual(list(json.loads(text)), ["deck", "table", "hand"])
        self.assertEqual(Image.from_json(text), original)

    def test_bad_pile_names_the_pile(self):
        with self.assertRaises(PileFormatError) as ctx:
            Image.from_dict({"good": "AS", "bad": "AS,QQ"})
        self.assertEqual(ctx.exception.pile_name, "bad")
        self.assertEqual(ctx.exception.position, 1)

    def test_non_object_json_rejected(self):
        with self.assertRaises(PileFormatError):
            Image.from_json("[1, 2]")

    def test_malformed_json_rejected(self):
        with self.assertRaises(PileFormatError):
            Image.from_json("{not json")


if __name__ == "__main__":
    unittest.main()
