"""
Test suite for cards, piles and the pile notation.

Tests cover:
- Card turnover and face queries
- Pile reversal, turning and splitting
- Notation encoding, decoding and error reporting
- Round trip of the notation for any encodable pile

Author: xwest
"""

import unittest

from hypothesis import given, strategies as st

from helpers import pile
from cardmoves.cards.card import Back, BackColor, Card, Face, Rank, Suit, Unknown
from cardmoves.cards.errors import PileFormatError
from cardmoves.cards.pile import Pile, decode_card, encode_card
from cardmoves.config import MovesConfiguration


ACE_OF_SPADES = Card.face_up(Rank.ACE, Suit.SPADES)


class TestCard(unittest.TestCase):
    """Test cases for single cards."""

    def test_turnover_swaps_designs(self):
        card = Card.face_down(Rank.TEN, Suit.HEARTS)
        turned = card.turnover()
        self.assertEqual(turned.visible, Face(Rank.TEN, Suit.HEARTS))
        self.assertEqual(turned.hidden, Back(BackColor.RED))
        self.assertEqual(turned.turnover(), card)

    def test_face_up_and_face(self):
        self.assertTrue(ACE_OF_SPADES.is_face_up)
        self.assertFalse(ACE_OF_SPADES.turnover().is_face_up)
        self.assertEqual(ACE_OF_SPADES.turnover().face, Face(Rank.ACE, Suit.SPADES))

    def test_double_backer_has_no_face(self):
        card = Card(Back(BackColor.BLUE), Back(BackColor.BLUE))
        self.assertIsNone(card.face)
        self.assertFalse(card.is_face_up)


class TestNotation(unittest.TestCase):
    """Test cases for the card and pile notation."""

    def test_case_encodes_orientation(self):
        self.assertEqual(encode_card(ACE_OF_SPADES), "AS")
        self.assertEqual(encode_card(ACE_OF_SPADES.turnover()), "as")
        self.assertEqual(decode_card("td"), Card.face_down(Rank.TEN, Suit.DIAMONDS))

    def test_special_codes(self):
        self.assertEqual(decode_card("X"), Card(Back(BackColor.RED), Unknown()))
        self.assertEqual(decode_card("x"), Card(Unknown(), Back(BackColor.RED)))
        self.assertEqual(decode_card("G"), Card(Back(BackColor.GREEN), Back(BackColor.GREEN)))

    def test_unencodable_card(self):
        blue_backed = Card.face_down(Rank.ACE, Suit.CLUBS, BackColor.BLUE)
        with self.assertRaises(PileFormatError):
            encode_card(blue_backed)

    def test_invalid_code_reports_position(self):
        with self.assertRaises(PileFormatError) as ctx:
            Pile.from_string("AS, KH, ZZ")
        self.assertEqual(ctx.exception.code, "ZZ")
        self.assertEqual(ctx.exception.position, 2)

    def test_whitespace_and_empty_items_ignored(self):
        self.assertEqual(pile(" AS ,\n kh,, "), pile("AS,kh"))
        self.assertEqual(len(Pile.from_string("")), 0)

    def test_thirteen_cards_per_line(self):
        text = Pile.full_deck().to_string()
        lines = text.split("\n")
        self.assertEqual(len(lines), 4)
        self.assertTrue(all(line.rstrip(",").count(",") == 12 for line in lines))
        self.assertTrue(lines[0].startswith("as,2s,3s"))

    def test_cards_per_line_configurable(self):
        text = pile("AS,2S,3S").to_string(MovesConfiguration(cards_per_line=2))
        self.assertEqual(text, "AS,2S,\n3S")

    def test_empty_pile_encodes_empty(self):
        self.assertEqual(Pile().to_string(), "")


codes = st.sampled_from(
    [f"{r.letter}{s.letter}" for r in Rank for s in Suit]
    + [f"{r.letter}{s.letter}".lower() for r in Rank for s in Suit]
    + ["X", "x", "R", "B", "G"]
)


class TestNotationRoundTrip(unittest.TestCase):

    @given(st.lists(codes, max_size=60))
    def test_round_trip(self, items):
        original = Pile(decode_card(code) for code in items)
        self.assertEqual(Pile.from_string(original.to_string()), original)

    @given(st.lists(codes, max_size=30))
    def test_turnover_is_an_involution(self, items):
        original = Pile(decode_card(code) for code in items)
        self.assertEqual(original.turnover().turnover(), original)
        self.assertEqual(original.turnover(), original.reverse().turn_each())


class TestPile(unittest.TestCase):
    """Test cases for pile operations."""

    def test_full_deck_order(self):
        deck = Pile.full_deck()
        self.assertEqual(len(deck), 52)
        self.assertEqual(deck[0], Card.face_down(Rank.ACE, Suit.SPADES))
        self.assertEqual(deck[13], Card.face_down(Rank.ACE, Suit.DIAMONDS))
        self.assertEqual(deck[26], Card.face_down(Rank.KING, Suit.CLUBS))
        self.assertEqual(deck[51], Card.face_down(Rank.ACE, Suit.HEARTS))

    def test_split(self):
        top, rest = pile("AS,2S,3S,4S").split(3)
        self.assertEqual(top, pile("AS,2S,3S"))
        self.assertEqual(rest, pile("4S"))

    def test_reverse_keeps_orientation(self):
        self.assertEqual(pile("AS,kd").reverse(), pile("kd,AS"))

    def test_turnover_flips_the_stack(self):
        self.assertEqual(pile("AS,kd,X").turnover(), pile("x,KD,as"))


if __name__ == "__main__":
    unittest.main()
