"""
Piles of cards and the compact text notation used to store them.

Notation: every card is one or two characters, cards are separated by
commas and grouped 13 per line. Ordinary red-backed cards are written
rank + suit, upper case when face up (``AS``) and lower case when face
down (``as``). ``X`` / ``x`` is an unknown face on a red back, and the
single letters ``R``, ``B`` and ``G`` are double backers of that color.

Author: xwest
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..config import MovesConfiguration, DEFAULT_CONFIGURATION
from .card import Back, BackColor, Card, Face, Rank, Suit, Unknown
from .errors import PileFormatError


def _build_decoding_table() -> Dict[str, Card]:
    """Map every valid card code to the card it denotes."""
    table: Dict[str, Card] = {}
    red = Back(BackColor.RED)

    for suit in Suit:
        for rank in Rank:
            code = f"{rank.letter}{suit.letter}"
            table[code] = Card(hidden=red, visible=Face(rank, suit))
            table[code.lower()] = Card(hidden=Face(rank, suit), visible=red)

    table["X"] = Card(hidden=red, visible=Unknown())
    table["x"] = Card(hidden=Unknown(), visible=red)

    for color in BackColor:
        table[color.letter] = Card(hidden=Back(color), visible=Back(color))

    return table


_DECODING_TABLE = _build_decoding_table()
_ENCODING_TABLE = {card: code for code, card in _DECODING_TABLE.items()}


def encode_card(card: Card) -> str:
    """Return the notation code for a card, or raise PileFormatError."""
    code = _ENCODING_TABLE.get(card)
    if code is None:
        raise PileFormatError(f"Card {card} has no notation code", code=str(card))
    return code


def decode_card(code: str, position: Optional[int] = None) -> Card:
    """Return the card denoted by a notation code, or raise PileFormatError."""
    card = _DECODING_TABLE.get(code)
    if card is None:
        where = f" at position {position}" if position is not None else ""
        raise PileFormatError(
            f"Invalid card code '{code}'{where}",
            code=code,
            position=position
        )
    return card


@dataclass(frozen=True, init=False)
class Pile:
    """
    An ordered, immutable sequence of cards. Index 0 is the top card.
    """
    cards: Tuple[Card, ...] = ()

    def __init__(self, cards: Iterable[Card] = ()):
        object.__setattr__(self, "cards", tuple(cards))

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Pile(self.cards[index])
        return self.cards[index]

    def __add__(self, other: "Pile") -> "Pile":
        return Pile(self.cards + tuple(other))

    def __bool__(self) -> bool:
        return bool(self.cards)

    def reverse(self) -> "Pile":
        """Reverse the order of the cards, leaving each card as it is."""
        return Pile(reversed(self.cards))

    def turn_each(self) -> "Pile":
        """Turn every card over in place, keeping the order."""
        return Pile(card.turnover() for card in self.cards)

    def turnover(self) -> "Pile":
        """Flip the whole stack: reverse the order and turn every card."""
        return Pile(card.turnover() for card in reversed(self.cards))

    def split(self, n: int) -> Tuple["Pile", "Pile"]:
        """Split off the top ``n`` cards: returns (top, rest)."""
        return Pile(self.cards[:n]), Pile(self.cards[n:])

    def to_string(self, config: Optional[MovesConfiguration] = None) -> str:
        """Encode the pile in card notation."""
        config = config or DEFAULT_CONFIGURATION
        codes = [encode_card(card) for card in self.cards]
        per_line = config.cards_per_line
        lines = [
            ",".join(codes[start:start + per_line])
            for start in range(0, len(codes), per_line)
        ]
        return ",\n".join(lines)

    @classmethod
    def from_string(cls, text: str) -> "Pile":
        """Decode card notation. Whitespace and empty items are ignored."""
        cards: List[Card] = []
        position = 0
        for item in text.split(","):
            code = item.strip()
            if not code:
                continue
            cards.append(decode_card(code, position))
            position += 1
        return cls(cards)

    @classmethod
    def full_deck(cls, back: BackColor = BackColor.RED) -> "Pile":
        """
        A face-down 52-card deck in new deck order.

        From the top: A-K of spades, A-K of diamonds, K-A of clubs,
        K-A of hearts.
        """
        ranks = list(Rank)
        order = [
            (Suit.SPADES, ranks),
            (Suit.DIAMONDS, ranks),
            (Suit.CLUBS, ranks[::-1]),
            (Suit.HEARTS, ranks[::-1]),
        ]
        return cls(
            Card.face_down(rank, suit, back)
            for suit, suit_ranks in order
            for rank in suit_ranks
        )

    def __str__(self) -> str:
        return "[" + ", ".join(str(card) for card in self.cards) + "]"
