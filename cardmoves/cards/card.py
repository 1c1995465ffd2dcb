"""
Card designs and two-faced cards.

A card is a piece of cardboard with two printed sides. Which side is
currently showing is modelled by naming one design ``visible`` and the
other ``hidden``; turning the card over swaps the two names and never
changes the designs themselves.

Author: xwest
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Suit(Enum):
    """Card suits, valued by their notation letter."""
    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"

    @property
    def letter(self) -> str:
        return self.value


class Rank(Enum):
    """Card ranks, valued by their notation character."""
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def letter(self) -> str:
        return self.value


class BackColor(Enum):
    """The three back designs a deck can carry."""
    RED = "R"
    BLUE = "B"
    GREEN = "G"

    @property
    def letter(self) -> str:
        return self.value


@dataclass(frozen=True)
class Face:
    """A regular face: rank and suit."""
    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank.letter}{self.suit.letter}"


@dataclass(frozen=True)
class Back:
    """A card back of one color."""
    color: BackColor

    def __str__(self) -> str:
        return f"back({self.color.name.lower()})"


@dataclass(frozen=True)
class Unknown:
    """Placeholder for a face nobody has looked at yet."""

    def __str__(self) -> str:
        return "?"


Design = Union[Face, Back, Unknown]


@dataclass(frozen=True)
class Card:
    """
    A card with exactly one hidden and one visible design.

    Cards are immutable; ``turnover`` returns a new card.
    """
    hidden: Design
    visible: Design

    def turnover(self) -> "Card":
        """Swap which side is showing."""
        return Card(hidden=self.visible, visible=self.hidden)

    @property
    def is_face_up(self) -> bool:
        return not isinstance(self.visible, Back)

    @property
    def face(self) -> Optional[Design]:
        """The non-back design of the card, if it has one."""
        if not isinstance(self.visible, Back):
            return self.visible
        if not isinstance(self.hidden, Back):
            return self.hidden
        return None

    @classmethod
    def face_down(cls, rank: Rank, suit: Suit, back: BackColor = BackColor.RED) -> "Card":
        return cls(hidden=Face(rank, suit), visible=Back(back))

    @classmethod
    def face_up(cls, rank: Rank, suit: Suit, back: BackColor = BackColor.RED) -> "Card":
        return cls(hidden=Back(back), visible=Face(rank, suit))

    def __str__(self) -> str:
        return f"{self.visible}/{self.hidden}"
