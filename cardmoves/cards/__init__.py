"""
cardmoves Card Model Package

The data the move language operates on:
- Card designs (faces, backs, unknown placeholders) and two-faced cards
- Immutable piles with a round-tripping text notation
- Images: ordered collections of named piles

Author: xwest
"""

from .card import Card, Face, Back, Unknown, Design, Rank, Suit, BackColor
from .pile import Pile, encode_card, decode_card
from .image import Image
from .errors import PileFormatError

__all__ = [
    # Cards
    "Card", "Face", "Back", "Unknown", "Design",
    "Rank", "Suit", "BackColor",

    # Piles and images
    "Pile", "Image",
    "encode_card", "decode_card",

    # Error handling
    "PileFormatError",
]
