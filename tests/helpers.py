"""
Shared fixtures for the cardmoves tests.

Author: xwest
"""

from cardmoves.cards.image import Image
from cardmoves.cards.pile import Pile
from cardmoves.library.move_library import MoveLibrary
from cardmoves.parser.parser import parse_moves


def pile(text: str) -> Pile:
    """Shorthand for a pile in card notation."""
    return Pile.from_string(text)


def image(**piles: str) -> Image:
    """Build an image from keyword arguments in card notation."""
    return Image([(name, Pile.from_string(text)) for name, text in piles.items()])


def primitives() -> MoveLibrary:
    return MoveLibrary.with_primitives()


def parse_ok(source: str, library: MoveLibrary = None):
    """Parse ``source`` and fail loudly when it has problems."""
    result = parse_moves(library or primitives(), source)
    if result.has_errors():
        raise AssertionError("Unexpected problems: " + "; ".join(str(p) for p in result.problems))
    return result
