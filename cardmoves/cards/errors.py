"""
Errors raised by the card model and its text notation.

Author: xwest
"""

from typing import Optional


class PileFormatError(ValueError):
    """
    Raised when pile notation cannot be decoded or a card cannot be encoded.

    ``position`` is the 0-based index of the offending card code, and
    ``pile_name`` is filled in when the failure happened while decoding a
    whole image.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        position: Optional[int] = None,
        pile_name: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.position = position
        self.pile_name = pile_name

    def in_pile(self, pile_name: str) -> "PileFormatError":
        """Return a copy of this error attributed to a named pile."""
        return PileFormatError(
            f"pile '{pile_name}': {self.message}",
            code=self.code,
            position=self.position,
            pile_name=pile_name
        )

    def __str__(self) -> str:
        return self.message
