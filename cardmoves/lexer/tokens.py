"""
Token definitions for the move language lexer.

The language is line oriented, so newlines are real tokens. Everything
else is a keyword, a name, an integer or the '#' marker that declares an
integer argument.

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in the move language.
    """

    # Special tokens
    EOF = auto()                    # End of input
    NEWLINE = auto()                # Statement terminator

    # Literals and names
    INTEGER = auto()                # 3, 52
    IDENTIFIER = auto()             # deck, cut, faro-out
    DOC_TEXT = auto()               # Rest of the line after 'doc'

    # Keywords
    DEF = auto()                    # def (start a definition)
    DOC = auto()                    # doc (documentation line)
    TEMP = auto()                   # temp (declare temporary piles)
    REPEAT = auto()                 # repeat (bounded loop)
    END = auto()                    # end (close def / repeat)
    IGNORE = auto()                 # ignore (parse but do not run)

    # Punctuation
    HASH = auto()                   # # (integer argument marker)


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source text.

    Lines and columns are 1-based; offset is the 0-based character index.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A lexical token: type, raw text, semantic value and location.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # int for INTEGER, str for names and doc text
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_terminator(self) -> bool:
        return self.type in (TokenType.NEWLINE, TokenType.EOF)


# Reserved words; they can never be move, argument or pile names
KEYWORDS = {
    "def": TokenType.DEF,
    "doc": TokenType.DOC,
    "temp": TokenType.TEMP,
    "repeat": TokenType.REPEAT,
    "end": TokenType.END,
    "ignore": TokenType.IGNORE,
}

COMMENT_START = "--"
