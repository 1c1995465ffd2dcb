"""
Error handling for the move language lexer.

Provides diagnostics with source locations plus the edit-distance helper
the parser uses to suggest move names.

Author: xwest
"""

from typing import Optional, List, Iterable
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A located message (error, warning, info, hint)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the lexer meets a character it cannot tokenize.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        character: str = "",
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.character = character
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class ErrorRecovery:
    """
    Suggestion helpers shared by the lexer and the parser.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str) -> List[str]:
        """Suggest keywords within two edits of a word."""
        from .tokens import KEYWORDS
        return ErrorRecovery.suggest_similar(invalid_word, KEYWORDS.keys())

    @staticmethod
    def suggest_similar(word: str, candidates: Iterable[str], max_distance: int = 2) -> List[str]:
        """Return up to three candidates closest to ``word``."""
        scored = []
        for candidate in set(candidates):
            distance = ErrorRecovery._edit_distance(word.lower(), candidate.lower())
            if distance <= max_distance:
                scored.append((distance, candidate))
        return [candidate for _, candidate in sorted(scored)[:3]]

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Lexer error codes
ERROR_CODES = {
    "L001": "Invalid character",
}


def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for an invalid character."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in move source text."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Invalid character: '{char}'",
        location=location,
        character=char,
        code="L001",
        help_text=help_text,
        suggestions=["Names use letters, digits, '_' and '-'", "Comments start with '--'"]
    )
