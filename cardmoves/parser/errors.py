"""
Error handling for the move language parser.

Parse problems are plain values (``LocatedProblem``) so callers can list
and render them. Inside the parser they travel in a ``ParseError``
exception that also records how far into the token stream the failing
alternative got; alternation uses that to keep the most relevant
failures.

Author: xwest
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..lexer.tokens import SourceLocation, Token
from ..lexer.errors import Diagnostic, ErrorRecovery
from .ast_nodes import ArgKind, Expr, MoveDefinition


class Expectation(Enum):
    """Syntactic token classes the parser can ask for."""
    PILE_NAME = "a pile name"
    ARGUMENT_NAME = "an argument name"
    ARGUMENT_NUMBER_NAME = "an integer argument name"
    INTEGER = "an integer"
    END_OF_LINE = "the end of the line"
    END_OF_INPUT = "the end of the input"
    KEYWORD = "a keyword"
    MOVE_NAME = "a move name"


# ============================================================================
# Problems
# ============================================================================

@dataclass(frozen=True)
class Expected:
    """A token of some class was expected here."""
    expectation: Expectation
    keyword: Optional[str] = None

    def describe(self) -> str:
        if self.expectation == Expectation.KEYWORD and self.keyword:
            return f"Expected keyword '{self.keyword}'"
        return f"Expected {self.expectation.value}"


@dataclass(frozen=True)
class UnknownMove:
    """No definition of any kind has this name."""
    name: str

    def describe(self) -> str:
        return f"Unknown move '{self.name}'"


@dataclass(frozen=True)
class NoSuchArgument:
    """A name used inside a definition is not an argument or temporary."""
    name: str
    kind: ArgKind

    def describe(self) -> str:
        return f"No {self.kind.label} argument named '{self.name}'"


@dataclass(frozen=True)
class InvalidMoveInvocation:
    """Definitions with this name exist, but none takes these argument kinds."""
    actuals: Tuple[Expr, ...]
    candidates: Tuple[MoveDefinition, ...]

    def describe(self) -> str:
        kinds = " ".join(actual.kind.label for actual in self.actuals) or "no arguments"
        name = self.candidates[0].name if self.candidates else "move"
        options = "; ".join(candidate.signature for candidate in self.candidates)
        return f"No '{name}' takes ({kinds}); available: {options}"


@dataclass(frozen=True)
class DuplicateDefinition:
    """A definition with the same identifier already exists."""
    previous: MoveDefinition

    def describe(self) -> str:
        return f"'{self.previous.identifier}' is already defined"


@dataclass(frozen=True)
class InvalidCharacter:
    """The lexer could not tokenize a character."""
    character: str

    def describe(self) -> str:
        return f"Invalid character '{self.character}'"


Problem = Union[Expected, UnknownMove, NoSuchArgument, InvalidMoveInvocation,
                DuplicateDefinition, InvalidCharacter]


@dataclass(frozen=True)
class LocatedProblem:
    """A parse problem and the 1-based row and column it was found at."""
    row: int
    column: int
    problem: Problem

    def __str__(self) -> str:
        return f"{self.row}:{self.column}: {self.problem.describe()}"


# ============================================================================
# Exception used inside the parser
# ============================================================================

class ParseError(Exception):
    """
    Raised inside the parser when an alternative fails.

    ``progress`` is the index of the token the parser had reached; of
    several failed alternatives, the ones with the highest progress are
    reported.
    """

    def __init__(
        self,
        problems: List[LocatedProblem],
        progress: int,
        location: Optional[SourceLocation] = None,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        message = "; ".join(str(problem) for problem in problems)
        super().__init__(message)
        self.problems = problems
        self.progress = progress
        self.token = token
        self.diagnostic = Diagnostic(
            message=message,
            location=location or SourceLocation("<moves>", 0, 0, 0),
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @classmethod
    def merge(cls, errors: Iterable["ParseError"]) -> "ParseError":
        """Combine failed alternatives, keeping those that got furthest."""
        errors = list(errors)
        furthest = max(error.progress for error in errors)
        problems: List[LocatedProblem] = []
        for error in errors:
            if error.progress == furthest:
                problems.extend(error.problems)
        best = next(error for error in errors if error.progress == furthest)
        return cls(
            dedupe_problems(problems),
            furthest,
            location=best.diagnostic.location,
            token=best.token,
            code=best.diagnostic.code,
            help_text=best.diagnostic.help_text,
            suggestions=best.diagnostic.suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


def dedupe_problems(problems: Iterable[LocatedProblem]) -> List[LocatedProblem]:
    """
    Keep one problem per location, in first-seen order.

    The first problem at a location wins, except that an ``Expected``
    gives way to a later, more specific problem at the same place.
    """
    by_location: Dict[Tuple[int, int], LocatedProblem] = {}
    for problem in problems:
        key = (problem.row, problem.column)
        kept = by_location.get(key)
        if kept is None:
            by_location[key] = problem
        elif isinstance(kept.problem, Expected) and not isinstance(problem.problem, Expected):
            by_location[key] = problem
    return list(by_location.values())


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Unknown move",
    "P003": "No such argument",
    "P004": "Invalid move invocation",
    "P005": "Duplicate definition",
    "P006": "Invalid character",
}


# Helper functions for creating common parser errors

def _locate(token: Token, problem: Problem) -> LocatedProblem:
    return LocatedProblem(token.location.line, token.location.column, problem)


def create_expected_error(expectation: Expectation, found: Token, progress: int,
                          keyword: Optional[str] = None) -> ParseError:
    """Create an error for a token of the wrong class."""
    problem = Expected(expectation, keyword)
    suggestions = []
    if expectation == Expectation.KEYWORD and found.type.name == "IDENTIFIER":
        suggestions = [f"Did you mean '{word}'?"
                       for word in ErrorRecovery.suggest_keyword_corrections(found.lexeme)]
    return ParseError(
        [_locate(found, problem)],
        progress,
        location=found.location,
        token=found,
        code="P001",
        help_text=f"{problem.describe()}, found {found.type.name}",
        suggestions=suggestions
    )


def create_unknown_move_error(name_token: Token, progress: int,
                              known_names: Iterable[str] = ()) -> ParseError:
    """Create an error for an invocation of an undefined move."""
    similar = ErrorRecovery.suggest_similar(name_token.lexeme, known_names)
    return ParseError(
        [_locate(name_token, UnknownMove(name_token.lexeme))],
        progress,
        location=name_token.location,
        token=name_token,
        code="P002",
        help_text="Moves must be defined before they are used.",
        suggestions=[f"Did you mean '{name}'?" for name in similar]
    )


def create_no_such_argument_error(name_token: Token, kind: ArgKind, progress: int) -> ParseError:
    """Create an error for a name that is not in scope inside a definition."""
    return ParseError(
        [_locate(name_token, NoSuchArgument(name_token.lexeme, kind))],
        progress,
        location=name_token.location,
        token=name_token,
        code="P003",
        help_text="Inside a definition, piles must be arguments or temporaries."
    )


def create_invalid_invocation_error(name_token: Token, actuals, candidates,
                                    progress: int) -> ParseError:
    """Create an error for an invocation matching no overload."""
    return ParseError(
        [_locate(name_token, InvalidMoveInvocation(tuple(actuals), tuple(candidates)))],
        progress,
        location=name_token.location,
        token=name_token,
        code="P004",
        help_text="Check the number and kinds of the arguments."
    )


def create_duplicate_definition_error(name_token: Token, previous: MoveDefinition,
                                      progress: int) -> ParseError:
    """Create an error for a definition whose identifier already exists."""
    return ParseError(
        [_locate(name_token, DuplicateDefinition(previous))],
        progress,
        location=name_token.location,
        token=name_token,
        code="P005",
        help_text="Remove the existing definition first, or rename this one."
    )
