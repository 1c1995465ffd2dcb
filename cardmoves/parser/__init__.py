"""
cardmoves Parser Package

Parses move source text into resolved definitions and moves.

Key Features:
- Recursive descent with backtracking alternatives
- Overload resolution by argument kinds at parse time
- Lexically scoped arguments, temporaries and nested definitions
- Problems reported as located values, furthest failure first

Author: xwest
"""

from .ast_nodes import (
    ArgKind, ArgSpec, Identifier, Location,
    ArgumentRef, TemporaryPileRef, Literal, Expr, Value, kind_of_value,
    Repeat, Do, Move, iter_invocations,
    Primitive, UserDefined, MoveDefinition,
)
from .errors import (
    Expectation, Expected, UnknownMove, NoSuchArgument, InvalidMoveInvocation,
    DuplicateDefinition, InvalidCharacter, LocatedProblem, ParseError,
    PARSER_ERROR_CODES,
)
from .parser import Parser, ParseResult, parse_moves, parse_file

__all__ = [
    # AST
    "ArgKind", "ArgSpec", "Identifier", "Location",
    "ArgumentRef", "TemporaryPileRef", "Literal", "Expr", "Value", "kind_of_value",
    "Repeat", "Do", "Move", "iter_invocations",
    "Primitive", "UserDefined", "MoveDefinition",

    # Problems
    "Expectation", "Expected", "UnknownMove", "NoSuchArgument",
    "InvalidMoveInvocation", "DuplicateDefinition", "InvalidCharacter",
    "LocatedProblem", "ParseError", "PARSER_ERROR_CODES",

    # Parsing
    "Parser", "ParseResult", "parse_moves", "parse_file",
]
